from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path

from jsonschema import Draft202012Validator

from tabletop.paths import get_paths

from .errors import SerializationError


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise SerializationError(f"Missing schema file: {path}") from e
    except json.JSONDecodeError as e:
        raise SerializationError(f"Invalid JSON in {path}: {e}") from e


@lru_cache(maxsize=None)
def _validator(name: str) -> Draft202012Validator:
    schema = _load_json(get_paths().schema_dir / f"{name}.schema.json")
    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema)


def validate_json(instance: object, name: str, *, context: str | None = None) -> None:
    """Validate `instance` against the bundled schema `<name>.schema.json`."""
    validator = _validator(name)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        lines = [f"Schema validation failed for {context or name}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise SerializationError("\n".join(lines))
