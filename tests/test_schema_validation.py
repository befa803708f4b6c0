from __future__ import annotations

import json

import pytest
from jsonschema import Draft202012Validator

from tabletop.engine.errors import SerializationError
from tabletop.engine.schema import validate_json
from tabletop.paths import get_paths


def test_bundled_schemas_are_valid() -> None:
    schema_files = sorted(get_paths().schema_dir.glob("*.schema.json"))
    assert {p.name.removesuffix(".schema.json") for p in schema_files} == {
        "crazy_eights_history",
        "crazy_eights_observer_view",
        "crazy_eights_player_view",
        "marooned_game",
        "tic_tac_toe_game",
    }
    for path in schema_files:
        Draft202012Validator.check_schema(json.loads(path.read_text(encoding="utf-8")))


def test_validate_json_reports_at_most_ten_errors() -> None:
    bad = {"history": [[9, 9]] * 9}
    with pytest.raises(SerializationError) as excinfo:
        validate_json(bad, "tic_tac_toe_game")
    lines = str(excinfo.value).splitlines()
    assert lines[0] == "Schema validation failed for tic_tac_toe_game:"
    assert 1 < len(lines) <= 11


def test_unknown_schema_name() -> None:
    with pytest.raises(SerializationError):
        validate_json({}, "no_such_game")
