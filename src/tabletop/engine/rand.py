from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, MutableSequence

from .errors import InvalidSeed

SEED_LENGTH = 32


class Rng:
    """An owned, explicitly threaded pseudorandom generator.

    Games keep one of these in their state and advance it on every shuffle.
    Two generators compare equal when they would produce the same future
    sequence, which is what makes replayed states comparable to live ones.
    """

    def __init__(self, source: random.Random) -> None:
        self._random = source

    def shuffle(self, items: MutableSequence[Any]) -> None:
        """Fisher-Yates driven only by random().

        The random() sequence for an int seed is fixed across Python
        releases; random.shuffle's is not. Stored histories depend on this.
        """
        draw = self._random.random
        for i in reversed(range(1, len(items))):
            j = int(draw() * (i + 1))
            items[i], items[j] = items[j], items[i]

    def clone(self) -> "Rng":
        source = random.Random()
        source.setstate(self._random.getstate())
        return Rng(source)

    def state(self) -> object:
        return self._random.getstate()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rng):
            return NotImplemented
        return self._random.getstate() == other._random.getstate()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Rng(<{id(self):#x}>)"


@dataclass(frozen=True, order=True)
class RngSeed:
    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, (bytes, bytearray)):
            raise InvalidSeed(f"Seed must be bytes, got {type(self.value).__name__}")
        if len(self.value) != SEED_LENGTH:
            raise InvalidSeed(f"Seed must be exactly {SEED_LENGTH} bytes, got {len(self.value)}")
        object.__setattr__(self, "value", bytes(self.value))

    @staticmethod
    def from_hex(text: str) -> "RngSeed":
        try:
            raw = bytes.fromhex(text)
        except (TypeError, ValueError) as e:
            raise InvalidSeed(f"Seed is not valid hex: {text!r}") from e
        return RngSeed(raw)

    @staticmethod
    def repeat(byte: int) -> "RngSeed":
        """Seed made of one repeated byte, e.g. RngSeed.repeat(0) for all zeros."""
        return RngSeed(bytes([byte]) * SEED_LENGTH)

    def hex(self) -> str:
        return self.value.hex()

    def into_rng(self) -> Rng:
        return Rng(random.Random(int.from_bytes(self.value, "big")))
