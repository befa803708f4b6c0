"""Shared primitives for the game engines: cards, seeded randomness, step results.

IMPORTANT: This package does no I/O beyond reading its bundled schemas.
"""

from .cards import COLORS, STANDARD_DECK, SUITS, Card, Color, Rank, RankOrdering, Suit, color_suits, suit_color
from .errors import InvalidSeed, SerializationError, SettingsError
from .rand import Rng, RngSeed
from .step import Event, StepResult

__all__ = [
    "COLORS",
    "Card",
    "Color",
    "Event",
    "InvalidSeed",
    "Rank",
    "RankOrdering",
    "Rng",
    "RngSeed",
    "STANDARD_DECK",
    "SUITS",
    "SerializationError",
    "SettingsError",
    "StepResult",
    "Suit",
    "color_suits",
    "suit_color",
]
