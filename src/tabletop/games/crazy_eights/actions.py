from __future__ import annotations

from dataclasses import dataclass

from tabletop.engine.cards import Card, Suit


@dataclass(frozen=True)
class Draw:
    """Take the top card of the draw pile, reshuffling the discards if it is empty."""


@dataclass(frozen=True)
class Play:
    card: Card


@dataclass(frozen=True)
class PlayWild:
    """Play a wild card and name the suit the next player must follow."""

    card: Card
    suit: Suit


Action = Draw | Play | PlayWild
