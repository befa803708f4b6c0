from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Literal

Suit = Literal["Clubs", "Diamonds", "Hearts", "Spades"]
Color = Literal["Red", "Black"]
RankOrdering = Literal["ace_high", "ace_low"]

SUITS: tuple[Suit, ...] = ("Clubs", "Diamonds", "Hearts", "Spades")
COLORS: tuple[Color, ...] = ("Red", "Black")

_SUIT_COLORS: dict[str, Color] = {
    "Clubs": "Black",
    "Spades": "Black",
    "Diamonds": "Red",
    "Hearts": "Red",
}


def suit_color(suit: Suit) -> Color:
    return _SUIT_COLORS[suit]


def color_suits(color: Color) -> tuple[Suit, Suit]:
    if color == "Red":
        return ("Diamonds", "Hearts")
    return ("Clubs", "Spades")


class Rank(IntEnum):
    """Card face value. The integer value is the wire encoding (Ace=1)."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    def next_with_wrapping(self) -> "Rank":
        return Rank(self.value % 13 + 1)

    def previous_with_wrapping(self) -> "Rank":
        return Rank((self.value - 2) % 13 + 1)

    def next(self, ordering: RankOrdering) -> "Rank | None":
        """Next rank up, or None past the top of the given convention.

        With ace_high the Ace is the top rank; with ace_low the King is.
        """
        top = Rank.ACE if ordering == "ace_high" else Rank.KING
        if self is top:
            return None
        return self.next_with_wrapping()

    def previous(self, ordering: RankOrdering) -> "Rank | None":
        bottom = Rank.TWO if ordering == "ace_high" else Rank.ACE
        if self is bottom:
            return None
        return self.previous_with_wrapping()

    def next_with_ace_high(self) -> "Rank | None":
        return self.next("ace_high")

    def next_with_ace_low(self) -> "Rank | None":
        return self.next("ace_low")

    def previous_with_ace_high(self) -> "Rank | None":
        return self.previous("ace_high")

    def previous_with_ace_low(self) -> "Rank | None":
        return self.previous("ace_low")


@dataclass(frozen=True, order=True)
class Card:
    rank: Rank
    suit: Suit

    def __post_init__(self) -> None:
        if self.suit not in _SUIT_COLORS:
            raise ValueError(f"Invalid suit: {self.suit!r}. Must be one of {SUITS}")
        # Accept plain ints (1..13) and normalise to Rank.
        object.__setattr__(self, "rank", Rank(self.rank))

    @property
    def color(self) -> Color:
        return suit_color(self.suit)

    def __str__(self) -> str:
        return f"{self.rank.name.title()} of {self.suit}"

    def to_list(self) -> list[object]:
        return [int(self.rank), self.suit]

    @staticmethod
    def from_list(raw: object) -> "Card":
        if not isinstance(raw, (list, tuple)) or len(raw) != 2:
            raise ValueError(f"Expected [rank, suit], got {raw!r}")
        rank, suit = raw
        if isinstance(rank, bool) or not isinstance(rank, int):
            raise ValueError(f"Rank must be an int 1..13, got {rank!r}")
        return Card(Rank(rank), suit)


STANDARD_DECK: tuple[Card, ...] = tuple(Card(rank, suit) for rank in Rank for suit in SUITS)
