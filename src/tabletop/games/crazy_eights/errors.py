from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from tabletop.engine.cards import Card, Suit
from tabletop.engine.errors import SettingsError


class InvalidNumberOfPlayers(SettingsError):
    pass


@dataclass(frozen=True)
class NotPlayerTurn:
    attempted_player: int
    correct_player: int
    type: Literal["NotPlayerTurn"] = "NotPlayerTurn"

    @property
    def message(self) -> str:
        return f"It's P{self.correct_player}'s turn and not P{self.attempted_player}'s turn"


@dataclass(frozen=True)
class CantDrawWhenYouHavePlayableCards:
    player: int
    playable: tuple[Card, ...]
    type: Literal["CantDrawWhenYouHavePlayableCards"] = "CantDrawWhenYouHavePlayableCards"

    @property
    def message(self) -> str:
        cards = ", ".join(str(c) for c in self.playable)
        return f"Player P{self.player} can't draw because they have playable cards [{cards}]"


@dataclass(frozen=True)
class PlayerDoesNotHaveCard:
    player: int
    card: Card
    type: Literal["PlayerDoesNotHaveCard"] = "PlayerDoesNotHaveCard"

    @property
    def message(self) -> str:
        return f"Player P{self.player} does not have card {self.card}"


@dataclass(frozen=True)
class CardCantBePlayed:
    attempted_card: Card
    top_card: Card
    current_suit: Suit
    type: Literal["CardCantBePlayed"] = "CardCantBePlayed"

    @property
    def message(self) -> str:
        return (
            f"The card {self.attempted_card} can not be played when the current suit is "
            f"{self.current_suit} and rank is {self.top_card.rank.name.title()}"
        )


@dataclass(frozen=True)
class CantPlayWildAsRegularCard:
    card: Card
    type: Literal["CantPlayWildAsRegularCard"] = "CantPlayWildAsRegularCard"

    @property
    def message(self) -> str:
        return f"Can't play the wild card {self.card} as a regular card"


@dataclass(frozen=True)
class CantPlayNonWildAsWild:
    card: Card
    type: Literal["CantPlayNonWildAsWild"] = "CantPlayNonWildAsWild"

    @property
    def message(self) -> str:
        return f"Can't play {self.card} as a wild card"


ActionError = (
    NotPlayerTurn
    | CantDrawWhenYouHavePlayableCards
    | PlayerDoesNotHaveCard
    | CardCantBePlayed
    | CantPlayWildAsRegularCard
    | CantPlayNonWildAsWild
)
