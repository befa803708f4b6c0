from __future__ import annotations

from dataclasses import dataclass

from tabletop.engine.cards import SUITS, Card, Suit

from .actions import Action, Draw, Play, PlayWild
from .rules import can_play_on, is_wild


@dataclass(frozen=True)
class ObserverView:
    """What anyone watching the table may see.

    `discarded` excludes `top_card`. Hands are reported by size only:
    `player_card_count[p]` is the number of cards player p holds.
    """

    whose_turn: int
    current_suit: Suit
    discarded: tuple[Card, ...]
    top_card: Card
    player_card_count: tuple[int, ...]
    draw_pile_remaining: int


@dataclass(frozen=True)
class PlayerView:
    """An ObserverView plus one player's own hand. Only show it to that player."""

    player: int
    hand: tuple[Card, ...]
    observer_view: ObserverView

    @property
    def is_my_turn(self) -> bool:
        return self.observer_view.whose_turn == self.player

    def valid_actions(self) -> list[Action]:
        """Every action the view's player may legally submit right now.

        Empty when it is not this player's turn. A wild card yields one
        PlayWild per suit; if nothing in hand can be played the only action
        is Draw.
        """
        if not self.is_my_turn:
            return []

        top_card = self.observer_view.top_card
        current_suit = self.observer_view.current_suit
        actions: list[Action] = []
        for card in self.hand:
            if is_wild(card):
                actions.extend(PlayWild(card=card, suit=suit) for suit in SUITS)
            elif can_play_on(card, top_card, current_suit):
                actions.append(Play(card=card))

        if not actions:
            return [Draw()]
        return actions
