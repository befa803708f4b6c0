from __future__ import annotations

from tabletop.engine.cards import Card, Rank, Suit

WILD_RANK = Rank.EIGHT

MIN_PLAYERS = 2
MAX_PLAYERS = 8


def starting_cards_per_player(number_of_players: int) -> int:
    # House rule: heads-up games deal a bigger hand.
    return 7 if number_of_players == 2 else 5


def is_wild(card: Card) -> bool:
    return card.rank == WILD_RANK


def can_play_on(card: Card, top_card: Card, current_suit: Suit) -> bool:
    return is_wild(card) or card.rank == top_card.rank or card.suit == current_suit
