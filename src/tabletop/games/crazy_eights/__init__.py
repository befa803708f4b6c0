"""Crazy Eights: the matching card game with eights wild.

GameHistory (settings + action log) is the durable form of a game;
GameState is rebuilt from it by replay. Players only ever see PlayerViews.
"""

from .actions import Action, Draw, Play, PlayWild
from .errors import (
    ActionError,
    CantDrawWhenYouHavePlayableCards,
    CantPlayNonWildAsWild,
    CantPlayWildAsRegularCard,
    CardCantBePlayed,
    InvalidNumberOfPlayers,
    NotPlayerTurn,
    PlayerDoesNotHaveCard,
)
from .rules import WILD_RANK
from .state import GameHistory, GameState, InProgress, Settings, Status, Win
from .views import ObserverView, PlayerView

__all__ = [
    "Action",
    "ActionError",
    "CantDrawWhenYouHavePlayableCards",
    "CantPlayNonWildAsWild",
    "CantPlayWildAsRegularCard",
    "CardCantBePlayed",
    "Draw",
    "GameHistory",
    "GameState",
    "InProgress",
    "InvalidNumberOfPlayers",
    "NotPlayerTurn",
    "ObserverView",
    "Play",
    "PlayWild",
    "PlayerDoesNotHaveCard",
    "PlayerView",
    "Settings",
    "Status",
    "WILD_RANK",
    "Win",
]
