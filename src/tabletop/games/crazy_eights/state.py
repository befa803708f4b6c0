from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Iterator

from tabletop.engine.cards import STANDARD_DECK, Card, Suit
from tabletop.engine.errors import InvalidSeed
from tabletop.engine.rand import Rng, RngSeed
from tabletop.engine.step import Event, StepResult
from tabletop.logging_utils import get_logger

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
from .rules import MAX_PLAYERS, MIN_PLAYERS, can_play_on, is_wild, starting_cards_per_player
from .views import ObserverView, PlayerView

logger = get_logger(__name__)


@dataclass(frozen=True)
class Settings:
    seed: RngSeed
    number_of_players: int

    def __post_init__(self) -> None:
        if not isinstance(self.seed, RngSeed):
            raise InvalidSeed(f"seed must be an RngSeed, got {type(self.seed).__name__}")
        n = self.number_of_players
        if isinstance(n, bool) or not isinstance(n, int) or not MIN_PLAYERS <= n <= MAX_PLAYERS:
            raise InvalidNumberOfPlayers(
                f"number_of_players must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {n!r}"
            )

    def players(self) -> tuple[int, ...]:
        return tuple(range(self.number_of_players))

    @property
    def starting_cards_per_player(self) -> int:
        return starting_cards_per_player(self.number_of_players)


@dataclass(frozen=True)
class InProgress:
    pass


@dataclass(frozen=True)
class Win:
    player: int


Status = InProgress | Win


@dataclass(frozen=True)
class GameHistory:
    """Settings plus the append-only action log.

    This is the durable form of a game: the live GameState is always
    rebuilt from it by replay, and whose turn it is comes from the log
    length alone.
    """

    settings: Settings
    actions: tuple[Action, ...] = ()

    @staticmethod
    def new(settings: Settings) -> "GameHistory":
        return GameHistory(settings=settings)

    def appended(self, action: Action) -> "GameHistory":
        return GameHistory(settings=self.settings, actions=self.actions + (action,))

    def whose_turn(self) -> int:
        return len(self.actions) % self.settings.number_of_players

    def history(self) -> Iterator[tuple[int, Action]]:
        """(player, action) pairs in the order they were taken."""
        n = self.settings.number_of_players
        for i, action in enumerate(self.actions):
            yield i % n, action

    def game_state(self) -> StepResult[GameState, ActionError]:
        """Replay the log from a fresh deal. Stops at the first rejected action."""
        state = GameState.new(self.settings)
        events: list[Event] = []
        for action in self.actions:
            result = state.make_move(state.whose_turn(), action)
            if not result.ok:
                return result
            events.extend(result.events)
        return StepResult.accepted(state, events)


@dataclass
class GameState:
    game_history: GameHistory
    rng: Rng
    discarded: list[Card]
    hands: list[list[Card]]
    draw_pile: list[Card]
    top_card: Card
    current_suit: Suit

    @staticmethod
    def new(settings: Settings) -> "GameState":
        rng = settings.seed.into_rng()
        cards = list(STANDARD_DECK)
        rng.shuffle(cards)

        per_player = settings.starting_cards_per_player
        hands: list[list[Card]] = []
        for player in settings.players():
            start = player * per_player
            hands.append(cards[start : start + per_player])

        dealt = per_player * settings.number_of_players
        top_card = cards[dealt]
        return GameState(
            game_history=GameHistory.new(settings),
            rng=rng,
            discarded=[],
            hands=hands,
            draw_pile=cards[dealt + 1 :],
            top_card=top_card,
            current_suit=top_card.suit,
        )

    @property
    def settings(self) -> Settings:
        return self.game_history.settings

    def clone(self) -> "GameState":
        return GameState(
            game_history=self.game_history,
            rng=self.rng.clone(),
            discarded=list(self.discarded),
            hands=[list(hand) for hand in self.hands],
            draw_pile=list(self.draw_pile),
            top_card=self.top_card,
            current_suit=self.current_suit,
        )

    def players(self) -> tuple[int, ...]:
        return self.settings.players()

    def whose_turn(self) -> int:
        return self.game_history.whose_turn()

    def history(self) -> Iterator[tuple[int, Action]]:
        return self.game_history.history()

    def status(self) -> Status:
        for player in self.players():
            if not self.hands[player]:
                return Win(player=player)
        return InProgress()

    # ------------------------------------------------------------------
    # Views

    def observer_view(self) -> ObserverView:
        return ObserverView(
            whose_turn=self.whose_turn(),
            current_suit=self.current_suit,
            discarded=tuple(self.discarded),
            top_card=self.top_card,
            player_card_count=tuple(len(self.hands[player]) for player in self.players()),
            draw_pile_remaining=len(self.draw_pile),
        )

    def player_view(self, player: int) -> PlayerView:
        if isinstance(player, bool) or player not in self.players():
            raise ValueError(f"No player {player!r} in a {self.settings.number_of_players} player game")
        return PlayerView(
            player=player,
            hand=tuple(self.hands[player]),
            observer_view=self.observer_view(),
        )

    def current_player_view(self) -> PlayerView:
        return self.player_view(self.whose_turn())

    # ------------------------------------------------------------------
    # Moves

    def apply_action(self, player: int, action: Action) -> StepResult[GameState, ActionError]:
        """Return the game after `action`, leaving this state untouched."""
        error = self._validate(player, action)
        if error is not None:
            logger.debug("Rejected %r from P%s: %s", action, player, error.message)
            return StepResult.rejected(error)
        new_state = self.clone()
        events = new_state._perform(player, action)
        return StepResult.accepted(new_state, events)

    def make_move(self, player: int, action: Action) -> StepResult[GameState, ActionError]:
        """Apply `action` in place. On rejection nothing changes."""
        error = self._validate(player, action)
        if error is not None:
            logger.debug("Rejected %r from P%s: %s", action, player, error.message)
            return StepResult.rejected(error)
        events = self._perform(player, action)
        return StepResult.accepted(self, events)

    def undo(self) -> Action | None:
        """Take back the most recent action and return it.

        The earlier position is rebuilt by replaying the shortened log, so
        piles and generator state match exactly, reshuffles included.
        """
        actions = self.game_history.actions
        if not actions:
            return None
        previous = GameHistory(settings=self.settings, actions=actions[:-1]).game_state()
        if not previous.ok or previous.state is None:
            raise RuntimeError(f"History prefix failed to replay: {previous.error}")
        for f in fields(self):
            setattr(self, f.name, getattr(previous.state, f.name))
        logger.debug("Undid %r, P%s to move", actions[-1], self.whose_turn())
        return actions[-1]

    def playable_cards(self, player: int) -> tuple[Card, ...]:
        return tuple(
            card for card in self.hands[player] if can_play_on(card, self.top_card, self.current_suit)
        )

    def _validate(self, player: int, action: Action) -> ActionError | None:
        whose_turn = self.whose_turn()
        if player != whose_turn:
            return NotPlayerTurn(attempted_player=player, correct_player=whose_turn)

        if isinstance(action, Draw):
            playable = self.playable_cards(player)
            if playable:
                return CantDrawWhenYouHavePlayableCards(player=player, playable=playable)
            return None

        if isinstance(action, Play):
            if is_wild(action.card):
                return CantPlayWildAsRegularCard(card=action.card)
        elif isinstance(action, PlayWild):
            if not is_wild(action.card):
                return CantPlayNonWildAsWild(card=action.card)
        else:
            raise TypeError(f"Unknown action: {action!r}")

        card = action.card
        if card not in self.hands[player]:
            return PlayerDoesNotHaveCard(player=player, card=card)
        if not can_play_on(card, self.top_card, self.current_suit):
            return CardCantBePlayed(
                attempted_card=card,
                top_card=self.top_card,
                current_suit=self.current_suit,
            )
        return None

    def _perform(self, player: int, action: Action) -> list[Event]:
        events: list[Event] = []
        if isinstance(action, Draw):
            if not self.draw_pile and self.discarded:
                self._reshuffle(events)
            if self.draw_pile:
                self.hands[player].append(self.draw_pile.pop())
                events.append({"type": "CARD_DRAWN", "player": player})
            else:
                events.append({"type": "NOTHING_TO_DRAW", "player": player})
        else:
            card = action.card
            self.discarded.append(self.top_card)
            self.top_card = card
            self.hands[player].remove(card)
            self.current_suit = action.suit if isinstance(action, PlayWild) else card.suit
            events.append(
                {
                    "type": "CARD_PLAYED",
                    "player": player,
                    "card": card.to_list(),
                    "current_suit": self.current_suit,
                }
            )
            if not self.hands[player]:
                logger.info("P%s emptied their hand after %d actions", player, len(self.game_history.actions) + 1)
                events.append({"type": "GAME_ENDED", "winner": player})

        self.game_history = self.game_history.appended(action)
        return events

    def _reshuffle(self, events: list[Event]) -> None:
        # The top card stays in play; only the cards under it are recycled.
        pile = self.draw_pile + self.discarded
        self.rng.shuffle(pile)
        self.draw_pile = pile
        self.discarded = []
        logger.debug("Reshuffled %d discarded cards into the draw pile", len(pile))
        events.append({"type": "DECK_RESHUFFLED", "cards": len(pile)})
