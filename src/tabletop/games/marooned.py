"""Marooned: a two player territory-blocking game on a rectangular grid.

On each turn a player moves to an adjacent square (diagonals included) and
then removes any square still on the board that the opponent is not standing
on. A player with nowhere to move loses. All state derives from the settings
and the action log, so undo is exact.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from itertools import product
from typing import Iterator, Literal, Mapping, Sequence

from tabletop.engine.errors import SerializationError, SettingsError
from tabletop.engine.schema import validate_json
from tabletop.engine.step import Event, StepResult
from tabletop.logging_utils import get_logger

logger = get_logger(__name__)

Player = Literal[1, 2]
P1: Player = 1
P2: Player = 2
PLAYERS: tuple[Player, ...] = (P1, P2)

# (col, row)
Position = tuple[int, int]

DEFAULT_ROWS = 8
DEFAULT_COLS = 6


def opponent(player: Player) -> Player:
    return P2 if player == P1 else P1


# ----------------------------------------------------------------------
# Settings errors


class InvalidDimensions(SettingsError):
    pass


class CantRemovePositionNotOnBoard(SettingsError):
    def __init__(self, pos: Position) -> None:
        self.pos = pos
        super().__init__(f"Can't remove the position {pos} because it isn't on the board")


class PlayersCantStartAtSamePosition(SettingsError):
    def __init__(self) -> None:
        super().__init__("Players must start at different positions")


class PlayersMustStartOnBoard(SettingsError):
    def __init__(self, player: Player, position: Position) -> None:
        self.player = player
        self.position = position
        super().__init__(f"Players must start on the board, but P{player} is on {position}")


class PlayerCantStartOnRemovedSquare(SettingsError):
    def __init__(self, player: Player, position: Position) -> None:
        self.player = player
        self.position = position
        super().__init__(f"Can't start P{player} on removed position {position}")


# ----------------------------------------------------------------------
# Board geometry


def _position(raw: object) -> Position:
    if (
        not isinstance(raw, (list, tuple))
        or len(raw) != 2
        or not all(isinstance(v, int) and not isinstance(v, bool) for v in raw)
    ):
        raise SerializationError(f"Expected [col, row], got {raw!r}")
    return (raw[0], raw[1])


def _checked_adjacent(offset: int, limit: int) -> list[int]:
    return [v for v in (offset + 1, offset, offset - 1) if 0 <= v < limit]


@dataclass(frozen=True)
class Dimensions:
    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS

    def __post_init__(self) -> None:
        for v in (self.rows, self.cols):
            if isinstance(v, bool) or not isinstance(v, int) or v < 0:
                raise InvalidDimensions(f"Invalid dimensions: {self.rows} rows x {self.cols} cols")
        if self.rows == 0 or self.cols == 0 or (self.rows, self.cols) == (1, 1):
            raise InvalidDimensions(f"Invalid dimensions: {self.rows} rows x {self.cols} cols")

    def all_positions(self) -> list[Position]:
        return [(col, row) for col in range(self.cols) for row in range(self.rows)]

    def is_position_on_board(self, position: Position) -> bool:
        col, row = position
        return 0 <= col < self.cols and 0 <= row < self.rows

    def adjacent_positions(self, position: Position) -> list[Position]:
        col, row = position
        return [
            (c, r)
            for c, r in product(_checked_adjacent(col, self.cols), _checked_adjacent(row, self.rows))
            if (c, r) != (col, row)
        ]

    def default_player_starting_positions(self) -> dict[Player, Position]:
        midpoint = (self.cols - 1) / 2
        return {
            P1: (math.ceil(midpoint), 0),
            P2: (math.floor(midpoint), self.rows - 1),
        }

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "Dimensions":
        rows = d.get("rows")
        cols = d.get("cols")
        if not isinstance(rows, int) or not isinstance(cols, int):
            raise SerializationError("Dimensions need integer rows and cols")
        return Dimensions(rows=rows, cols=cols)

    def to_dict(self) -> dict[str, object]:
        return {"rows": self.rows, "cols": self.cols}


@dataclass(frozen=True)
class Settings:
    dimensions: Dimensions
    p1_starting: Position
    p2_starting: Position
    starting_removed: tuple[Position, ...] = ()

    def __post_init__(self) -> None:
        for pos in self.starting_removed:
            if not self.dimensions.is_position_on_board(pos):
                raise CantRemovePositionNotOnBoard(pos)
        for player, position in ((P1, self.p1_starting), (P2, self.p2_starting)):
            if not self.dimensions.is_position_on_board(position):
                raise PlayersMustStartOnBoard(player, position)
            if position in self.starting_removed:
                raise PlayerCantStartOnRemovedSquare(player, position)
        if self.p1_starting == self.p2_starting:
            raise PlayersCantStartAtSamePosition()
        object.__setattr__(self, "starting_removed", tuple(sorted(set(self.starting_removed))))

    @staticmethod
    def new(
        rows: int = DEFAULT_ROWS,
        cols: int = DEFAULT_COLS,
        p1_starting: Position | None = None,
        p2_starting: Position | None = None,
        starting_removed: Sequence[Position] = (),
    ) -> "Settings":
        """Build validated settings; unspecified starts use the default positions."""
        dimensions = Dimensions(rows=rows, cols=cols)
        defaults = dimensions.default_player_starting_positions()
        return Settings(
            dimensions=dimensions,
            p1_starting=tuple(p1_starting) if p1_starting is not None else defaults[P1],  # type: ignore[arg-type]
            p2_starting=tuple(p2_starting) if p2_starting is not None else defaults[P2],  # type: ignore[arg-type]
            starting_removed=tuple(tuple(p) for p in starting_removed),  # type: ignore[misc]
        )

    def starting_position(self, player: Player) -> Position:
        return self.p1_starting if player == P1 else self.p2_starting

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "Settings":
        dims = d.get("dimensions")
        removed = d.get("starting_removed", [])
        if not isinstance(dims, Mapping) or not isinstance(removed, list):
            raise SerializationError("Invalid marooned settings")
        try:
            return Settings(
                dimensions=Dimensions.from_dict(dims),
                p1_starting=_position(d.get("p1_starting")),
                p2_starting=_position(d.get("p2_starting")),
                starting_removed=tuple(_position(p) for p in removed),
            )
        except SettingsError as e:
            raise SerializationError(f"Invalid marooned settings: {e}") from e

    def to_dict(self) -> dict[str, object]:
        return {
            "dimensions": self.dimensions.to_dict(),
            "p1_starting": list(self.p1_starting),
            "p2_starting": list(self.p2_starting),
            "starting_removed": [list(p) for p in self.starting_removed],
        }


# ----------------------------------------------------------------------
# Actions, errors, status


@dataclass(frozen=True)
class Action:
    player: Player
    to: Position
    remove: Position

    @staticmethod
    def from_dict(d: Mapping[str, object]) -> "Action":
        player = d.get("player")
        if player not in PLAYERS:
            raise SerializationError(f"Invalid player: {player!r}")
        return Action(player=player, to=_position(d.get("to")), remove=_position(d.get("remove")))  # type: ignore[arg-type]

    def to_dict(self) -> dict[str, object]:
        return {"player": self.player, "to": list(self.to), "remove": list(self.remove)}


@dataclass(frozen=True)
class OtherPlayerTurn:
    attempted: Player
    type: Literal["OtherPlayerTurn"] = "OtherPlayerTurn"

    @property
    def message(self) -> str:
        return f"Not P{self.attempted}'s turn"


@dataclass(frozen=True)
class InvalidMoveToTarget:
    target: Position
    player: Player
    type: Literal["InvalidMoveToTarget"] = "InvalidMoveToTarget"

    @property
    def message(self) -> str:
        return f"P{self.player} can't move to {self.target}"


@dataclass(frozen=True)
class InvalidRemove:
    target: Position
    type: Literal["InvalidRemove"] = "InvalidRemove"

    @property
    def message(self) -> str:
        return f"Can't remove {self.target}"


@dataclass(frozen=True)
class CantRemoveTheSamePositionAsMoveTo:
    target: Position
    type: Literal["CantRemoveTheSamePositionAsMoveTo"] = "CantRemoveTheSamePositionAsMoveTo"

    @property
    def message(self) -> str:
        return "Can't move to the same position as being removed"


ActionError = OtherPlayerTurn | InvalidMoveToTarget | InvalidRemove | CantRemoveTheSamePositionAsMoveTo


@dataclass(frozen=True)
class InProgress:
    pass


@dataclass(frozen=True)
class Win:
    player: Player


Status = InProgress | Win


# ----------------------------------------------------------------------
# Game state


@dataclass
class GameState:
    settings: Settings = field(default_factory=Settings.new)
    history: list[Action] = field(default_factory=list)

    @property
    def dimensions(self) -> Dimensions:
        return self.settings.dimensions

    def whose_turn(self) -> Player:
        return P1 if len(self.history) % 2 == 0 else P2

    def player_position(self, player: Player) -> Position:
        for action in reversed(self.history):
            if action.player == player:
                return action.to
        return self.settings.starting_position(player)

    def removed_positions(self) -> list[Position]:
        return list(self.settings.starting_removed) + [a.remove for a in self.history]

    def is_position_allowed_to_be_removed(self, position: Position, player: Player) -> bool:
        return (
            self.dimensions.is_position_on_board(position)
            and position not in self.removed_positions()
            and position != self.player_position(opponent(player))
        )

    def removable_positions(self, player: Player | None = None) -> list[Position]:
        player = self.whose_turn() if player is None else player
        return [
            pos for pos in self.dimensions.all_positions() if self.is_position_allowed_to_be_removed(pos, player)
        ]

    def allowed_movement_targets_for_player(self, player: Player) -> list[Position]:
        removed = set(self.removed_positions())
        other = self.player_position(opponent(player))
        return [
            pos
            for pos in self.dimensions.adjacent_positions(self.player_position(player))
            if pos not in removed and pos != other
        ]

    def valid_actions(self) -> Iterator[Action]:
        player = self.whose_turn()
        removable = self.removable_positions(player)
        for to in self.allowed_movement_targets_for_player(player):
            for remove in removable:
                if to != remove:
                    yield Action(player=player, to=to, remove=remove)

    def status(self) -> Status:
        current = self.whose_turn()
        if not self.allowed_movement_targets_for_player(current):
            return Win(player=opponent(current))
        return InProgress()

    def _validate(self, action: Action) -> ActionError | None:
        if action.to == action.remove:
            return CantRemoveTheSamePositionAsMoveTo(target=action.to)
        if action.player != self.whose_turn():
            return OtherPlayerTurn(attempted=action.player)
        if action.to not in self.allowed_movement_targets_for_player(action.player):
            return InvalidMoveToTarget(target=action.to, player=action.player)
        if not self.is_position_allowed_to_be_removed(action.remove, action.player):
            return InvalidRemove(target=action.remove)
        return None

    def make_move(self, action: Action) -> StepResult[GameState, ActionError]:
        error = self._validate(action)
        if error is not None:
            logger.debug("Rejected %r: %s", action, error.message)
            return StepResult.rejected(error)
        self.history.append(action)
        events: list[Event] = [
            {"type": "MOVED", "player": action.player, "to": list(action.to)},
            {"type": "POSITION_REMOVED", "player": action.player, "position": list(action.remove)},
        ]
        status = self.status()
        if isinstance(status, Win):
            logger.info("P%s wins after %d moves", status.player, len(self.history))
            events.append({"type": "GAME_ENDED", "winner": status.player})
        return StepResult.accepted(self, events)

    def apply_action(self, action: Action) -> StepResult[GameState, ActionError]:
        """Like make_move, but returns a new game and leaves this one alone."""
        return GameState(settings=self.settings, history=list(self.history)).make_move(action)

    def undo(self) -> Action | None:
        if not self.history:
            return None
        return self.history.pop()

    @staticmethod
    def from_dict(d: object) -> "GameState":
        validate_json(d, "marooned_game", context="marooned game")
        assert isinstance(d, dict)
        game = GameState(settings=Settings.from_dict(d["settings"]))
        for raw in d["history"]:
            result = game.make_move(Action.from_dict(raw))
            if not result.ok:
                assert result.error is not None
                raise SerializationError(f"Illegal action in marooned history {raw!r}: {result.error.message}")
        return game

    def to_dict(self) -> dict[str, object]:
        return {
            "settings": self.settings.to_dict(),
            "history": [a.to_dict() for a in self.history],
        }
