from __future__ import annotations

from dataclasses import dataclass, field
from itertools import product
from typing import Literal

from tabletop.engine.errors import SerializationError
from tabletop.engine.schema import validate_json
from tabletop.engine.step import Event, StepResult
from tabletop.logging_utils import get_logger

logger = get_logger(__name__)

Player = Literal["X", "O"]
X: Player = "X"
O: Player = "O"

# (col, row)
Position = tuple[int, int]
Board = list[list["Player | None"]]

SIZE = 3
ALL_POSITIONS: tuple[Position, ...] = tuple(product(range(SIZE), range(SIZE)))

POSSIBLE_WINS: tuple[tuple[Position, Position, Position], ...] = (
    # columns
    ((0, 0), (0, 1), (0, 2)),
    ((1, 0), (1, 1), (1, 2)),
    ((2, 0), (2, 1), (2, 2)),
    # rows
    ((0, 0), (1, 0), (2, 0)),
    ((0, 1), (1, 1), (2, 1)),
    ((0, 2), (1, 2), (2, 2)),
    # diagonals
    ((0, 0), (1, 1), (2, 2)),
    ((2, 0), (1, 1), (0, 2)),
)


def opponent(player: Player) -> Player:
    return O if player == X else X


@dataclass(frozen=True)
class SpaceIsTaken:
    position: Position
    type: Literal["SpaceIsTaken"] = "SpaceIsTaken"

    @property
    def message(self) -> str:
        return "space is taken"


@dataclass(frozen=True)
class OtherPlayerTurn:
    attempted: Player
    type: Literal["OtherPlayerTurn"] = "OtherPlayerTurn"

    @property
    def message(self) -> str:
        return f"not {self.attempted}'s turn"


@dataclass(frozen=True)
class PositionOffBoard:
    position: Position
    type: Literal["PositionOffBoard"] = "PositionOffBoard"

    @property
    def message(self) -> str:
        return f"{self.position} is not on the board"


ActionError = SpaceIsTaken | OtherPlayerTurn | PositionOffBoard


@dataclass(frozen=True)
class InProgress:
    pass


@dataclass(frozen=True)
class Draw:
    pass


@dataclass(frozen=True)
class Win:
    player: Player
    positions: tuple[Position, Position, Position]


Status = InProgress | Draw | Win


def _on_board(position: Position) -> bool:
    col, row = position
    return 0 <= col < SIZE and 0 <= row < SIZE


@dataclass
class GameState:
    history: list[tuple[Player, Position]] = field(default_factory=list)

    def board(self) -> Board:
        """board()[col][row] is the marker there, or None."""
        grid: Board = [[None] * SIZE for _ in range(SIZE)]
        for player, (col, row) in self.history:
            grid[col][row] = player
        return grid

    def at_position(self, position: Position) -> Player | None:
        col, row = position
        return self.board()[col][row]

    def available(self) -> list[Position]:
        taken = {position for _, position in self.history}
        return [p for p in ALL_POSITIONS if p not in taken]

    def whose_turn(self) -> Player | None:
        """None once the board is full."""
        if len(self.history) == SIZE * SIZE:
            return None
        return X if len(self.history) % 2 == 0 else O

    def valid_actions(self) -> list[Position]:
        if not isinstance(self.status(), InProgress):
            return []
        return self.available()

    def status(self) -> Status:
        board = self.board()
        for line in POSSIBLE_WINS:
            a, b, c = (board[col][row] for col, row in line)
            if a is not None and a == b == c:
                return Win(player=a, positions=line)
        if len(self.history) == SIZE * SIZE:
            return Draw()
        return InProgress()

    def make_move(self, player: Player, position: Position) -> StepResult[GameState, ActionError]:
        position = (position[0], position[1])
        error: ActionError | None = None
        if not _on_board(position):
            error = PositionOffBoard(position=position)
        elif self.at_position(position) is not None:
            error = SpaceIsTaken(position=position)
        elif self.whose_turn() != player:
            error = OtherPlayerTurn(attempted=player)
        if error is not None:
            logger.debug("Rejected %s at %s: %s", player, position, error.message)
            return StepResult.rejected(error)

        self.history.append((player, position))
        events: list[Event] = [{"type": "MARKER_PLACED", "player": player, "position": list(position)}]
        status = self.status()
        if isinstance(status, Win):
            logger.info("%s wins on %s", status.player, status.positions)
            events.append({"type": "GAME_ENDED", "winner": status.player})
        elif isinstance(status, Draw):
            events.append({"type": "GAME_ENDED", "winner": None})
        return StepResult.accepted(self, events)

    def apply_action(self, player: Player, position: Position) -> StepResult[GameState, ActionError]:
        return GameState(history=list(self.history)).make_move(player, position)

    def undo(self) -> tuple[Player, Position] | None:
        if not self.history:
            return None
        return self.history.pop()

    def to_dict(self) -> dict[str, object]:
        return {"history": [list(position) for _, position in self.history]}

    @staticmethod
    def from_dict(d: object) -> "GameState":
        validate_json(d, "tic_tac_toe_game", context="tic-tac-toe game")
        assert isinstance(d, dict)
        game = GameState()
        for col, row in d["history"]:
            player = game.whose_turn()
            result = game.make_move(player, (col, row))  # type: ignore[arg-type]
            if not result.ok:
                assert result.error is not None
                raise SerializationError(f"Illegal tic-tac-toe history at {[col, row]}: {result.error.message}")
        return game
