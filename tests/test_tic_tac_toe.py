from __future__ import annotations

import json

import pytest

from tabletop.engine.errors import SerializationError
from tabletop.games.tic_tac_toe import (
    ALL_POSITIONS,
    O,
    POSSIBLE_WINS,
    X,
    Draw,
    GameState,
    InProgress,
    OtherPlayerTurn,
    PositionOffBoard,
    SpaceIsTaken,
    Win,
    opponent,
)


def test_opponent() -> None:
    assert opponent(O) == X
    assert opponent(X) == O


def test_new() -> None:
    game = GameState()
    assert game.board() == [[None, None, None], [None, None, None], [None, None, None]]
    assert game.available() == list(ALL_POSITIONS)
    assert game.available()[:3] == [(0, 0), (0, 1), (0, 2)]
    assert game.whose_turn() == X


def test_make_move() -> None:
    game = GameState()
    assert game.make_move(X, (1, 1)).ok
    assert game.history == [(X, (1, 1))]
    assert game.whose_turn() == O

    assert game.make_move(O, (1, 1)).error == SpaceIsTaken(position=(1, 1))
    assert game.make_move(X, (1, 2)).error == OtherPlayerTurn(attempted=X)
    assert game.make_move(O, (3, 0)).error == PositionOffBoard(position=(3, 0))

    assert game.make_move(O, (2, 2)).ok
    assert game.history == [(X, (1, 1)), (O, (2, 2))]
    assert game.board()[1][1] == X
    assert game.board()[2][2] == O
    assert game.at_position((0, 0)) is None


def test_taken_space_is_reported_before_turn() -> None:
    game = GameState()
    assert game.make_move(X, (0, 0)).ok
    assert game.make_move(X, (0, 0)).error == SpaceIsTaken(position=(0, 0))


def test_undo() -> None:
    game = GameState()
    assert game.make_move(X, (1, 1)).ok
    assert game.undo() == (X, (1, 1))
    assert game.whose_turn() == X
    assert game.history == []
    for _ in range(3):
        assert game.undo() is None


def test_apply_action_leaves_game_untouched() -> None:
    game = GameState()
    result = game.apply_action(X, (0, 0))
    assert result.ok
    assert result.state is not None and result.state.history == [(X, (0, 0))]
    assert game.history == []


def test_play_to_a_draw() -> None:
    game = GameState()
    moves = [
        (X, (0, 0)),
        (O, (1, 0)),
        (X, (2, 0)),
        (O, (2, 1)),
        (X, (0, 1)),
        (O, (2, 2)),
        (X, (1, 1)),
        (O, (0, 2)),
        (X, (1, 2)),
    ]
    for player, position in moves:
        assert game.make_move(player, position).ok
    assert game.status() == Draw()
    assert game.whose_turn() is None
    assert game.available() == []
    assert game.valid_actions() == []


def test_play_to_a_win() -> None:
    game = GameState()
    for player, position in [(X, (0, 0)), (O, (1, 0)), (X, (0, 1)), (O, (1, 1))]:
        assert game.make_move(player, position).ok
        assert game.status() == InProgress()

    result = game.make_move(X, (0, 2))
    assert result.ok
    assert game.status() == Win(player=X, positions=((0, 0), (0, 1), (0, 2)))
    assert {"type": "GAME_ENDED", "winner": X} in result.events
    assert game.valid_actions() == []


@pytest.mark.parametrize("win", POSSIBLE_WINS)
def test_every_line_wins(win: tuple) -> None:
    game = GameState()
    loss = [p for p in game.available() if p not in win][:2]
    for player, position in [(X, win[0]), (O, loss[0]), (X, win[1]), (O, loss[1]), (X, win[2])]:
        assert game.make_move(player, position).ok
    assert game.status() == Win(player=X, positions=win)


def test_serialization() -> None:
    game = GameState()
    for player, position in [(X, (0, 0)), (O, (2, 1))]:
        assert game.make_move(player, position).ok
    d = game.to_dict()
    assert d == {"history": [[0, 0], [2, 1]]}
    assert GameState.from_dict(json.loads(json.dumps(d))) == game


@pytest.mark.parametrize("raw", [{"history": [[0, 0], [0, 0]]}, {"history": [[3, 0]]}, {"moves": []}])
def test_deserializing_bad_games(raw: object) -> None:
    with pytest.raises(SerializationError):
        GameState.from_dict(raw)
