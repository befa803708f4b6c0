from __future__ import annotations

from collections import Counter

import pytest

from tabletop.engine.cards import STANDARD_DECK, Card, Rank
from tabletop.engine.rand import RngSeed
from tabletop.games.crazy_eights import Draw, GameHistory, GameState, Play, Settings, Win
from tabletop.games.crazy_eights.serialize import snapshot


def _all_cards(game: GameState) -> list[Card]:
    cards = [game.top_card] + list(game.discarded) + list(game.draw_pile)
    for hand in game.hands:
        cards.extend(hand)
    return cards


def _assert_conserved(game: GameState) -> None:
    cards = _all_cards(game)
    assert len(cards) == 52
    assert Counter(cards) == Counter(STANDARD_DECK)


def _play_out(settings: Settings, max_steps: int = 400) -> GameState:
    game = GameState.new(settings)
    for _ in range(max_steps):
        if isinstance(game.status(), Win):
            break
        player = game.whose_turn()
        action = game.player_view(player).valid_actions()[-1]
        assert game.make_move(player, action).ok
        _assert_conserved(game)
    return game


@pytest.mark.parametrize("n", range(2, 9))
def test_new_game_deals_from_a_full_deck(n: int) -> None:
    settings = Settings(seed=RngSeed.repeat(0), number_of_players=n)
    game = GameState.new(settings)
    per_player = 7 if n == 2 else 5
    assert [len(h) for h in game.hands] == [per_player] * n
    assert len(game.draw_pile) == 52 - per_player * n - 1
    assert game.discarded == []
    assert game.current_suit == game.top_card.suit
    assert game.whose_turn() == 0
    _assert_conserved(game)


def test_same_seed_same_deal() -> None:
    settings = Settings(seed=RngSeed.repeat(42), number_of_players=4)
    assert GameState.new(settings) == GameState.new(settings)
    assert snapshot(GameState.new(settings)) == snapshot(GameState.new(settings))


def test_different_seed_different_deal() -> None:
    a = GameState.new(Settings(seed=RngSeed.repeat(1), number_of_players=4))
    b = GameState.new(Settings(seed=RngSeed.repeat(2), number_of_players=4))
    assert snapshot(a)["hands"] != snapshot(b)["hands"]


PINNED_DRAW_PILE_TAIL = [
    Card(Rank.SEVEN, "Clubs"),
    Card(Rank.FOUR, "Clubs"),
    Card(Rank.SIX, "Diamonds"),
    Card(Rank.TEN, "Hearts"),
    Card(Rank.JACK, "Spades"),
]


@pytest.mark.parametrize("n", [2, 3, 8])
def test_all_zero_seed_deal_is_pinned(n: int) -> None:
    game = GameState.new(Settings(seed=RngSeed.repeat(0), number_of_players=n))
    assert game.draw_pile[-5:] == PINNED_DRAW_PILE_TAIL


def test_golden_scenario() -> None:
    """Three players, all-zero seed, each of the first two players takes their last valid action."""
    settings = Settings(seed=RngSeed.repeat(0), number_of_players=3)

    def run() -> GameState:
        game = GameState.new(settings)
        for _ in range(2):
            player = game.whose_turn()
            action = game.player_view(player).valid_actions()[-1]
            result = game.make_move(player, action)
            assert result.ok
        return game

    game = run()
    assert len(game.game_history.actions) == 2
    assert game.whose_turn() == 2
    assert [p for p, _ in game.history()] == [0, 1]
    _assert_conserved(game)

    # any draws came off the pinned end of the pile, last card first
    drawn = 36 - len(game.draw_pile)
    assert drawn == sum(1 for a in game.game_history.actions if a == Draw())
    assert game.draw_pile[-(5 - drawn) :] == PINNED_DRAW_PILE_TAIL[: 5 - drawn]
    for (player, _), card in zip(
        ((p, a) for p, a in game.history() if a == Draw()), reversed(PINNED_DRAW_PILE_TAIL)
    ):
        assert game.hands[player][-1] == card

    again = run()
    assert again == game
    assert snapshot(again) == snapshot(game)

    replayed = game.game_history.game_state()
    assert replayed.ok
    assert replayed.state == game


@pytest.mark.parametrize("seed_byte", [0, 1, 2, 3])
@pytest.mark.parametrize("n", [2, 3, 5, 8])
def test_replay_matches_live_game(seed_byte: int, n: int) -> None:
    settings = Settings(seed=RngSeed.repeat(seed_byte), number_of_players=n)
    game = _play_out(settings)
    replayed = GameHistory(settings=settings, actions=game.game_history.actions).game_state()
    assert replayed.ok
    assert replayed.state == game
    assert snapshot(replayed.state) == snapshot(game)


def test_replay_stops_at_first_illegal_action() -> None:
    settings = Settings(seed=RngSeed.repeat(0), number_of_players=2)
    game = GameState.new(settings)
    not_held = next(c for c in STANDARD_DECK if c not in game.hands[0] and c.rank != Rank.EIGHT)
    history = GameHistory(settings=settings, actions=(Play(card=not_held), Draw()))
    result = history.game_state()
    assert not result.ok
    assert result.error is not None
    assert result.error.type == "PlayerDoesNotHaveCard"


def test_undo_walks_back_through_every_state() -> None:
    settings = Settings(seed=RngSeed.repeat(9), number_of_players=3)
    game = GameState.new(settings)
    states = [game.clone()]
    for _ in range(30):
        if isinstance(game.status(), Win):
            break
        player = game.whose_turn()
        assert game.make_move(player, game.player_view(player).valid_actions()[0]).ok
        states.append(game.clone())

    taken = list(game.game_history.actions)
    for expected, action in zip(reversed(states[:-1]), reversed(taken)):
        assert game.undo() == action
        assert game == expected
    assert game.undo() is None
    assert game == GameState.new(settings)


def test_undo_across_a_reshuffle(monkeypatch: pytest.MonkeyPatch) -> None:
    def rigged_new(settings: Settings) -> GameState:
        return GameState(
            game_history=GameHistory.new(settings),
            rng=settings.seed.into_rng(),
            discarded=[Card(Rank.QUEEN, "Spades"), Card(Rank.KING, "Spades")],
            hands=[
                [Card(Rank.FOUR, "Clubs"), Card(Rank.NINE, "Hearts")],
                [Card(Rank.FIVE, "Clubs"), Card(Rank.TEN, "Diamonds")],
            ],
            draw_pile=[],
            top_card=Card(Rank.THREE, "Clubs"),
            current_suit="Clubs",
        )

    monkeypatch.setattr(GameState, "new", staticmethod(rigged_new))
    settings = Settings(seed=RngSeed.repeat(5), number_of_players=2)
    game = GameState.new(settings)
    assert game.make_move(0, Play(card=Card(Rank.FOUR, "Clubs"))).ok
    assert game.make_move(1, Play(card=Card(Rank.FIVE, "Clubs"))).ok
    before_draw = game.clone()

    result = game.make_move(0, Draw())
    assert result.ok
    assert result.events[0]["type"] == "DECK_RESHUFFLED"
    after_draw = game.clone()
    assert game.discarded == []
    assert len(game.draw_pile) == 3

    assert game.undo() == Draw()
    assert game == before_draw
    assert game.discarded == [
        Card(Rank.QUEEN, "Spades"),
        Card(Rank.KING, "Spades"),
        Card(Rank.THREE, "Clubs"),
        Card(Rank.FOUR, "Clubs"),
    ]

    assert game.make_move(0, Draw()).ok
    assert game == after_draw
