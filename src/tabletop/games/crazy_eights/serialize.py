from __future__ import annotations

from typing import Mapping

from tabletop.engine.cards import SUITS, Card
from tabletop.engine.errors import SerializationError, SettingsError
from tabletop.engine.rand import RngSeed
from tabletop.engine.schema import validate_json

from .actions import Action, Draw, Play, PlayWild
from .errors import (
    ActionError,
    CantDrawWhenYouHavePlayableCards,
    CantPlayNonWildAsWild,
    CantPlayWildAsRegularCard,
    CardCantBePlayed,
    NotPlayerTurn,
    PlayerDoesNotHaveCard,
)
from .state import GameHistory, GameState, Settings
from .views import ObserverView, PlayerView


def _card(raw: object) -> Card:
    try:
        return Card.from_list(raw)
    except ValueError as e:
        raise SerializationError(f"Invalid card {raw!r}: {e}") from e


def action_to_obj(a: Action) -> object:
    if isinstance(a, Draw):
        return "Draw"
    if isinstance(a, Play):
        return {"Play": a.card.to_list()}
    if isinstance(a, PlayWild):
        return {"PlayWild": [a.card.to_list(), a.suit]}
    raise TypeError(f"Unknown action: {a!r}")


def action_from_obj(raw: object) -> Action:
    if raw == "Draw":
        return Draw()
    if isinstance(raw, Mapping) and len(raw) == 1:
        if "Play" in raw:
            return Play(card=_card(raw["Play"]))
        if "PlayWild" in raw:
            body = raw["PlayWild"]
            if isinstance(body, list) and len(body) == 2 and body[1] in SUITS:
                return PlayWild(card=_card(body[0]), suit=body[1])
    raise SerializationError(f"Invalid action: {raw!r}")


def settings_to_dict(s: Settings) -> dict[str, object]:
    return {"seed": s.seed.hex(), "number_of_players": s.number_of_players}


def settings_from_dict(d: Mapping[str, object]) -> Settings:
    seed = d.get("seed")
    if not isinstance(seed, str):
        raise SerializationError("Expected hex string for seed")
    try:
        return Settings(seed=RngSeed.from_hex(seed), number_of_players=d.get("number_of_players"))  # type: ignore[arg-type]
    except SettingsError as e:
        raise SerializationError(f"Invalid settings: {e}") from e


def history_to_dict(h: GameHistory) -> dict[str, object]:
    return {
        "settings": settings_to_dict(h.settings),
        "history": [action_to_obj(a) for a in h.actions],
    }


def history_from_dict(d: object) -> GameHistory:
    validate_json(d, "crazy_eights_history", context="crazy eights game history")
    assert isinstance(d, dict)
    settings = settings_from_dict(d["settings"])
    actions = tuple(action_from_obj(a) for a in d["history"])
    return GameHistory(settings=settings, actions=actions)


def observer_view_to_dict(v: ObserverView) -> dict[str, object]:
    return {
        "whose_turn": v.whose_turn,
        "current_suit": v.current_suit,
        "discarded": [c.to_list() for c in v.discarded],
        "top_card": v.top_card.to_list(),
        "player_card_count": {str(p): n for p, n in enumerate(v.player_card_count)},
        "draw_pile_remaining": v.draw_pile_remaining,
    }


def _observer_view_fields(d: Mapping[str, object]) -> ObserverView:
    counts = d["player_card_count"]
    assert isinstance(counts, dict)
    players = sorted(int(p) for p in counts)
    if players != list(range(len(players))):
        raise SerializationError(f"player_card_count must cover players 0..n-1, got {sorted(counts)}")
    discarded = d["discarded"]
    assert isinstance(discarded, list)
    return ObserverView(
        whose_turn=d["whose_turn"],  # type: ignore[arg-type]
        current_suit=d["current_suit"],  # type: ignore[arg-type]
        discarded=tuple(_card(c) for c in discarded),
        top_card=_card(d["top_card"]),
        player_card_count=tuple(counts[str(p)] for p in players),
        draw_pile_remaining=d["draw_pile_remaining"],  # type: ignore[arg-type]
    )


def observer_view_from_dict(d: object) -> ObserverView:
    validate_json(d, "crazy_eights_observer_view", context="crazy eights observer view")
    assert isinstance(d, dict)
    return _observer_view_fields(d)


def player_view_to_dict(v: PlayerView) -> dict[str, object]:
    return {
        "player": v.player,
        "hand": [c.to_list() for c in v.hand],
        "observer_view": observer_view_to_dict(v.observer_view),
    }


def player_view_from_dict(d: object) -> PlayerView:
    validate_json(d, "crazy_eights_player_view", context="crazy eights player view")
    assert isinstance(d, dict)
    return PlayerView(
        player=d["player"],
        hand=tuple(_card(c) for c in d["hand"]),
        observer_view=_observer_view_fields(d["observer_view"]),
    )


def error_to_dict(e: ActionError) -> dict[str, object]:
    if isinstance(e, NotPlayerTurn):
        return {"type": e.type, "attempted_player": e.attempted_player, "correct_player": e.correct_player}
    if isinstance(e, CantDrawWhenYouHavePlayableCards):
        return {"type": e.type, "player": e.player, "playable": [c.to_list() for c in e.playable]}
    if isinstance(e, PlayerDoesNotHaveCard):
        return {"type": e.type, "player": e.player, "card": e.card.to_list()}
    if isinstance(e, CardCantBePlayed):
        return {
            "type": e.type,
            "attempted_card": e.attempted_card.to_list(),
            "top_card": e.top_card.to_list(),
            "current_suit": e.current_suit,
        }
    if isinstance(e, (CantPlayWildAsRegularCard, CantPlayNonWildAsWild)):
        return {"type": e.type, "card": e.card.to_list()}
    raise TypeError(f"Unknown action error: {e!r}")


def snapshot(state: GameState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the whole game, hidden cards included."""
    return {
        "history": history_to_dict(state.game_history),
        "whose_turn": state.whose_turn(),
        "current_suit": state.current_suit,
        "top_card": state.top_card.to_list(),
        "discarded": [c.to_list() for c in state.discarded],
        "draw_pile": [c.to_list() for c in state.draw_pile],
        "hands": [[c.to_list() for c in hand] for hand in state.hands],
    }
