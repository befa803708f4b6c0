from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from tabletop.engine.step import StepResult
from tabletop.games.crazy_eights import Action, ActionError, GameState, PlayerView, Win
from tabletop.games.crazy_eights.serialize import action_to_obj, error_to_dict
from tabletop.logging_utils import get_logger

from .telemetry import TelemetryService

logger = get_logger(__name__)

Chooser = Callable[[PlayerView], Action]


def first_valid_action(view: PlayerView) -> Action:
    """Deterministic chooser: always takes the first legal action."""
    return view.valid_actions()[0]


@dataclass
class GameRunner:
    """Drives a Crazy Eights game from the outside, one action at a time.

    The runner owns the state it is given and mutates it with make_move.
    """

    state: GameState
    telemetry: TelemetryService | None = None

    def step(self, action: Action) -> StepResult[GameState, ActionError]:
        """Submit `action` for whoever's turn it is."""
        player = self.state.whose_turn()
        result = self.state.make_move(player, action)
        payload: dict[str, object] = {"player": player, "action": action_to_obj(action)}
        if not result.ok:
            assert result.error is not None
            self._record("action_rejected", {**payload, "error": error_to_dict(result.error)})
            return result

        self._record("action_applied", {**payload, "events": result.events})
        for event in result.events:
            if event["type"] == "GAME_ENDED":
                taken = len(self.state.game_history.actions)
                logger.info("Game over: P%s wins after %d actions", event["winner"], taken)
                self._record("game_ended", {"winner": event["winner"], "actions": taken})
        return result

    def run(self, choose: Chooser = first_valid_action, max_steps: int = 1000) -> int:
        """Play until someone wins or `max_steps` actions have been submitted.

        Returns the number of actions submitted.
        """
        if max_steps < 0:
            raise ValueError(f"max_steps must be >= 0, got {max_steps}")
        steps = 0
        while steps < max_steps and not isinstance(self.state.status(), Win):
            action = choose(self.state.current_player_view())
            self.step(action)
            steps += 1
        if steps == max_steps and not isinstance(self.state.status(), Win):
            logger.debug("Stopped after %d steps without a winner", steps)
        return steps

    def _record(self, event_type: str, payload: dict[str, object]) -> None:
        if self.telemetry is not None:
            self.telemetry.log(event_type, payload)
