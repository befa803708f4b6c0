from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

Event = dict[str, object]

S = TypeVar("S")
E = TypeVar("E")


@dataclass
class StepResult(Generic[S, E]):
    """Outcome of submitting an action.

    `state` is the game after the action when `ok`, and None otherwise.
    Rejections never raise; the closed error value is carried in `error`.
    """

    ok: bool
    state: S | None = None
    events: list[Event] = field(default_factory=list)
    error: E | None = None

    @staticmethod
    def accepted(state: S, events: list[Event]) -> "StepResult[S, E]":
        return StepResult(ok=True, state=state, events=events)

    @staticmethod
    def rejected(error: E) -> "StepResult[S, E]":
        return StepResult(ok=False, state=None, events=[], error=error)
