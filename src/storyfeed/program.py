"""Application state and its pure transition function.

``update`` decides; it never performs I/O. The intent to fetch is returned as
an effect description for the runtime to execute.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
from typing import TYPE_CHECKING

from storyfeed.deferred import (
    Finished,
    InProgress,
    NotStarted,
    Resolved,
    Started,
    advance,
)

if TYPE_CHECKING:
    from storyfeed.deferred import AsyncOperationEvent, Deferred
    from storyfeed.result import Result
    from storyfeed.schema import Record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class State:
    """The whole application state; replaced, never mutated."""

    stories: Deferred[list[Record], str] = field(default_factory=NotStarted)


# --- Effect descriptions ---


@dataclass(frozen=True)
class NoEffect:
    """Nothing to do."""


@dataclass(frozen=True)
class Dispatch:
    """Feed ``event`` back into ``update``."""

    event: AsyncOperationEvent[Result[list[Record], str]]


@dataclass(frozen=True)
class RunFetch:
    """Run the fetch pipeline once and report back with ``Finished``."""


Effect = NoEffect | Dispatch | RunFetch


def init() -> tuple[State, Effect]:
    """Initial state plus the ``Started`` event that begins loading."""
    return State(), Dispatch(Started())


def update(
    state: State, event: AsyncOperationEvent[Result[list[Record], str]]
) -> tuple[State, Effect]:
    """Compute the next state and the effect to run.

    Events that would move the deferred value backwards, or skip a step, are
    ignored: the state is returned unchanged with ``NoEffect``.
    """
    match event, state.stories:
        case Started(), NotStarted():
            return replace(state, stories=advance(state.stories, InProgress())), RunFetch()
        case Finished(result=result), InProgress():
            return replace(state, stories=advance(state.stories, Resolved(result))), NoEffect()
        case _:
            logger.debug(
                "Ignoring %s while %s", type(event).__name__, type(state.stories).__name__
            )
            return state, NoEffect()
