"""Deferred results and asynchronous operation events.

A ``Deferred`` value answers two questions about an asynchronous computation:
has it started, and did it succeed. It is always exactly one of
``NotStarted``, ``InProgress`` or ``Resolved``. The order is fixed::

    NotStarted -> InProgress -> Resolved(Success | Failure)

``Resolved`` is terminal.
"""

from __future__ import annotations

import dataclasses
import typing

from storyfeed.errors import StoryfeedError

if typing.TYPE_CHECKING:
    from storyfeed.result import Result

T = typing.TypeVar("T")
E = typing.TypeVar("E")


@dataclasses.dataclass(frozen=True, slots=True)
class NotStarted:
    """No computation has been requested yet."""


@dataclasses.dataclass(frozen=True, slots=True)
class InProgress:
    """The computation was requested and its outcome is not known yet."""


@dataclasses.dataclass(frozen=True, slots=True)
class Resolved(typing.Generic[T, E]):
    """The computation finished; ``result`` holds its value or its error."""

    result: Result[T, E]


Deferred = NotStarted | InProgress | Resolved[T, E]


@dataclasses.dataclass(frozen=True, slots=True)
class Started:
    """The operation has been kicked off."""


@dataclasses.dataclass(frozen=True, slots=True)
class Finished(typing.Generic[T]):
    """The operation completed with ``result``."""

    result: T


AsyncOperationEvent = Started | Finished[T]


class InvalidTransitionError(StoryfeedError):
    """A deferred value was asked to move backwards or skip a step."""


_RANK: dict[type, int] = {NotStarted: 0, InProgress: 1, Resolved: 2}


def is_settled(deferred: Deferred[T, E]) -> bool:
    """Return True once the computation has resolved, successfully or not."""
    return isinstance(deferred, Resolved)


def advance(current: Deferred[T, E], nxt: Deferred[T, E]) -> Deferred[T, E]:
    """Return ``nxt`` if moving from ``current`` to it is a legal step.

    Only single forward steps are legal. ``NotStarted -> Resolved`` skips the
    in-progress phase and is rejected, as is anything leaving ``Resolved``.

    Raises:
        InvalidTransitionError: If the step is not allowed.
    """
    if _RANK[type(nxt)] != _RANK[type(current)] + 1:
        raise InvalidTransitionError(
            f"Cannot move from {type(current).__name__} to {type(nxt).__name__}",
            hint="Deferred values only move NotStarted -> InProgress -> Resolved.",
        )
    return nxt
