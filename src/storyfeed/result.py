"""Result primitives for explicit error handling.

Every operation that can fail in the fetch path returns one of these instead
of raising, which keeps failures a predictable part of the data flow.
"""

from __future__ import annotations

import dataclasses
import typing

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure")


@dataclasses.dataclass(frozen=True, slots=True)
class Success(typing.Generic[TSuccess]):
    """A successful outcome carrying its value."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure(typing.Generic[TFailure]):
    """A failed outcome carrying the error detail."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]
