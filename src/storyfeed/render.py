"""Plain-text projection of the application state. Reads, never writes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from storyfeed.deferred import InProgress, NotStarted, Resolved
from storyfeed.result import Failure, Success

if TYPE_CHECKING:
    from storyfeed.program import State

LOADING = "Loading..."


def render_lines(state: State) -> list[str]:
    """Render the stories as display lines, one per item."""
    match state.stories:
        case NotStarted():
            return []
        case InProgress():
            return [LOADING]
        case Resolved(result=Failure(error=message)):
            return [message]
        case Resolved(result=Success(value=items)):
            return [
                f"{item.title} <{item.url}>" if item.url else item.title
                for item in items
            ]
    raise TypeError(f"Unknown state: {state.stories!r}")
