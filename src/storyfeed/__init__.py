"""storyfeed: load a bounded list of stories with an observable loading state.

Public API:
    - load_stories(): Run the program to resolution and return the final State
    - load_records(): The bare two-phase fetch pipeline
    - Config: Configuration dataclass
    - Program: Effect runner with snapshot subscriptions
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from storyfeed.config import Config
from storyfeed.deferred import (
    AsyncOperationEvent,
    Deferred,
    Finished,
    InProgress,
    NotStarted,
    Resolved,
    Started,
)
from storyfeed.errors import (
    ConfigurationError,
    DecodeError,
    MissingFieldError,
    StoryfeedError,
    TransportError,
    TypeMismatchError,
)
from storyfeed.pipeline import load_records
from storyfeed.program import State, init, update
from storyfeed.render import render_lines
from storyfeed.result import Failure, Result, Success
from storyfeed.runtime import Program
from storyfeed.schema import Record, ScoredStory, Story
from storyfeed.transport import HttpxTransport, Response, Transport

if TYPE_CHECKING:
    from collections.abc import Callable

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("storyfeed")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("storyfeed").addHandler(logging.NullHandler())

logger = logging.getLogger(__name__)


async def load_stories(
    config: Config | None = None,
    *,
    transport: Transport | None = None,
    listener: Callable[[State], None] | None = None,
) -> State:
    """Load stories and return the resolved application state.

    Args:
        config: Endpoints, fan-out bound and schema; defaults to ``Config()``.
        transport: Transport to use. When omitted an ``HttpxTransport`` is
            created from ``config`` and closed before returning.
        listener: Optional observer called with every state snapshot.

    Returns:
        The final ``State``; ``state.stories`` is always ``Resolved``.

    Example:
        state = await load_stories(Config(max_items=5))
        for line in render_lines(state):
            print(line)
    """
    config = config or Config()
    owned = transport is None
    active = transport if transport is not None else HttpxTransport.from_config(config)

    app = Program(lambda: load_records(active, config))
    if listener is not None:
        app.subscribe(listener)

    try:
        return await app.run_until_settled()
    finally:
        if owned:
            try:
                await active.aclose()
            except Exception as exc:
                # Cleanup should never mask the primary failure.
                logger.warning("Transport cleanup failed: %s", exc)


__all__ = [
    "AsyncOperationEvent",
    "Config",
    "ConfigurationError",
    "DecodeError",
    "Deferred",
    "Failure",
    "Finished",
    "HttpxTransport",
    "InProgress",
    "MissingFieldError",
    "NotStarted",
    "Program",
    "Record",
    "Resolved",
    "Response",
    "Result",
    "ScoredStory",
    "Started",
    "State",
    "Story",
    "StoryfeedError",
    "Success",
    "Transport",
    "TransportError",
    "TypeMismatchError",
    "init",
    "load_records",
    "load_stories",
    "render_lines",
    "update",
]
