"""Print the configured stories: ``python -m storyfeed``."""

from __future__ import annotations

import asyncio
import logging
import os
import sys

from storyfeed import Config, load_stories, render_lines
from storyfeed.deferred import Resolved
from storyfeed.result import Failure


def _log_level(name: str | None) -> int:
    """Resolve a level name; unknown names fall back to WARNING."""
    if not name:
        return logging.WARNING
    return logging.getLevelNamesMapping().get(name.strip().upper(), logging.WARNING)


def main() -> int:
    logging.basicConfig(
        level=_log_level(os.environ.get("STORYFEED_LOG_LEVEL")),
        format="%(levelname)s %(name)s: %(message)s",
    )
    state = asyncio.run(load_stories(Config.from_env()))
    for line in render_lines(state):
        print(line)
    match state.stories:
        case Resolved(result=Failure()):
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
