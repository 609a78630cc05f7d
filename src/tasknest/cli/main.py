# src/tasknest/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console REPL.
All store coroutines run on one event loop (asyncio.Runner) for the whole
session, so the HTTP client's connection pool stays valid between commands.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import level_from_name, setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.run(state.transport.aclose())
    except Exception:
        logger.debug("Transport close failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    log_file = setup_logging(log_dir=settings.data_dir, console_level=level_from_name(settings.log_level))

    logger.info("Starting %s (log file: %s)", settings.app_name, log_file)

    state = create_initial_state(settings=settings)

    with asyncio.Runner() as runner:
        state.runner = runner
        try:
            if settings.console_enabled:
                run_console_loop(state)
            else:
                logger.info("Console disabled (TASKNEST_CONSOLE_ENABLED=false); nothing to run.")
        finally:
            _shutdown(state)
            state.runner = None

    logger.info("Bye.")


if __name__ == "__main__":
    main()
