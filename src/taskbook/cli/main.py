# src/taskbook/cli/main.py

"""
CLI entrypoint.

Initializes logging, loads the task file into AppState, then runs the console
REPL in the main thread until the user types `bye`.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.WARNING)
    if not isinstance(console_level, int):
        console_level = logging.WARNING

    setup_logging(log_dir=settings.log_dir, console_level=console_level)
    logger.info("Starting %s (data file: %s)...", settings.app_name, settings.data_file)

    state = create_initial_state(settings=settings)

    try:
        run_console_loop(state)
    finally:
        logger.info("Bye.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
