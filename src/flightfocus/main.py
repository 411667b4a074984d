"""Main module for Flight Focus."""

import logging
import os
import sys

from flightfocus.cli import run
from flightfocus.config import get_paths, settings


def setup_logging() -> None:
    """Configure logging to file for debugging."""
    paths = get_paths()
    paths.global_state_dir.mkdir(parents=True, exist_ok=True)
    log_file = paths.debug_log

    # Set level from env var, default to INFO
    level = os.environ.get("FLIGHTFOCUS_LOG_LEVEL", "INFO").upper()

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(log_file, mode="a"),
        ],
    )
    logging.info("Flight Focus starting, logging to %s", log_file)
    logging.info(
        "Store: %s, messages: %s", settings.store_path, settings.message_source
    )


def main() -> None:
    """Entry point for the Flight Focus application."""
    sys.exit(run(configure_logging=setup_logging))


if __name__ == "__main__":
    main()
