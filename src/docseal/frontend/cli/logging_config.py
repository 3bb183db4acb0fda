"""Logging setup for the docseal command and the TUI."""

import logging
import sys


def configure_logging(level: int = logging.INFO) -> None:
    # stderr only: stdout carries command output such as `list --json`.
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
