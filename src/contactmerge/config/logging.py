"""Logging setup for the command line entry point."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger.

    A second call is a no-op unless ``force`` is set, which is how ``--verbose``
    switches an already configured CLI to DEBUG.
    """

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    # per-request lines from httpx are noise next to the merge progress output
    if level > logging.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
