"""Logging setup for the command line entry point."""

import logging
import os


def configure_logging(default_level: str | None = None) -> None:
    """Configure root logging level and format.

    Uses ``default_level`` when given, else the LOG_LEVEL environment
    variable, else INFO.
    """
    level_name = default_level or os.getenv("LOG_LEVEL", "INFO")
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
