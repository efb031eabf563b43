"""Logging sinks for the telemetry reporter.

Library code only emits records; handlers are installed by the CLI through
configure_logging().
"""
from __future__ import annotations

import logging
import os

logger = logging.getLogger("cdktf_checkpoint")

_process_logger = logging.getLogger("cdktf_checkpoint.process")

LOG_LEVEL_ENV = "CDKTF_LOG_LEVEL"


def process_logger_error(message: str) -> None:
    """Record an error raised while talking to the checkpoint service."""
    _process_logger.error(message)


def configure_logging(verbose: bool = False) -> None:
    """Install a stderr handler. CDKTF_LOG_LEVEL overrides the level name."""
    level = logging.DEBUG if verbose else logging.WARNING
    override = os.environ.get(LOG_LEVEL_ENV, "").upper()
    if override and isinstance(logging.getLevelName(override), int):
        level = logging.getLevelName(override)
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
    )
