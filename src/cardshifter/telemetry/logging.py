"""Contract for game-event telemetry and structured logging sinks."""

from __future__ import annotations

import logging
from typing import Protocol

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class EventSink(Protocol):
    """Reports game events such as game start, performed actions and game over."""

    def emit(self, event_name: str, payload: dict) -> None:
        """Publish a telemetry event to the configured sink."""


class LoggingEventSink:
    """Forwards game events to a stdlib logger, payload carried in ``extra``."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("cardshifter.events")

    def emit(self, event_name: str, payload: dict) -> None:
        self._logger.info(event_name, extra={"event_payload": payload})


def configure_logging(level: str = "WARNING") -> None:
    """Install a root handler once; later calls only adjust the level."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=numeric, format=LOG_FORMAT)
    root.setLevel(numeric)
