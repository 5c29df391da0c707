"""Logging and game-event telemetry."""

from .logging import EventSink, LoggingEventSink, configure_logging

__all__ = ["EventSink", "LoggingEventSink", "configure_logging"]
