"""Event logging for the engine: ``EngineLogger`` and its template catalog."""

from .event_catalog import reload_event_templates  # noqa: F401
from .logger import EngineLogger, logger  # noqa: F401

__all__ = ["EngineLogger", "logger", "reload_event_templates"]
