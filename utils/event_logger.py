"""
Event logging for PlayNow.

Every step of a conversion (bundle resolved, page added, page pruned, editor
opened) is emitted as a PlayNowEvent. In debug mode events are printed to the
console; registered callbacks receive every event either way. Logging never
raises into a conversion.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Callable
from dataclasses import dataclass, field
import time

from rich.console import Console
from rich.text import Text


class EventType(str, Enum):
    """All event types that can be logged"""
    # Bundle events
    BUNDLE_RESOLVED = "bundle_resolved"
    BUNDLE_CREATED = "bundle_created"

    # Page events
    PAGE_ADDED = "page_added"
    PAGE_KEPT = "page_kept"  # Contents file already existed
    PAGE_PRUNED = "page_pruned"
    PAGE_PRUNE_FAILED = "page_prune_failed"
    PAGE_MARKED_USED = "page_marked_used"

    # Manifest events
    MANIFEST_WRITTEN = "manifest_written"

    # Launcher events
    LAUNCH_OPEN = "launch_open"
    LAUNCH_WAIT = "launch_wait"

    # Invocation events
    INVOCATION_SKIPPED = "invocation_skipped"

    # System events
    SYSTEM_WARNING = "system_warning"
    SYSTEM_ERROR = "system_error"


# Marker and style per level for console output
LEVEL_STYLES = {
    "DEBUG": ("·", "dim"),
    "INFO": ("•", "cyan"),
    "WARNING": ("!", "yellow"),
    "ERROR": ("x", "bold red"),
    "SUCCESS": ("+", "green"),
}


@dataclass
class PlayNowEvent:
    """Structured event data"""
    event_type: EventType
    message: str
    timestamp: float = field(default_factory=time.time)
    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, SUCCESS
    details: Dict[str, Any] = field(default_factory=dict)


class EventLogger:
    """
    Emits PlayNowEvents to the console (debug mode only) and to callbacks.
    """

    def __init__(self, debug_mode: bool = True, console: Optional[Console] = None):
        self.debug_mode = debug_mode
        self.console = console or Console(highlight=False)
        self._callbacks: List[Callable[[PlayNowEvent], None]] = []

    def register_callback(self, callback: Callable[[PlayNowEvent], None]) -> None:
        """Register a callback for all events"""
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def emit(self, event_type: EventType, message: str, level: str = "INFO", **details) -> None:
        event = PlayNowEvent(event_type=event_type, message=message, level=level, details=details)

        if self.debug_mode:
            try:
                self._print_event(event)
            except (OSError, ValueError):
                pass  # closed or broken stdout

        for callback in self._callbacks:
            try:
                callback(event)
            except Exception:
                pass  # a failing observer must not abort the conversion

    def _print_event(self, event: PlayNowEvent) -> None:
        marker, style = LEVEL_STYLES.get(event.level, ("•", ""))
        self.console.print(Text.assemble((marker, style), " ", event.message))

        for key, value in event.details.items():
            if value is not None and isinstance(value, (str, int, float, bool)):
                self.console.print(Text(f"   {key}: {value}", style="dim"))

    # Convenience methods
    def bundle_resolved(self, bundle_location: str, **details):
        self.emit(EventType.BUNDLE_RESOLVED, f"Using playground {bundle_location}", "DEBUG",
                  bundle_location=bundle_location, **details)

    def bundle_created(self, bundle_location: str, page_name: str, **details):
        self.emit(EventType.BUNDLE_CREATED, f"Created playground {bundle_location}", "SUCCESS",
                  bundle_location=bundle_location, page_name=page_name, **details)

    def page_added(self, page_name: str, bundle_location: str, **details):
        self.emit(EventType.PAGE_ADDED, f"Added page '{page_name}'", "SUCCESS",
                  page_name=page_name, bundle_location=bundle_location, **details)

    def page_kept(self, page_name: str, **details):
        self.emit(EventType.PAGE_KEPT, f"Page '{page_name}' already exists, keeping its contents", "WARNING",
                  page_name=page_name, **details)

    def page_pruned(self, page_name: str, **details):
        self.emit(EventType.PAGE_PRUNED, f"Removed unused page '{page_name}'", "INFO",
                  page_name=page_name, **details)

    def page_prune_failed(self, page_name: str, error: Exception = None, **details):
        msg = f"Could not remove unused page '{page_name}'"
        if error:
            msg += f": {error}"
        self.emit(EventType.PAGE_PRUNE_FAILED, msg, "WARNING",
                  page_name=page_name, error=str(error) if error else None, **details)

    def page_marked_used(self, page_name: str, modified_at: float = None, **details):
        self.emit(EventType.PAGE_MARKED_USED, f"Marked page '{page_name}' as used", "DEBUG",
                  page_name=page_name, modified_at=modified_at, **details)

    def manifest_written(self, manifest_location: str, page_count: int = None, **details):
        self.emit(EventType.MANIFEST_WRITTEN, f"Wrote manifest {manifest_location}", "DEBUG",
                  manifest_location=manifest_location, page_count=page_count, **details)

    def launch_open(self, location: str, application: str = None, **details):
        msg = f"Opening {location}"
        if application:
            msg += f" with {application}"
        self.emit(EventType.LAUNCH_OPEN, msg, "INFO", location=location, application=application, **details)

    def launch_wait(self, message: str, seconds: float = None, **details):
        self.emit(EventType.LAUNCH_WAIT, message, "DEBUG", seconds=seconds, **details)

    def invocation_skipped(self, reason: str, **details):
        self.emit(EventType.INVOCATION_SKIPPED, f"Skipping conversion: {reason}", "DEBUG",
                  reason=reason, **details)

    def system_warning(self, message: str, **details):
        self.emit(EventType.SYSTEM_WARNING, message, "WARNING", **details)

    def system_error(self, message: str, error: Exception = None, **details):
        msg = message
        if error:
            msg += f": {error}"
        self.emit(EventType.SYSTEM_ERROR, msg, "ERROR", error=str(error) if error else None, **details)


_global_event_logger: Optional[EventLogger] = None


def get_event_logger() -> EventLogger:
    """Process-wide event logger, created on first use"""
    global _global_event_logger
    if _global_event_logger is None:
        _global_event_logger = EventLogger(debug_mode=True)
    return _global_event_logger


def set_event_logger(logger: EventLogger) -> None:
    global _global_event_logger
    _global_event_logger = logger
