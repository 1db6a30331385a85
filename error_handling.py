"""
Structured error handling for PlayNow.

Provides the domain exception types, the error context they carry, and the
single top-level handler that reports a failed run.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.panel import Panel

from utils.event_logger import EventLogger, get_event_logger


LOG_PREFIX = "#PlayNow"


class ErrorSeverity(Enum):
    """How much of the run an error cost."""
    HIGH = "high"  # this conversion failed
    CRITICAL = "critical"  # nothing could be attempted


BORDER_STYLES = {
    ErrorSeverity.HIGH: "red",
    ErrorSeverity.CRITICAL: "bold red",
}


@dataclass
class ErrorContext:
    """
    Context information about an error.

    Captures the bundle involved so the report names what failed.
    """

    error_type: str
    message: str

    # Playground state
    bundle_location: Optional[str] = None

    # Additional metadata, passed on as event details
    metadata: Dict[str, Any] = field(default_factory=dict)


class PlayNowError(Exception):
    """
    Base exception for all PlayNow domain errors.

    All custom exceptions should inherit from this.
    """

    severity: ErrorSeverity = ErrorSeverity.HIGH

    def __init__(
        self,
        message: str,
        context: Optional[ErrorContext] = None,
        **kwargs
    ):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext(
            error_type=self.__class__.__name__,
            message=message
        )

        # Allow overriding context fields
        for key, value in kwargs.items():
            if hasattr(self.context, key):
                setattr(self.context, key, value)


class CantResolveBundleLocation(PlayNowError):
    """No input path, no default directory and no desktop directory."""
    severity = ErrorSeverity.CRITICAL

    def __init__(self, bundle_name: str, **kwargs):
        super().__init__(
            f"Can't resolve a location for playground '{bundle_name}': "
            "no path given, no default directory configured and no desktop directory found",
            **kwargs
        )


class VersionUndetectable(PlayNowError):
    """The manifest's root element has no version attribute."""
    severity = ErrorSeverity.HIGH

    def __init__(self, bundle_location: Path, **kwargs):
        super().__init__(
            f"Can't detect the version of playground '{Path(bundle_location).name}'",
            bundle_location=str(bundle_location),
            **kwargs
        )


class VersionUnsupported(PlayNowError):
    """The manifest version is newer than the supported one."""
    severity = ErrorSeverity.HIGH

    def __init__(self, bundle_location: Path, version: str, supported_version: str, **kwargs):
        super().__init__(
            f"Playground '{Path(bundle_location).name}' has version {version}, "
            f"newer than the supported version {supported_version}",
            bundle_location=str(bundle_location),
            metadata={'version': version, 'supported_version': supported_version},
            **kwargs
        )
        self.version = version


class ConfigurationError(PlayNowError):
    """Invalid configuration."""
    severity = ErrorSeverity.CRITICAL


@dataclass
class ErrorHandler:
    """
    Top-level handler: logs an error and presents it, styled by its severity.

    There are no retries; the process still terminates normally afterwards.
    """

    event_logger: Optional[EventLogger] = None
    console: Console = field(default_factory=lambda: Console(stderr=True))

    def handle_error(self, error: Exception) -> ErrorContext:
        """
        Handle an error raised by a conversion.

        Args:
            error: The exception that occurred

        Returns:
            The ErrorContext that was reported
        """
        if isinstance(error, PlayNowError):
            context = error.context
            severity = error.severity
        else:
            severity = ErrorSeverity.HIGH
            context = ErrorContext(
                error_type=type(error).__name__,
                message=str(error)
            )

        logger = self.event_logger or get_event_logger()
        logger.system_error(
            f"{LOG_PREFIX}: {context.error_type}",
            error=error,
            severity=severity.value,
            bundle_location=context.bundle_location,
            **context.metadata
        )

        self.console.print(Panel(
            context.message,
            title=f"PlayNow: {context.error_type}",
            border_style=BORDER_STYLES[severity],
        ))
        return context
