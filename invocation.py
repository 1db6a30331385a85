"""
Coordination between the two entry points of a PlayNow process.

A process is started either to convert its command-line path (the default
conversion) or to serve a Services request carrying selected text. The
default conversion is delayed briefly so a Services request that arrives
first can take over; whichever claims the run first is the only one that
touches the file system.
"""
from __future__ import annotations

import threading
from typing import Callable, Optional, TypeVar

from utils.event_logger import EventLogger, get_event_logger


T = TypeVar("T")


class InvocationCoordinator:
    """
    One "executed" flag plus one timer.

    Example:
        >>> coordinator = InvocationCoordinator(lambda: app.convert(path), delay=1.0)
        >>> coordinator.start()
        >>> coordinator.run_services(lambda: app.convert(path, contents, from_services=True))
        >>> coordinator.wait()
    """

    def __init__(
        self,
        default_action: Callable[[], None],
        delay: float = 1.0,
        event_logger: Optional[EventLogger] = None,
    ):
        self.default_action = default_action
        self.delay = delay
        self.event_logger = event_logger or get_event_logger()

        self._lock = threading.Lock()
        self._executed = False
        self._done = threading.Event()
        self._timer: Optional[threading.Timer] = None
        self._error: Optional[BaseException] = None

    @property
    def executed(self) -> bool:
        with self._lock:
            return self._executed

    def _claim(self) -> bool:
        with self._lock:
            if self._executed:
                return False
            self._executed = True
            return True

    def start(self) -> None:
        """Arm the delayed default conversion, unless a Services request already ran."""
        if self.executed:
            return
        self._timer = threading.Timer(self.delay, self._run_default)
        self._timer.daemon = True
        self._timer.start()

    def _run_default(self) -> None:
        try:
            if self._claim():
                self.default_action()
            else:
                self.event_logger.invocation_skipped("a Services request was already handled")
        except BaseException as e:
            self._error = e
        finally:
            self._done.set()

    def run_services(self, action: Callable[[], T]) -> Optional[T]:
        """Run a Services request now unless the default conversion already ran."""
        if not self._claim():
            self.event_logger.invocation_skipped("the default conversion already ran")
            return None
        if self._timer is not None:
            self._timer.cancel()
        try:
            return action()
        finally:
            self._done.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until one of the two paths has finished.

        Re-raises an exception escaping the default conversion. Returns False on timeout.
        """
        finished = self._done.wait(timeout)
        if self._error is not None:
            error, self._error = self._error, None
            raise error
        return finished
