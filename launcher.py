"""
Editor launcher pattern for PlayNow.

This module provides an abstraction layer between a manifest update and the
application that shows the result, so the update can be exercised without
Xcode.

Example:
    >>> from launcher import create_launcher
    >>> launcher = create_launcher(config.launcher)
    >>> launcher.launch(result)
"""
from __future__ import annotations

import subprocess
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from error_handling import ConfigurationError
from models import UpdateResult
from playnow_config import LauncherConfig
from utils.event_logger import EventLogger, get_event_logger


OPEN_COMMAND = "/usr/bin/open"
DEFAULT_EDITOR_PROCESS = "Xcode"


class EditorLauncher(ABC):
    """
    Abstract base class for editor launchers.

    Implementations open a freshly created bundle, or for an existing bundle
    open the bundle and then the added page.
    """

    def __init__(self, config: LauncherConfig, event_logger: Optional[EventLogger] = None):
        self.config = config
        self.event_logger = event_logger or get_event_logger()

    @abstractmethod
    def open(self, location: Path, activate: bool = True) -> None:
        """Open `location` in the editor."""
        pass

    @abstractmethod
    def is_editor_running(self) -> bool:
        pass

    def wait_until_running(self) -> bool:
        """Poll until the editor reports itself running or launch_timeout passes."""
        deadline = time.monotonic() + self.config.launch_timeout
        while not self.is_editor_running():
            if time.monotonic() >= deadline:
                self.event_logger.system_warning(
                    "Editor did not finish launching in time",
                    launch_timeout=self.config.launch_timeout,
                )
                return False
            self._sleep(self.config.poll_interval)
        return True

    def launch(self, result: UpdateResult) -> None:
        """
        Open what `result` produced.

        A new bundle opens directly. For an existing bundle, the bundle is
        opened in the background first; if that started the editor, wait for
        it to come up, then give it wait_seconds_before_opening_page before
        opening the page.
        """
        if result.created:
            self.open(result.bundle_location)
            return

        was_running = self.is_editor_running()
        self.open(result.bundle_location, activate=False)
        if not was_running:
            self.event_logger.launch_wait("Waiting for the editor to finish launching")
            self.wait_until_running()

        wait = self.config.wait_seconds_before_opening_page
        self.event_logger.launch_wait(f"Waiting {wait}s before opening page '{result.page_name}'", seconds=wait)
        self._sleep(wait)
        self.open(result.page_location)

    def _sleep(self, seconds: float) -> None:
        time.sleep(seconds)


class MacOSLauncher(EditorLauncher):
    """
    Default launcher: hands locations to /usr/bin/open.

    Uses the application registered for .playground bundles unless
    editor_application is configured.
    """

    def __init__(
        self,
        config: LauncherConfig,
        event_logger: Optional[EventLogger] = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        super().__init__(config, event_logger)
        self._run = runner

    @property
    def editor_process_name(self) -> str:
        if self.config.editor_application:
            return Path(self.config.editor_application).stem
        return DEFAULT_EDITOR_PROCESS

    def open_command(self, location: Path, activate: bool = True) -> List[str]:
        cmd = [OPEN_COMMAND]
        if not activate:
            cmd.append("-g")
        if self.config.editor_application:
            cmd.extend(["-a", self.config.editor_application])
        cmd.append(str(location))
        return cmd

    def open(self, location: Path, activate: bool = True) -> None:
        self.event_logger.launch_open(str(location), application=self.config.editor_application)
        self._run(self.open_command(location, activate), check=True)

    def is_editor_running(self) -> bool:
        proc = self._run(
            ["pgrep", "-x", self.editor_process_name],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
        return proc.returncode == 0


class DryRunLauncher(EditorLauncher):
    """
    Launcher that only records what it would open.

    Useful for --dry-run, for machines without Xcode, and for tests.
    """

    def __init__(self, config: LauncherConfig, event_logger: Optional[EventLogger] = None, editor_running: bool = True):
        super().__init__(config, event_logger)
        self.editor_running = editor_running
        self.opened: List[Tuple[Path, bool]] = []
        self.slept: List[float] = []

    def open(self, location: Path, activate: bool = True) -> None:
        self.event_logger.launch_open(str(location), application=self.config.editor_application, dry_run=True)
        self.opened.append((Path(location), activate))
        self.editor_running = True

    def is_editor_running(self) -> bool:
        return self.editor_running

    def _sleep(self, seconds: float) -> None:
        self.slept.append(seconds)


def create_launcher(config: LauncherConfig, event_logger: Optional[EventLogger] = None) -> EditorLauncher:
    """
    Factory function to create the launcher named by config.provider_type.

    Raises:
        ConfigurationError: for an unknown provider_type
    """
    if config.provider_type == "macos":
        return MacOSLauncher(config, event_logger)
    elif config.provider_type == "dry-run":
        return DryRunLauncher(config, event_logger)
    else:
        raise ConfigurationError(
            f"Unknown launcher provider_type: {config.provider_type}. "
            f"Must be one of: macos, dry-run"
        )
