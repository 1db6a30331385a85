#!/usr/bin/env python3
"""
PlayNow - create or extend an Xcode playground and open it.

Usage:
    playnow                       # new page in ~/Desktop/PlayNow-<date>.playground
    playnow ~/Playgrounds         # new page in ~/Playgrounds/PlayNow-<date>.playground
    playnow Scratch.playground    # new page in an explicit bundle
    pbpaste | playnow --services  # selected text becomes the page contents

Configuration is read from --config, $PLAYNOW_CONFIG or ~/.playnow.json.
"""
from __future__ import annotations

import argparse
import subprocess
import sys
import xml.etree.ElementTree as ET
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from error_handling import ErrorHandler, PlayNowError
from invocation import InvocationCoordinator
from launcher import EditorLauncher, create_launcher
from models import PlaygroundBundle, UpdateResult
from path_resolver import PlaygroundPathResolver, default_desktop_directory
from playground_manager import PlaygroundManifestManager
from playnow_config import DebugConfig, PlayNowConfig
from utils.event_logger import EventLogger, set_event_logger


# Errors reported to the user instead of escaping main().
REPORTED_ERRORS = (PlayNowError, OSError, ET.ParseError, subprocess.CalledProcessError)


class PlayNow:
    """Resolve, update, launch: one conversion per call."""

    def __init__(
        self,
        config: PlayNowConfig,
        launcher: Optional[EditorLauncher] = None,
        event_logger: Optional[EventLogger] = None,
        now: Optional[datetime] = None,
        desktop_locator=default_desktop_directory,
    ):
        self.config = config
        self.event_logger = event_logger or EventLogger(debug_mode=config.logging.debug_mode)
        self.launcher = launcher or create_launcher(config.launcher, self.event_logger)
        self.manager = PlaygroundManifestManager(config, self.event_logger)
        self.resolver = PlaygroundPathResolver(config, now=now, desktop_locator=desktop_locator)

    def convert(
        self,
        input_path: Optional[Path] = None,
        contents: Optional[str] = None,
        from_services: bool = False,
    ) -> UpdateResult:
        """
        Add a page holding `contents` to the playground chosen for `input_path`.

        Pages created from Services are marked as used so the next run keeps them.
        """
        bundle_location = self.resolver.resolve(input_path)
        result = self.manager.update(bundle_location, self.resolver.page_name, contents)

        if from_services:
            page = PlaygroundBundle(base_location=result.bundle_location).page(result.page_name)
            self.manager.mark_page_as_used(page)

        self.launcher.launch(result)
        return result


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="playnow",
        description="Create or extend an Xcode playground and open it",
    )
    p.add_argument("path", nargs="?", type=Path, help="Directory to create the playground in, or a .playground bundle")
    p.add_argument("--services", action="store_true", help="Read the page contents from stdin (Services request)")
    p.add_argument("--config", type=Path, help="JSON configuration file (default: $PLAYNOW_CONFIG or ~/.playnow.json)")
    p.add_argument("--dry-run", action="store_true", help="Update the playground but only report what would be opened")
    p.add_argument("--quiet", action="store_true", help="Do not print progress events")
    return p


def read_services_selection(stream) -> Optional[str]:
    """Text piped in by a Services request. None when stdin is missing, closed or a terminal."""
    if stream is None or stream.closed or stream.isatty():
        return None
    return stream.read()


def _apply_overrides(config: PlayNowConfig, args: argparse.Namespace) -> PlayNowConfig:
    if args.quiet:
        config = config.model_copy(update={"logging": DebugConfig(debug_mode=False)})
    if args.dry_run:
        launcher = config.launcher.model_copy(update={"provider_type": "dry-run"})
        config = config.model_copy(update={"launcher": launcher})
    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    event_logger = EventLogger(debug_mode=not args.quiet)
    set_event_logger(event_logger)
    error_handler = ErrorHandler(event_logger=event_logger)

    try:
        config = _apply_overrides(PlayNowConfig.load(args.config), args)
        event_logger.debug_mode = config.logging.debug_mode
        app = PlayNow(config, event_logger=event_logger)
    except REPORTED_ERRORS as e:
        error_handler.handle_error(e)
        return 0

    def run(contents: Optional[str], from_services: bool) -> None:
        try:
            app.convert(args.path, contents, from_services=from_services)
        except REPORTED_ERRORS as e:
            error_handler.handle_error(e)

    coordinator = InvocationCoordinator(
        lambda: run(None, False),
        delay=config.invocation.default_delay,
        event_logger=event_logger,
    )
    if args.services:
        contents = read_services_selection(sys.stdin)
        coordinator.run_services(lambda: run(contents, True))

    coordinator.start()
    coordinator.wait()
    return 0


if __name__ == "__main__":
    sys.exit(main())
