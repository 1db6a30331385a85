"""
Shared pytest fixtures for all tests.
"""
import os
from datetime import datetime
from pathlib import Path

import pytest

import playground_manager
from launcher import DryRunLauncher
from playground_manager import PlaygroundManifestManager
from playnow_config import (
    DebugConfig,
    InvocationConfig,
    LauncherConfig,
    PlaygroundConfig,
    PlayNowConfig,
)
from utils.event_logger import EventLogger, set_event_logger


@pytest.fixture
def fixed_now():
    """Invocation time used for bundle and page names"""
    return datetime(2015, 9, 5, 12, 34, 56)


@pytest.fixture
def event_logger():
    """Quiet event logger installed as the global one"""
    logger = EventLogger(debug_mode=False)
    set_event_logger(logger)
    yield logger
    set_event_logger(EventLogger(debug_mode=False))


@pytest.fixture
def events(event_logger):
    """Every event emitted through the event_logger fixture, in order"""
    seen = []
    event_logger.register_callback(seen.append)
    return seen


@pytest.fixture
def birth_times(monkeypatch):
    """
    Give contents files a birth time on file systems that do not report one.

    A file's birth time is its modification time when it is first read, unless
    the test records one beforehand in the returned dict.
    """
    born = {}

    def read(contents_location):
        modified = os.stat(contents_location).st_mtime
        return born.setdefault(Path(contents_location), modified), modified

    monkeypatch.setattr(playground_manager, "read_contents_timestamps", read)
    return born


@pytest.fixture
def config(tmp_path):
    """Configuration rooted in tmp_path that never launches an editor"""
    return PlayNowConfig(
        playground=PlaygroundConfig(default_directory=tmp_path),
        launcher=LauncherConfig(provider_type="dry-run"),
        invocation=InvocationConfig(default_delay=0.0),
        logging=DebugConfig(debug_mode=False),
    )


@pytest.fixture
def launcher(config, event_logger):
    return DryRunLauncher(config.launcher, event_logger)


@pytest.fixture
def manager(config, event_logger):
    return PlaygroundManifestManager(config, event_logger)


@pytest.fixture
def write_manifest():
    """Write raw manifest XML into a bundle directory and return the bundle path"""
    def _write(bundle: Path, xml: str) -> Path:
        bundle.mkdir(parents=True, exist_ok=True)
        (bundle / "contents.xcplayground").write_text(xml, encoding="utf-8")
        return bundle
    return _write
