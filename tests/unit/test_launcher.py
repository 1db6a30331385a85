"""
Unit tests for editor launchers.
"""
import subprocess
from pathlib import Path

import pytest

from error_handling import ConfigurationError
from launcher import DryRunLauncher, MacOSLauncher, create_launcher
from models import UpdateResult
from playnow_config import LauncherConfig


BUNDLE = Path("/tmp/PlayNow-20150905.playground")
PAGE = BUNDLE / "Pages" / "123456.xcplaygroundpage"


def result(created: bool) -> UpdateResult:
    return UpdateResult(bundle_location=BUNDLE, page_name="123456", page_location=PAGE, created=created)


class FakeRunner:
    """Stands in for subprocess.run; pgrep answers from a queue of return codes"""

    def __init__(self, pgrep_codes=()):
        self.calls = []
        self.pgrep_codes = list(pgrep_codes)

    def __call__(self, cmd, **kwargs):
        self.calls.append(cmd)
        code = 0
        if cmd[0] == "pgrep":
            code = self.pgrep_codes.pop(0) if self.pgrep_codes else 0
        return subprocess.CompletedProcess(cmd, code)

    @property
    def opens(self):
        return [c for c in self.calls if c[0] == "/usr/bin/open"]


class TestDryRunLauncher:

    def test_new_bundle_opens_bundle_only(self, event_logger):
        launcher = DryRunLauncher(LauncherConfig(), event_logger)

        launcher.launch(result(created=True))

        assert launcher.opened == [(BUNDLE, True)]
        assert launcher.slept == []

    def test_existing_bundle_opens_page_after_grace_period(self, event_logger):
        launcher = DryRunLauncher(LauncherConfig(wait_seconds_before_opening_page=5), event_logger)

        launcher.launch(result(created=False))

        assert launcher.opened == [(BUNDLE, False), (PAGE, True)]
        assert launcher.slept == [5]


class TestMacOSLauncher:

    def test_open_command(self, event_logger):
        launcher = MacOSLauncher(LauncherConfig(editor_application="/Applications/Xcode-beta.app"), event_logger)

        assert launcher.open_command(BUNDLE, activate=False) == [
            "/usr/bin/open", "-g", "-a", "/Applications/Xcode-beta.app", str(BUNDLE)
        ]
        assert launcher.editor_process_name == "Xcode-beta"

    def test_new_bundle(self, event_logger):
        runner = FakeRunner()
        launcher = MacOSLauncher(LauncherConfig(), event_logger, runner=runner)

        launcher.launch(result(created=True))

        assert runner.opens == [["/usr/bin/open", str(BUNDLE)]]

    def test_waits_for_fresh_editor_launch(self, event_logger, monkeypatch):
        # not running before open, then two polls until it is up
        runner = FakeRunner(pgrep_codes=[1, 1, 1, 0])
        launcher = MacOSLauncher(LauncherConfig(poll_interval=0.5), event_logger, runner=runner)
        slept = []
        monkeypatch.setattr(launcher, "_sleep", slept.append)

        launcher.launch(result(created=False))

        assert runner.opens == [
            ["/usr/bin/open", "-g", str(BUNDLE)],
            ["/usr/bin/open", str(PAGE)],
        ]
        assert slept == [0.5, 0.5, 3]

    def test_running_editor_only_waits_grace_period(self, event_logger, monkeypatch):
        runner = FakeRunner(pgrep_codes=[0])
        launcher = MacOSLauncher(LauncherConfig(), event_logger, runner=runner)
        slept = []
        monkeypatch.setattr(launcher, "_sleep", slept.append)

        launcher.launch(result(created=False))

        assert slept == [3]
        assert len(runner.opens) == 2

    def test_gives_up_waiting_after_timeout(self, event_logger, monkeypatch):
        runner = FakeRunner(pgrep_codes=[1] * 100)
        launcher = MacOSLauncher(LauncherConfig(launch_timeout=0.0), event_logger, runner=runner)
        monkeypatch.setattr(launcher, "_sleep", lambda seconds: None)

        assert launcher.wait_until_running() is False

    def test_open_failure_propagates(self, event_logger):
        def failing(cmd, **kwargs):
            if cmd[0] == "pgrep":
                return subprocess.CompletedProcess(cmd, 0)
            raise subprocess.CalledProcessError(1, cmd)

        launcher = MacOSLauncher(LauncherConfig(), event_logger, runner=failing)

        with pytest.raises(subprocess.CalledProcessError):
            launcher.launch(result(created=True))


class TestFactory:

    def test_known_types(self, event_logger):
        assert isinstance(create_launcher(LauncherConfig(provider_type="macos"), event_logger), MacOSLauncher)
        assert isinstance(create_launcher(LauncherConfig(provider_type="dry-run"), event_logger), DryRunLauncher)

    def test_unknown_type(self, event_logger):
        with pytest.raises(ConfigurationError):
            create_launcher(LauncherConfig(provider_type="vim"), event_logger)
