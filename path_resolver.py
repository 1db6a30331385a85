"""
Playground and page location resolution.

Decides which .playground bundle a run works on and what the new page is
called. Both names derive from a single invocation time so a run's bundle and
page agree on "now".
"""
from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from error_handling import CantResolveBundleLocation
from models import PLAYGROUND_EXTENSION
from playnow_config import PlayNowConfig


# Page names are stricter than file names.
_DISALLOWED_PAGE_NAME_CHARACTERS = re.compile(r"[\\:/]")


def sanitize_page_name(name: str) -> str:
    """Replace every '\\', ':' and '/' with '_'."""
    return _DISALLOWED_PAGE_NAME_CHARACTERS.sub("_", name)


def default_desktop_directory() -> Optional[Path]:
    desktop = Path.home() / "Desktop"
    return desktop if desktop.is_dir() else None


class PlaygroundPathResolver:
    """
    Computes the bundle location and page name for one invocation.

    Example:
        >>> resolver = PlaygroundPathResolver(PlayNowConfig(), now=datetime(2015, 9, 5, 12, 30))
        >>> resolver.playground_name
        'PlayNow-20150905'
        >>> resolver.resolve(Path("/tmp"))
        PosixPath('/tmp/PlayNow-20150905.playground')
    """

    def __init__(
        self,
        config: PlayNowConfig,
        now: Optional[datetime] = None,
        desktop_locator: Callable[[], Optional[Path]] = default_desktop_directory,
    ):
        self.config = config
        self.now = now or datetime.now()
        self._desktop_locator = desktop_locator

    @property
    def playground_name(self) -> str:
        naming = self.config.naming
        return naming.playground_name_prefix + self.now.strftime(naming.playground_name_date_format)

    @property
    def playground_path_component(self) -> str:
        return self.playground_name + PLAYGROUND_EXTENSION

    @property
    def page_name(self) -> str:
        naming = self.config.naming
        return sanitize_page_name(naming.page_name_prefix + self.now.strftime(naming.page_name_date_format))

    @staticmethod
    def is_playground_path(path: Path) -> bool:
        return path.suffix == PLAYGROUND_EXTENSION

    def resolve(self, input_path: Optional[Path] = None) -> Path:
        """
        Decide which playground bundle to use.

        Order: the input path itself when it is a bundle, a new bundle inside
        the input path, inside the configured default directory, inside the
        desktop directory.

        Raises:
            CantResolveBundleLocation: when none of the above is available
        """
        if input_path is not None:
            input_path = Path(input_path).expanduser()
            if self.is_playground_path(input_path):
                return input_path
            return input_path / self.playground_path_component

        default_directory = self.config.playground.default_directory
        if default_directory is not None:
            return default_directory / self.playground_path_component

        desktop = self._desktop_locator()
        if desktop is not None:
            return desktop / self.playground_path_component

        raise CantResolveBundleLocation(self.playground_path_component)
