"""
Data models for the PlayNow playground tooling.
"""
from .playground_models import (
    PLAYGROUND_EXTENSION,
    MANIFEST_FILENAME,
    PAGES_DIRECTORY,
    PAGE_EXTENSION,
    CONTENTS_FILENAME,
    UNUSED_THRESHOLD_SECONDS,
    PlaygroundBundle,
    Page,
    UpdateResult,
)

__all__ = [
    "PLAYGROUND_EXTENSION",
    "MANIFEST_FILENAME",
    "PAGES_DIRECTORY",
    "PAGE_EXTENSION",
    "CONTENTS_FILENAME",
    "UNUSED_THRESHOLD_SECONDS",
    "PlaygroundBundle",
    "Page",
    "UpdateResult",
]
