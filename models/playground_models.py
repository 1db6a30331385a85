"""Data models for playground bundles and pages."""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


PLAYGROUND_EXTENSION = ".playground"
MANIFEST_FILENAME = "contents.xcplayground"
PAGES_DIRECTORY = "Pages"
PAGE_EXTENSION = ".xcplaygroundpage"
CONTENTS_FILENAME = "Contents.swift"

# Seconds between creation and modification below which a page counts as never edited.
UNUSED_THRESHOLD_SECONDS = 2.0


class PlaygroundBundle(BaseModel):
    """On-disk layout of one .playground bundle."""

    base_location: Path = Field(description="Bundle directory, ends in .playground")

    model_config = ConfigDict(frozen=True)

    @property
    def name(self) -> str:
        return self.base_location.name

    @property
    def manifest_location(self) -> Path:
        return self.base_location / MANIFEST_FILENAME

    @property
    def pages_location(self) -> Path:
        return self.base_location / PAGES_DIRECTORY

    def exists(self) -> bool:
        """A bundle exists once its manifest does."""
        return self.manifest_location.is_file()

    def page(self, name: str) -> Page:
        return Page(name=name, directory_location=self.pages_location / f"{name}{PAGE_EXTENSION}")


class Page(BaseModel):
    """A page directory inside a bundle, with optional timestamps of its contents file."""

    name: str = Field(description="Sanitized page name")
    directory_location: Path = Field(description="<Pages>/<name>.xcplaygroundpage")
    created_at: Optional[float] = Field(default=None, description="Creation time of the contents file (epoch seconds)")
    modified_at: Optional[float] = Field(default=None, description="Modification time of the contents file (epoch seconds)")

    model_config = ConfigDict(frozen=True)

    @property
    def contents_location(self) -> Path:
        return self.directory_location / CONTENTS_FILENAME

    @property
    def unused(self) -> bool:
        """True when the contents file was not modified UNUSED_THRESHOLD_SECONDS after creation.

        Pages without readable timestamps are never unused. This is a heuristic:
        a page edited within the threshold is misclassified as unused.
        """
        if self.created_at is None or self.modified_at is None:
            return False
        return self.modified_at - self.created_at < UNUSED_THRESHOLD_SECONDS


class UpdateResult(BaseModel):
    """What a manifest update hands over to the launcher."""

    bundle_location: Path
    page_name: str
    page_location: Path
    created: bool = Field(description="True when the bundle was created by this update")
    pruned_pages: List[str] = Field(default_factory=list, description="Names of evicted unused pages")

    model_config = ConfigDict(frozen=True)


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
