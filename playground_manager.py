"""
Playground manifest management.

PlaygroundManifestManager creates a new .playground bundle or appends a page to
an existing one. While appending it evicts pages the user never edited: a page
whose Contents.swift was modified less than UNUSED_THRESHOLD_SECONDS after it
was created is deleted on the next run, together with its manifest entry.

Example:
    >>> manager = PlaygroundManifestManager(PlayNowConfig())
    >>> result = manager.update(Path("~/Desktop/PlayNow-20150905.playground"), "123456", "let x = 1")
    >>> result.created
    True
"""
from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import List, Optional, Tuple

from manifest import PlaygroundManifest
from models import (
    PAGE_EXTENSION,
    UNUSED_THRESHOLD_SECONDS,
    Page,
    PlaygroundBundle,
    UpdateResult,
)
from page_template import encode_page_contents
from playnow_config import PlayNowConfig
from utils.event_logger import EventLogger, get_event_logger


def read_contents_timestamps(contents_location: Path) -> Tuple[Optional[float], float]:
    """
    (created, modified) times of a file in epoch seconds.

    `created` is the birth time, which only some file systems report (macOS, BSD).
    It is None elsewhere: the inode change time moves on every write and on
    os.utime, so it cannot stand in for it. A page without a creation time is
    never classed as unused.
    """
    st = os.stat(contents_location)
    return getattr(st, "st_birthtime", None), st.st_mtime


class PlaygroundManifestManager:
    """Reads, mutates and writes a playground's manifest and page directories."""

    def __init__(self, config: PlayNowConfig, event_logger: Optional[EventLogger] = None):
        self.config = config
        self.event_logger = event_logger or get_event_logger()

    def update(self, bundle_location: Path, page_name: str, page_contents: Optional[str] = None) -> UpdateResult:
        """
        Create the bundle, or append a page to it when its manifest already exists.

        `page_contents` of None uses the configured default contents.
        """
        bundle = PlaygroundBundle(base_location=Path(bundle_location).expanduser())
        page = bundle.page(page_name)
        data = encode_page_contents(page_contents, self.config.playground.contents_swift_string)

        self.event_logger.bundle_resolved(str(bundle.base_location))
        if bundle.exists():
            return self.append_page(bundle, page, data)
        return self.create_bundle(bundle, page, data)

    def create_bundle(self, bundle: PlaygroundBundle, page: Page, data: bytes) -> UpdateResult:
        """
        Build a new bundle holding a single page.

        Raises:
            FileExistsError: when the manifest or the page contents already exist
        """
        bundle.base_location.mkdir(parents=True, exist_ok=True)

        manifest = PlaygroundManifest.new(self.config.playground.target_platform, [page.name])
        manifest.write_new(bundle.manifest_location)

        page.directory_location.mkdir(parents=True, exist_ok=True)
        with open(page.contents_location, "xb") as f:
            f.write(data)

        self.event_logger.bundle_created(str(bundle.base_location), page.name)
        return UpdateResult(
            bundle_location=bundle.base_location,
            page_name=page.name,
            page_location=page.directory_location,
            created=True,
        )

    def append_page(self, bundle: PlaygroundBundle, page: Page, data: bytes) -> UpdateResult:
        """
        Add a page to an existing bundle and evict unused pages.

        Raises:
            VersionUndetectable, VersionUnsupported: for manifests this tool does not understand
        """
        manifest = PlaygroundManifest.read(bundle.manifest_location)
        manifest.validate(bundle.base_location)

        # Collected before writing so the new page is never a candidate.
        unused = self.unused_pages(bundle, exclude=page)

        page.directory_location.mkdir(parents=True, exist_ok=True)
        try:
            with open(page.contents_location, "xb") as f:
                f.write(data)
        except FileExistsError:
            # Page names come from the clock; two runs in the same second share one.
            self.event_logger.page_kept(page.name, bundle_location=str(bundle.base_location))

        pruned = self.prune_pages(unused)

        if manifest.has_pages_container:
            manifest.remove_pages(pruned)
            if page.name not in manifest.page_names:
                manifest.add_page(page.name)
            manifest.write_atomic(bundle.manifest_location)
            self.event_logger.manifest_written(str(bundle.manifest_location), page_count=len(manifest.page_names))

        self.event_logger.page_added(page.name, str(bundle.base_location), pruned=len(pruned))
        return UpdateResult(
            bundle_location=bundle.base_location,
            page_name=page.name,
            page_location=page.directory_location,
            created=False,
            pruned_pages=pruned,
        )

    def load_pages(self, bundle: PlaygroundBundle) -> List[Page]:
        """Page directories under Pages/ with the timestamps of their contents files."""
        if not bundle.pages_location.is_dir():
            return []

        pages: List[Page] = []
        for entry in sorted(bundle.pages_location.iterdir()):
            if entry.name.startswith(".") or entry.suffix != PAGE_EXTENSION or not entry.is_dir():
                continue
            page = Page(name=entry.stem, directory_location=entry)
            try:
                created, modified = read_contents_timestamps(page.contents_location)
            except OSError:
                pages.append(page)
                continue
            pages.append(page.model_copy(update={"created_at": created, "modified_at": modified}))
        return pages

    def unused_pages(self, bundle: PlaygroundBundle, exclude: Optional[Page] = None) -> List[Page]:
        """Pages never edited since creation, excluding `exclude` (the page being added)."""
        return [
            page for page in self.load_pages(bundle)
            if page.unused and (exclude is None or page.directory_location != exclude.directory_location)
        ]

    def prune_pages(self, pages: List[Page]) -> List[str]:
        """
        Best-effort removal of page directories.

        A failed removal is logged and skipped. Returns the names actually removed.
        """
        removed: List[str] = []
        for page in pages:
            try:
                shutil.rmtree(page.directory_location)
            except OSError as e:
                self.event_logger.page_prune_failed(page.name, error=e)
                continue
            removed.append(page.name)
            self.event_logger.page_pruned(page.name)
        return removed

    def mark_page_as_used(self, page: Page) -> Page:
        """
        Push the page's modification time past the unused threshold.

        Only done for content that came from Services, and only when
        make_used_if_from_services is enabled; otherwise the page is returned as is.
        """
        if not self.config.playground.make_used_if_from_services:
            return page

        created, modified = read_contents_timestamps(page.contents_location)
        touched = (modified if created is None else created) + UNUSED_THRESHOLD_SECONDS + 1
        os.utime(page.contents_location, (touched, touched))

        created, modified = read_contents_timestamps(page.contents_location)
        self.event_logger.page_marked_used(page.name, modified_at=modified)
        return page.model_copy(update={"created_at": created, "modified_at": modified})
