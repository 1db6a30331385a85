"""
contents.xcplayground codec.

The manifest is an XML document:

    <?xml version="1.0" encoding="UTF-8" standalone="yes"?>
    <playground version="6.0" target-platform="osx" requires-full-environment="true">
        <pages>
            <page name="123456" />
        </pages>
    </playground>

PlaygroundManifest keeps the parsed element tree private and exposes only the
operations the tool performs on it. Elements it does not know about are kept
as they are when the manifest is rewritten.
"""
from __future__ import annotations

import os
import re
import stat
import tempfile
import xml.etree.ElementTree as ET
from copy import deepcopy
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from error_handling import VersionUndetectable, VersionUnsupported


SUPPORTED_VERSION = "6.0"
ROOT_TAG = "playground"
PAGES_TAG = "pages"
PAGE_TAG = "page"

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
INDENT = "    "

_VERSION_PATTERN = re.compile(r"^\d+(\.\d+)*$")


def parse_version(version: str) -> Optional[Tuple[int, ...]]:
    """'6.0' -> (6, 0); None when the version is not dotted-numeric."""
    version = version.strip()
    if not _VERSION_PATTERN.match(version):
        return None
    return tuple(int(part) for part in version.split("."))


def is_newer_version(version: Tuple[int, ...], than: Tuple[int, ...]) -> bool:
    width = max(len(version), len(than))
    padded = version + (0,) * (width - len(version))
    other = than + (0,) * (width - len(than))
    return padded > other


class PlaygroundManifest:
    """Typed view over a contents.xcplayground document."""

    def __init__(self, root: ET.Element):
        self._root = root

    @classmethod
    def new(
        cls,
        target_platform: str,
        page_names: Iterable[str] = (),
        version: str = SUPPORTED_VERSION,
    ) -> PlaygroundManifest:
        root = ET.Element(ROOT_TAG, {
            "version": version,
            "target-platform": target_platform,
            "requires-full-environment": "true",
        })
        pages = ET.SubElement(root, PAGES_TAG)
        for name in page_names:
            ET.SubElement(pages, PAGE_TAG, name=name)
        return cls(root)

    @classmethod
    def parse(cls, data: Union[str, bytes]) -> PlaygroundManifest:
        """Parse manifest XML. Raises xml.etree.ElementTree.ParseError on malformed input."""
        return cls(ET.fromstring(data))

    @classmethod
    def read(cls, path: Path) -> PlaygroundManifest:
        return cls.parse(Path(path).read_bytes())

    @property
    def is_playground(self) -> bool:
        return self._root.tag == ROOT_TAG

    @property
    def version(self) -> Optional[str]:
        if not self.is_playground:
            return None
        return self._root.get("version")

    @property
    def target_platform(self) -> Optional[str]:
        return self._root.get("target-platform")

    def validate(self, bundle_location: Path) -> str:
        """
        Check the manifest version against SUPPORTED_VERSION.

        Older and equal versions are accepted.

        Raises:
            VersionUndetectable: no <playground version="..."> root
            VersionUnsupported: version newer than supported, or not dotted-numeric
        """
        version = self.version
        if version is None:
            raise VersionUndetectable(bundle_location)
        parsed = parse_version(version)
        if parsed is None or is_newer_version(parsed, parse_version(SUPPORTED_VERSION)):
            raise VersionUnsupported(bundle_location, version, SUPPORTED_VERSION)
        return version

    @property
    def has_pages_container(self) -> bool:
        return self._root.find(PAGES_TAG) is not None

    @property
    def page_names(self) -> List[str]:
        pages = self._root.find(PAGES_TAG)
        if pages is None:
            return []
        return [page.get("name", "") for page in pages.findall(PAGE_TAG)]

    def remove_pages(self, names: Iterable[str]) -> int:
        """Detach every <page> whose name is in `names`. Returns how many were removed."""
        pages = self._root.find(PAGES_TAG)
        if pages is None:
            return 0
        names = set(names)
        doomed = [page for page in pages.findall(PAGE_TAG) if page.get("name") in names]
        for page in doomed:
            pages.remove(page)
        return len(doomed)

    def add_page(self, name: str) -> None:
        pages = self._root.find(PAGES_TAG)
        if pages is None:
            raise ValueError("manifest has no <pages> element")
        ET.SubElement(pages, PAGE_TAG, name=name)

    def to_string(self) -> str:
        root = deepcopy(self._root)
        ET.indent(root, space=INDENT)
        return XML_DECLARATION + "\n" + ET.tostring(root, encoding="unicode") + "\n"

    def to_bytes(self) -> bytes:
        return self.to_string().encode("utf-8")

    def write_new(self, path: Path) -> None:
        """Write to `path`, raising FileExistsError instead of overwriting."""
        with open(path, "xb") as f:
            f.write(self.to_bytes())

    def write_atomic(self, path: Path) -> None:
        """Replace `path` so that readers see either the old or the new manifest."""
        path = Path(path)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(self.to_bytes())
                f.flush()
                os.fsync(f.fileno())
            if path.exists():
                os.chmod(tmp_name, stat.S_IMODE(path.stat().st_mode))
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
