"""Contents.swift template for new playground pages."""
from __future__ import annotations

from typing import Optional


PREVIOUS_PAGE_MARKER = "//: [Previous](@previous)"
NEXT_PAGE_MARKER = "//: [Next](@next)"
DEFAULT_IMPORT = "import Foundation"


def render_page_contents(contents: Optional[str], default_contents: str) -> str:
    """Wrap `contents` (or `default_contents` when None) in the page navigation template."""
    return "\n".join([
        PREVIOUS_PAGE_MARKER,
        "",
        DEFAULT_IMPORT,
        "",
        contents if contents is not None else default_contents,
        "",
        NEXT_PAGE_MARKER,
    ])


def encode_page_contents(contents: Optional[str], default_contents: str) -> bytes:
    return render_page_contents(contents, default_contents).encode("utf-8")
