"""Render segments as Textual content."""

from __future__ import annotations

from typing import Iterable

from textual.content import Content

from ansispan.cache import cached_ansi_to_segments
from ansispan.segments import Segment
from ansispan.styles import TEXTUAL


def to_content(segments: Iterable[Segment]) -> Content:
    """Assemble Textual content from segments.

    The segments should have been resolved with the `TEXTUAL` table, so
    that each token is a Textual style.

    Args:
        segments: Segments to assemble.

    Returns:
        Content instance.
    """
    return Content.assemble(
        *[
            (content, " ".join(classes)) if classes else content
            for classes, content in segments
        ]
    )


def ansi_to_content(text: str) -> Content:
    """Convert text with ANSI escape sequences to Textual content.

    Args:
        text: Raw text.

    Returns:
        Content instance.
    """
    return to_content(cached_ansi_to_segments(text, TEXTUAL))
