"""Render segments as HTML, as the site's terminal component does."""

from __future__ import annotations

from html import escape
from typing import Iterable

from ansispan.segments import Segment, ansi_to_segments
from ansispan.styles import TAILWIND, StyleTable


def _class_attribute(classes: str) -> str:
    return f' class="{escape(classes)}"' if classes else ""


def render_html(
    segments: Iterable[Segment],
    *,
    container_class: str = "flex justify-center",
    pre_class: str = "",
    separator: str = " ",
) -> str:
    """Render segments as a block of preformatted HTML.

    Args:
        segments: Segments to render.
        container_class: Class of the outer `div`.
        pre_class: Class of the `pre` element.
        separator: Joins the tokens of a segment in to a single class string.

    Returns:
        HTML markup.
    """
    spans = "".join(
        f"<span{_class_attribute(separator.join(classes))}>"
        f"{escape(content, quote=False)}</span>"
        for classes, content in segments
    )
    return (
        f"<div{_class_attribute(container_class)}>"
        f'<pre{_class_attribute(pre_class)} style="text-align: left">'
        f"<code>{spans}</code></pre></div>"
    )


def ansi_to_html(
    text: str,
    table: StyleTable = TAILWIND,
    *,
    container_class: str = "flex justify-center",
    pre_class: str = "",
    separator: str = " ",
) -> str:
    """Convert text with ANSI escape sequences directly to HTML."""
    return render_html(
        ansi_to_segments(text, table),
        container_class=container_class,
        pre_class=pre_class,
        separator=separator,
    )
