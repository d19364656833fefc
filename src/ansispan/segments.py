"""Convert text containing ANSI escape sequences in to styled segments."""

from __future__ import annotations

from functools import lru_cache
from typing import Iterable, Iterator, NamedTuple

from ansispan.ansi import Run, StyleState, correct, normalize, tokenize
from ansispan.styles import TAILWIND, StyleTable


class Segment(NamedTuple):
    """Text with the visual tokens used to style it."""

    classes: tuple[str, ...]
    """Zero to three tokens: background, foreground, decoration."""
    content: str
    """Text content."""


@lru_cache(maxsize=1024)
def resolve(style: StyleState, table: StyleTable = TAILWIND) -> tuple[str, ...]:
    """Resolve a style state in to visual tokens.

    Args:
        style: Style state.
        table: Table of tokens.

    Returns:
        Tokens for the background, foreground, and decoration (in that order),
            omitting any which aren't set or aren't in the table.
    """
    classes: list[str] = []
    if style.background is not None and (
        token := table.background.get(style.background)
    ):
        classes.append(token)
    if style.foreground is not None and (
        token := table.foreground.get(style.foreground)
    ):
        classes.append(token)
    if style.decoration is not None and (
        token := table.decoration.get(style.decoration)
    ):
        classes.append(token)
    return tuple(classes)


def produce(runs: Iterable[Run], table: StyleTable = TAILWIND) -> Iterator[Segment]:
    """Produce segments from runs, skipping empty runs."""
    for style, content in runs:
        if content:
            yield Segment(resolve(style, table), content)


def ansi_to_segments(text: str, table: StyleTable = TAILWIND) -> list[Segment]:
    """Convert text containing ANSI escape sequences in to segments.

    Backspaces are applied, carriage returns collapsed, then the text is
    split on SGR sequences.

    Args:
        text: Raw text, as written to a terminal.
        table: Table used to resolve styles.

    Raises:
        TypeError: If `text` is not a string (from `correct`).

    Returns:
        A list of segments, in the order of the text.
    """
    return list(produce(tokenize(normalize(correct(text))), table))
