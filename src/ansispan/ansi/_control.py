"""Passes which resolve backspace and carriage return control characters."""

from __future__ import annotations

import re

BACKSPACE_ERASE = re.compile(r"[^\n]\x08")
CARRIAGE_RETURN_NEW_LINE = re.compile(r"\r+\n")
CARRIAGE_RETURNS = re.compile(r"\r+")


def check_text(text: object) -> None:
    """Raise `TypeError` if `text` is not a string."""
    if not isinstance(text, str):
        raise TypeError(f"expected str; found {type(text).__name__}")


def correct(text: str) -> str:
    """Apply backspaces to the characters they follow.

    A backspace erases the character immediately before it, unless that
    character is a new line. Erasures repeat until nothing changes, which
    resolves runs of backspaces.

    Args:
        text: Raw text.

    Returns:
        Text with erased characters (and their backspaces) removed.
    """
    check_text(text)
    for _ in range(len(text)):
        corrected = BACKSPACE_ERASE.sub("", text)
        if len(corrected) == len(text):
            break
        text = corrected
    return text


def _overwrite_line(line: str) -> str:
    base, *overwrites = CARRIAGE_RETURNS.split(line)
    for overwrite in overwrites:
        base = overwrite + base[len(overwrite) :]
    return base


def normalize(text: str) -> str:
    """Collapse carriage return overwrites.

    Text following a carriage return replaces the start of its line, as it
    would on a terminal, so no carriage returns remain for the renderer
    (other than one trailing the input).

    Args:
        text: Text which may contain carriage returns.

    Returns:
        Normalized text.
    """
    check_text(text)
    if "\r" not in text:
        return text
    text = CARRIAGE_RETURN_NEW_LINE.sub("\n", text)
    body = text.rstrip("\r")
    tail = "\r" if len(body) < len(text) else ""
    return "\n".join(_overwrite_line(line) for line in body.split("\n")) + tail
