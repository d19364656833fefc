from __future__ import annotations

import io
import logging
import rich.repr

from typing import Iterable, NamedTuple

from ansispan.ansi._control import check_text
from ansispan.ansi._sgr import ColorName, DecorationName, SGRCommand, parse_sgr
from ansispan.ansi._stream_parser import (
    StreamParser,
    SeparatorToken,
    PatternToken,
    Pattern,
    PatternCheck,
    ParseResult,
    ReadPatterns,
    Token,
)

log = logging.getLogger(__name__)


def character_range(start: int, end: int) -> frozenset:
    """Build a set of characters between to code-points.

    Args:
        start: Start codepoint.
        end: End codepoint (inclusive)

    Returns:
        A frozenset of the characters..
    """
    return frozenset(map(chr, range(start, end + 1)))


class EscapePattern(Pattern):
    """Matches the part of an escape sequence following `ESC`."""

    PARAMETER = character_range(0x30, 0x3F)
    INTERMEDIATE = character_range(0x20, 0x2F)
    FINAL = character_range(0x40, 0x7E)
    DESIGNATION_FINAL = character_range(0x30, 0x7E)
    OSC_TERMINATORS = frozenset({"\x07", "\x9c"})

    def check(self) -> PatternCheck:
        sequence = io.StringIO()
        store = sequence.write
        store(character := (yield))

        match character:
            # CSI
            case "[":
                PARAMETER = self.PARAMETER
                while (character := (yield)) in PARAMETER:
                    store(character)
                INTERMEDIATE = self.INTERMEDIATE
                while character in INTERMEDIATE:
                    store(character)
                    character = yield
                if character not in self.FINAL:
                    return False
                store(character)
                return ("csi", sequence.getvalue())

            # OSC, terminated by BEL, ST, or ESC \
            case "]":
                last_character = ""
                OSC_TERMINATORS = self.OSC_TERMINATORS
                while (character := (yield)) not in OSC_TERMINATORS:
                    if last_character == "\x1b" and character == "\\":
                        break
                    store(character)
                    last_character = character
                return ("osc", sequence.getvalue())

            # Character set designation
            case "(" | ")" | "*" | "+" | "-" | "." | "/":
                if (character := (yield)) not in self.DESIGNATION_FINAL:
                    return False
                store(character)
                return ("csd", sequence.getvalue())

            # Line attribute / ISO 2022
            case "#" | " ":
                store((yield))
                return ("la", sequence.getvalue())

            case _ if character < " ":
                return False

            case _:
                return ("control", character)


class ANSIParser(StreamParser[tuple[str, str]]):
    """Parse text containing escape sequences in to logical tokens.

    Yields `("content", text)` for literal text, `(kind, sequence)` for
    escape sequences, and `("malformed", text)` for an escape which was
    interrupted by a character that can't be part of it.
    """

    def parse(self) -> ParseResult[tuple[str, str]]:
        ESCAPE = "\x1b"

        while True:
            token = yield self.read_until(ESCAPE)

            if isinstance(token, SeparatorToken):
                token = yield self.read_patterns(ESCAPE, escape=EscapePattern())
                if isinstance(token, PatternToken):
                    yield token.value
                else:
                    yield "malformed", token.text
                continue

            yield "content", token.text


@rich.repr.auto
class StyleState(NamedTuple):
    """Style accumulated from SGR sequences.

    All values may be `None` meaning "not set".
    """

    foreground: ColorName | None = None
    """Foreground color."""
    background: ColorName | None = None
    """Background color."""
    decoration: DecorationName | None = None
    """The single active decoration."""

    def __rich_repr__(self) -> rich.repr.Result:
        yield "foreground", self.foreground, None
        yield "background", self.background, None
        yield "decoration", self.decoration, None

    def apply_sgr(self, commands: Iterable[SGRCommand]) -> StyleState:
        """Get a new style state with SGR commands applied.

        A decoration replaces any previous decoration.

        Args:
            commands: Commands from `parse_sgr`.

        Returns:
            New style state.
        """
        foreground, background, decoration = self
        for attribute, value in commands:
            match attribute:
                case "reset":
                    foreground = background = decoration = None
                case "foreground":
                    foreground = value
                case "background":
                    background = value
                case "decoration":
                    decoration = value
                case "clear_decoration":
                    assert isinstance(value, frozenset)
                    if decoration in value:
                        decoration = None
        return StyleState(foreground, background, decoration)


NULL_STYLE_STATE = StyleState()

SGR_PARAMETERS = frozenset("0123456789;:")


def is_sgr(csi: str) -> bool:
    """Check if a CSI sequence (without the `ESC`) sets graphic rendition.

    Args:
        csi: Sequence, e.g. `"[1;31m"`.

    Returns:
        `True` for an SGR sequence, `False` for any other CSI.
    """
    return csi.endswith("m") and SGR_PARAMETERS.issuperset(csi[1:-1])


class Run(NamedTuple):
    """A span of literal text and the style active for it."""

    style: StyleState
    content: str


def tokenize(text: str) -> list[Run]:
    """Split text in to runs of literal text with a style state.

    SGR sequences update the style, other escape sequences are removed.
    Adjacent runs with the same style are merged.

    Args:
        text: Text which may contain escape sequences.

    Returns:
        A list of runs, in the order of the text.
    """
    check_text(text)
    runs: list[Run] = []
    style = NULL_STYLE_STATE
    content = io.StringIO()

    def flush() -> None:
        if literal := content.getvalue():
            if runs and runs[-1].style == style:
                runs[-1] = Run(style, runs[-1].content + literal)
            else:
                runs.append(Run(style, literal))
            content.seek(0)
            content.truncate()

    parser = ANSIParser()
    for token in parser.feed(text):
        if isinstance(token, Token):
            continue
        match token:
            case ["content", literal]:
                content.write(literal)
            case ["csi", csi] if is_sgr(csi):
                new_style = style.apply_sgr(parse_sgr(csi[1:-1]))
                if new_style != style:
                    flush()
                    style = new_style
            case ["csi", csi]:
                log.debug("stripped CSI %r", csi)
            case ["malformed", sequence]:
                log.debug("dropped malformed escape %r", sequence)
            case [kind, sequence]:
                log.debug("stripped %s %r", kind, sequence)

    if isinstance(parser.reading, ReadPatterns):
        log.debug(
            "discarded unterminated escape %r", parser.reading.unconsumed_text
        )
    flush()
    return runs
