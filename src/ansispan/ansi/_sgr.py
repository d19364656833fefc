"""SGR (Select Graphic Rendition) vocabulary and parameter parsing."""

from __future__ import annotations

from functools import lru_cache
import logging
from typing import Final, Literal, Mapping, NamedTuple

log = logging.getLogger(__name__)

type ColorName = Literal[
    "black",
    "red",
    "green",
    "yellow",
    "blue",
    "magenta",
    "cyan",
    "white",
    "bright-black",
    "bright-red",
    "bright-green",
    "bright-yellow",
    "bright-blue",
    "bright-magenta",
    "bright-cyan",
    "bright-white",
]

type DecorationName = Literal[
    "bold", "dim", "italic", "hidden", "strikethrough", "underline", "blink"
]

type SGRAttribute = Literal[
    "reset", "foreground", "background", "decoration", "clear_decoration"
]

COLOR_NAMES: Final[tuple[ColorName, ...]] = (
    "black",
    "red",
    "green",
    "yellow",
    "blue",
    "magenta",
    "cyan",
    "white",
)
BRIGHT_COLOR_NAMES: Final[tuple[ColorName, ...]] = (
    "bright-black",
    "bright-red",
    "bright-green",
    "bright-yellow",
    "bright-blue",
    "bright-magenta",
    "bright-cyan",
    "bright-white",
)
ALL_COLOR_NAMES: Final = COLOR_NAMES + BRIGHT_COLOR_NAMES

DECORATION_NAMES: Final[tuple[DecorationName, ...]] = (
    "bold",
    "dim",
    "italic",
    "hidden",
    "strikethrough",
    "underline",
    "blink",
)


class SGRCommand(NamedTuple):
    """A single change to the style state."""

    attribute: SGRAttribute
    """The attribute to change."""
    value: str | frozenset[str] | None = None
    """New value, or the decorations cleared by `clear_decoration`."""


RESET: Final = SGRCommand("reset")


def _build_sgr_commands() -> dict[int, SGRCommand]:
    commands: dict[int, SGRCommand] = {0: RESET}
    decorations: Mapping[int, DecorationName] = {
        1: "bold",
        2: "dim",
        3: "italic",
        4: "underline",
        5: "blink",
        6: "blink",
        8: "hidden",
        9: "strikethrough",
        21: "underline",
    }
    for code, decoration in decorations.items():
        commands[code] = SGRCommand("decoration", decoration)

    clear_decorations: Mapping[int, frozenset[str]] = {
        22: frozenset({"bold", "dim"}),
        23: frozenset({"italic"}),
        24: frozenset({"underline"}),
        25: frozenset({"blink"}),
        28: frozenset({"hidden"}),
        29: frozenset({"strikethrough"}),
    }
    for code, cleared in clear_decorations.items():
        commands[code] = SGRCommand("clear_decoration", cleared)

    for offset, color in enumerate(COLOR_NAMES):
        commands[30 + offset] = SGRCommand("foreground", color)
        commands[40 + offset] = SGRCommand("background", color)
    for offset, color in enumerate(BRIGHT_COLOR_NAMES):
        commands[90 + offset] = SGRCommand("foreground", color)
        commands[100 + offset] = SGRCommand("background", color)
    commands[39] = SGRCommand("foreground", None)
    commands[49] = SGRCommand("background", None)
    return commands


SGR_COMMANDS: Final[Mapping[int, SGRCommand]] = _build_sgr_commands()


def indexed_color(index: int) -> ColorName | None:
    """Get the color name for an entry in the 256 color palette.

    Only the first 16 entries have names.

    Args:
        index: Palette index.

    Returns:
        A color name, or `None` if the index is outside of the named colors.
    """
    if 0 <= index < 8:
        return COLOR_NAMES[index]
    if 8 <= index < 16:
        return BRIGHT_COLOR_NAMES[index - 8]
    return None


def _parse_code(code: str) -> int:
    if not code:
        return 0
    if code.isdecimal():
        # int() refuses very long digit strings
        digits = code.lstrip("0")
        return 255 if len(digits) > 3 else min(int(digits or "0"), 255)
    return -1


@lru_cache(maxsize=1024)
def parse_sgr(parameters: str) -> tuple[SGRCommand, ...]:
    """Parse the parameters of an SGR sequence in to style commands.

    Args:
        parameters: The text between `ESC [` and `m`, e.g. `"1;31"`.

    Returns:
        Commands to apply in order. Unrecognized codes produce no command.
    """
    codes = [_parse_code(code) for code in parameters.split(";")]
    commands: list[SGRCommand] = []
    while codes:
        match codes:
            case [38, 5, color_index, *codes]:
                commands.append(SGRCommand("foreground", indexed_color(color_index)))
            case [48, 5, color_index, *codes]:
                commands.append(SGRCommand("background", indexed_color(color_index)))
            case [38, 2, _, _, _, *codes]:
                commands.append(SGRCommand("foreground", None))
            case [48, 2, _, _, _, *codes]:
                commands.append(SGRCommand("background", None))
            case [38 | 48, *_]:
                log.debug("truncated extended color in SGR %r", parameters)
                break
            case [code, *codes]:
                if (command := SGR_COMMANDS.get(code)) is not None:
                    commands.append(command)
                else:
                    log.debug("ignoring SGR code %r in %r", code, parameters)
    return tuple(commands)
