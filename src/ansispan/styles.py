"""Tables which map style names on to visual tokens for a renderer."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Final, Mapping

from ansispan.ansi._sgr import ALL_COLOR_NAMES


@dataclass(frozen=True, eq=False)
class StyleTable:
    """Maps color and decoration names to the tokens a renderer understands.

    Names missing from a table have no visual representation.
    """

    name: str
    """Identifier used in settings."""
    foreground: Mapping[str, str]
    """Color name to foreground token."""
    background: Mapping[str, str]
    """Color name to background token."""
    decoration: Mapping[str, str]
    """Decoration name to token."""

    def __post_init__(self) -> None:
        for field_name in ("foreground", "background", "decoration"):
            mapping = getattr(self, field_name)
            object.__setattr__(self, field_name, MappingProxyType(dict(mapping)))


# CSS variables defined by the site theme
PALETTE: Final[Mapping[str, str]] = MappingProxyType(
    {
        "black": "black",
        "red": "red",
        "green": "green",
        "yellow": "brown",
        "blue": "blue",
        "magenta": "magenta",
        "cyan": "cyan",
        "white": "light-gray",
        "bright-black": "dark-gray",
        "bright-red": "light-red",
        "bright-green": "light-green",
        "bright-yellow": "yellow",
        "bright-blue": "light-blue",
        "bright-magenta": "light-magenta",
        "bright-cyan": "light-cyan",
        "bright-white": "white",
    }
)

TAILWIND: Final = StyleTable(
    "tailwind",
    foreground={name: f"text-[var(--{PALETTE[name]})]" for name in ALL_COLOR_NAMES},
    background={
        **{name: f"bg-[var(--{PALETTE[name]})]" for name in ALL_COLOR_NAMES},
        "black": "bg-transparent",
    },
    decoration={
        "bold": "font-bold",
        "dim": "opacity-50",
        "italic": "italic",
        "hidden": "invisible",
        "strikethrough": "line-through",
        "underline": "underline",
        "blink": "animate-pulse",
    },
)


def _textual_color(name: str) -> str:
    return f"ansi_{name.replace('-', '_')}"


# Textual has no style to conceal text, so "hidden" has no token
TEXTUAL: Final = StyleTable(
    "textual",
    foreground={name: _textual_color(name) for name in ALL_COLOR_NAMES},
    background={name: f"on {_textual_color(name)}" for name in ALL_COLOR_NAMES},
    decoration={
        "bold": "bold",
        "dim": "dim",
        "italic": "italic",
        "strikethrough": "strike",
        "underline": "underline",
        "blink": "blink",
    },
)

TABLES: Final[Mapping[str, StyleTable]] = MappingProxyType(
    {table.name: table for table in (TAILWIND, TEXTUAL)}
)


def get_table(name: str) -> StyleTable:
    """Get a style table by name.

    Args:
        name: Table name, e.g. "tailwind".

    Raises:
        KeyError: If there is no table with that name.

    Returns:
        The style table.
    """
    try:
        return TABLES[name]
    except KeyError:
        raise KeyError(
            f"No style table called {name!r}; expected one of {', '.join(TABLES)}"
        ) from None
