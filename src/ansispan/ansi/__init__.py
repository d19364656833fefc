from ansispan.ansi._ansi import (
    ANSIParser,
    NULL_STYLE_STATE,
    Run,
    StyleState,
    is_sgr,
    tokenize,
)
from ansispan.ansi._control import check_text, correct, normalize
from ansispan.ansi._sgr import (
    ALL_COLOR_NAMES,
    BRIGHT_COLOR_NAMES,
    COLOR_NAMES,
    DECORATION_NAMES,
    ColorName,
    DecorationName,
    SGRCommand,
    parse_sgr,
)

__all__ = [
    "ALL_COLOR_NAMES",
    "ANSIParser",
    "BRIGHT_COLOR_NAMES",
    "COLOR_NAMES",
    "ColorName",
    "DECORATION_NAMES",
    "DecorationName",
    "NULL_STYLE_STATE",
    "Run",
    "SGRCommand",
    "StyleState",
    "check_text",
    "correct",
    "is_sgr",
    "normalize",
    "parse_sgr",
    "tokenize",
]
