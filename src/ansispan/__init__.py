"""Convert text with ANSI escape sequences in to styled segments."""

from ansispan.segments import Segment, ansi_to_segments, produce, resolve

__version__ = "0.1.0"

__all__ = ["Segment", "ansi_to_segments", "produce", "resolve"]
