from __future__ import annotations

from textual import log
from textual.content import Content
from textual.reactive import reactive
from textual.widgets import Static

from ansispan.render.content import ansi_to_content


class ANSIText(Static):
    """Text written for a terminal, rendered with its colors and decorations."""

    DEFAULT_CSS = """
    ANSIText {
        width: auto;
        height: auto;
    }
    """

    text: reactive[str] = reactive("", layout=True)
    """Raw text, which may contain ANSI escape sequences."""

    def __init__(
        self,
        text: str = "",
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
        disabled: bool = False,
    ) -> None:
        self.ansi_content: Content = ansi_to_content(text)
        """The converted text."""
        super().__init__(
            self.ansi_content,
            name=name,
            id=id,
            classes=classes,
            disabled=disabled,
        )
        self.set_reactive(ANSIText.text, text)

    def watch_text(self, text: str) -> None:
        self.ansi_content = ansi_to_content(text)
        log(f"ANSIText updated; {len(self.ansi_content)} characters")
        self.update(self.ansi_content)
