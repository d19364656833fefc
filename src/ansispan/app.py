from __future__ import annotations

from pathlib import Path

from textual import containers, getters, log
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer

from ansispan.widgets.ansi_text import ANSIText


class ANSIViewerApp(App):
    """Show a file containing ANSI escape sequences."""

    CSS = """
    Screen {
        align: center top;
    }
    #viewer {
        padding: 1 2;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "reload", "Reload"),
    ]

    ansi_text = getters.query_one(ANSIText)

    def __init__(self, text: str = "", path: Path | None = None) -> None:
        """

        Args:
            text: Text to show if no path is given.
            path: Path to a file to show.
        """
        self.text = text
        self.path = path
        super().__init__()

    def read_text(self) -> str:
        if self.path is None:
            return self.text
        return self.path.read_bytes().decode("utf-8", errors="replace")

    def on_load(self) -> None:
        if self.path is not None:
            self.title = str(self.path)
        self.text = self.read_text()

    def compose(self) -> ComposeResult:
        with containers.VerticalScroll(id="viewer"):
            yield ANSIText(self.text)
        yield Footer()

    def action_reload(self) -> None:
        log("reloading", self.path)
        self.ansi_text.text = self.read_text()
