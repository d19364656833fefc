from ansispan.render.content import ansi_to_content, to_content
from ansispan.render.html import ansi_to_html, render_html

__all__ = ["ansi_to_content", "ansi_to_html", "render_html", "to_content"]
