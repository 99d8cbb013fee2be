"""Markdown + LaTeX rendering of the broadcast document.

Architecture note:
    The same fragment feeds the host console (via QWebEngineView) and the
    ``/rooms/{code}/document`` endpoint, and MathJax does the math at display
    time. Plain-text and docx extracts are rendered as preformatted text so
    their line breaks survive; markdown files go through markdown-it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html import escape

from markdown_it import MarkdownIt

from study_room.core.models import Room, ViewMode

_MATHJAX_SCRIPT = (
    "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"
)


@dataclass(slots=True)
class DocumentRenderer:
    """Converts shared documents and reviewer notes into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_markdown(self, markdown_text: str) -> str:
        sanitized = markdown_text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def render_plain(self, text: str) -> str:
        if not text.strip():
            return "<p><em>No content provided.</em></p>"
        return f"<pre class=\"document-text\">{escape(text)}</pre>"

    def render_reviewer(self, text: str, key_points: list[str]) -> str:
        fragment = self.render_markdown(text)
        if key_points:
            items = "\n".join(f"- {point}" for point in key_points)
            fragment += "<h3>Key points</h3>\n" + self._markdown.render(items)
        return fragment

    def render_room_document(self, room: Room) -> str:
        """Render whatever the host is currently broadcasting in ``room``."""
        document = room.current_document
        if document is None:
            return "<p><em>No document is being broadcast.</em></p>"
        shared = room.find_shared_file(document.file_id)
        if shared is None:
            return "<p><em>The broadcast document is no longer shared.</em></p>"
        if document.view_mode is ViewMode.REVIEWER:
            reviewer = document.reviewer_content
            if reviewer is None:
                return "<p><em>Generating reviewer…</em></p>"
            return self.render_reviewer(reviewer.text, reviewer.key_points)
        if shared.file_type == "md":
            return self.render_markdown(shared.file_content)
        return self.render_plain(shared.file_content)

    def wrap_with_mathjax(self, body_html: str, title: str = "Study Room") -> str:
        """Wrap a fragment inside a minimal HTML document that loads MathJax."""

        return f"""<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>{escape(title)}</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 1rem; }}
      .document-html {{ font-size: 1rem; line-height: 1.5; }}
      .document-text {{ white-space: pre-wrap; font-family: inherit; }}
    </style>
    <script>
      window.MathJax = {{ tex: {{ inlineMath: [['$','$']], displayMath: [['$$','$$']] }}, svg: {{ fontCache: 'global' }} }};
    </script>
    <script defer src=\"{_MATHJAX_SCRIPT}\"></script>
  </head>
  <body>
    <div class=\"document-html\">{body_html}</div>
  </body>
</html>"""


renderer = DocumentRenderer()
# Shared instance; MarkdownIt is safe for concurrent read-only renders.
