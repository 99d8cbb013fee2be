from study_room.core.document_renderer import DocumentRenderer
from study_room.core.models import (
    CurrentDocument,
    ReviewerContent,
    Room,
    SharedBy,
    SharedFile,
    ViewMode,
)


def _room_with(file_type: str, content: str, document: CurrentDocument | None) -> Room:
    room = Room(room_code="ABC123", host_id="H", host_name="Hana", room_name="Test")
    room.shared_files.append(
        SharedFile(
            file_id="f1",
            file_name=f"notes.{file_type}",
            file_type=file_type,
            subject="Biology",
            file_content=content,
            shared_by=SharedBy(user_id="H", username="Hana"),
        )
    )
    room.current_document = document
    return room


def test_markdown_file_renders_as_html():
    room = _room_with("md", "# Cells\n\n**ATP**", CurrentDocument(file_id="f1", view_mode=ViewMode.RAW))
    html = DocumentRenderer().render_room_document(room)
    assert "<h1>Cells</h1>" in html
    assert "<strong>ATP</strong>" in html


def test_plain_text_is_escaped():
    room = _room_with("txt", "a < b\nline two", CurrentDocument(file_id="f1", view_mode=ViewMode.RAW))
    html = DocumentRenderer().render_room_document(room)
    assert html.startswith('<pre class="document-text">')
    assert "a &lt; b" in html


def test_reviewer_placeholder_until_content_arrives():
    document = CurrentDocument(file_id="f1", view_mode=ViewMode.REVIEWER)
    room = _room_with("md", "# Cells", document)
    renderer = DocumentRenderer()
    assert "Generating reviewer" in renderer.render_room_document(room)

    document.reviewer_content = ReviewerContent(text="Summary text", key_points=["ATP", "DNA"])
    html = renderer.render_room_document(room)
    assert "Summary text" in html
    assert "<h3>Key points</h3>" in html
    assert "<li>DNA</li>" in html


def test_no_document():
    room = _room_with("md", "# Cells", None)
    assert "No document" in DocumentRenderer().render_room_document(room)


def test_wrap_with_mathjax():
    page = DocumentRenderer().wrap_with_mathjax("<p>$x^2$</p>", title="Algebra")
    assert "<title>Algebra</title>" in page
    assert "mathjax" in page
    assert "<p>$x^2$</p>" in page
