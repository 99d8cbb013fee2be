"""Service for shared files and the host-selected current document."""

from __future__ import annotations

from datetime import datetime

from study_room.constants.room_constants import SHARED_FILE_TYPES
from study_room.core.errors import (
    FileAlreadyShared,
    InvalidRequest,
    NoCurrentDocument,
    NotAuthorized,
    SharedFileNotFound,
)
from study_room.core.models import (
    CurrentDocument,
    Participant,
    ReviewerContent,
    Room,
    SharedBy,
    SharedFile,
    SharedNote,
    ViewMode,
)


class DocumentBroadcast:
    """Replicates one shared artifact to all participants via the room document.

    Authorization of host-only operations happens in the facade before these
    methods run; ``remove_shared_file`` carries its own owner-or-host rule.
    """

    def share_file(
        self,
        room: Room,
        sharer: Participant,
        file_id: str,
        file_name: str,
        file_type: str,
        subject: str,
        file_content: str,
        now: datetime,
    ) -> SharedFile:
        if room.find_shared_file(file_id) is not None:
            raise FileAlreadyShared()
        if file_type not in SHARED_FILE_TYPES:
            raise InvalidRequest(f"Unsupported file type: {file_type}")
        shared = SharedFile(
            file_id=file_id,
            file_name=file_name,
            file_type=file_type,
            subject=subject,
            file_content=file_content,
            shared_by=SharedBy(user_id=sharer.user_id, username=sharer.username),
            shared_at=now,
        )
        room.shared_files.append(shared)
        return shared

    def remove_shared_file(self, room: Room, caller_id: str, file_id: str) -> SharedFile:
        shared = room.find_shared_file(file_id)
        if shared is None:
            raise SharedFileNotFound("Shared file not found")
        if not (room.is_host(caller_id) or shared.shared_by.user_id == caller_id):
            raise NotAuthorized("Only the host or file owner can remove shared files")
        room.shared_files = [f for f in room.shared_files if f.file_id != file_id]
        if room.current_document is not None and room.current_document.file_id == file_id:
            room.current_document = None
        return shared

    def set_document(self, room: Room, file_id: str, view_mode: ViewMode) -> CurrentDocument:
        if room.find_shared_file(file_id) is None:
            raise SharedFileNotFound()
        previous = room.current_document
        reviewer = None
        if (
            view_mode is ViewMode.REVIEWER
            and previous is not None
            and previous.file_id == file_id
        ):
            reviewer = previous.reviewer_content
        # A reviewer view with no content tells clients generation is under way.
        room.current_document = CurrentDocument(
            file_id=file_id,
            view_mode=view_mode,
            reviewer_content=reviewer,
        )
        return room.current_document

    def set_reviewer_content(self, room: Room, text: str, key_points: list[str]) -> CurrentDocument:
        if room.current_document is None:
            raise NoCurrentDocument()
        if not text.strip():
            raise InvalidRequest("Review content is required")
        room.current_document.reviewer_content = ReviewerContent(
            text=text,
            key_points=[point for point in key_points if point.strip()],
        )
        return room.current_document

    def clear_document(self, room: Room) -> None:
        room.current_document = None

    def set_scroll_position(self, room: Room, position: int) -> int:
        if position < 0:
            raise InvalidRequest("Scroll position cannot be negative")
        room.scroll_position = position
        return position

    def add_note(self, room: Room, author: Participant, note: str, position: int, now: datetime) -> SharedNote:
        cleaned = note.strip()
        if not cleaned:
            raise InvalidRequest("Note text is required")
        entry = SharedNote(
            user_id=author.user_id,
            username=author.username,
            note=cleaned,
            position=max(0, position),
            timestamp=now,
        )
        room.shared_notes.append(entry)
        return entry
