"""Room, timer and quiz constants shared across core and server layers."""

ROOM_CODE_ALPHABET: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
ROOM_CODE_LENGTH: int = 6
DEFAULT_ROOM_NAME: str = "Study Room"
DEFAULT_ROOM_CAPACITY: int = 20
ROOM_TTL_HOURS: int = 24

MIN_SESSION_PARTICIPANTS: int = 2
DEFAULT_STUDY_DURATION_SECONDS: int = 25 * 60

CHAT_HISTORY_LIMIT: int = 100
MIN_QUESTION_OPTIONS: int = 2

SHARED_FILE_TYPES: tuple[str, ...] = ("docx", "txt", "md")
