"""Qt UI constants used across host console widgets."""

WINDOW_TITLE: str = "Study Room Host Console"

ROOM_CODE_TEMPLATE: str = "Room code: {code}"
SERVER_URL_TEMPLATE: str = "Participants connect to: {url}"
READY_COUNT_TEMPLATE: str = "{ready} of {total} participant(s) ready"
EMPTY_PARTICIPANTS: str = "Nobody has joined yet."

START_SESSION_BUTTON: str = "Start Session"
PAUSE_BUTTON: str = "Pause"
RESUME_BUTTON: str = "Resume"
RESET_BUTTON: str = "Reset"
TIMER_IDLE_TEXT: str = "Timer idle"
SESSION_COMPLETE_TEXT: str = "Session complete"

IMPORT_QUIZ_BUTTON: str = "Import Questions"
START_QUIZ_BUTTON: str = "Start Quiz"
NEXT_QUESTION_BUTTON: str = "Next Question"
END_QUIZ_BUTTON: str = "End Quiz"
NO_QUIZ_LOADED_MESSAGE: str = "Import a question file before starting a quiz."
IMPORT_DIALOG_TITLE: str = "Select question file"
IMPORT_FILE_FILTER: str = "Question files (*.txt);;All files (*.*)"

SHOW_RAW_BUTTON: str = "Show Raw"
SHOW_REVIEWER_BUTTON: str = "Show Reviewer"
SET_REVIEWER_BUTTON: str = "Set Reviewer Notes"
CLEAR_DOCUMENT_BUTTON: str = "Clear Document"
REMOVE_FILE_BUTTON: str = "Remove File"
NO_DOCUMENT_TEXT: str = "No document is being broadcast."

SEND_CHAT_BUTTON: str = "Send"
CHAT_PLACEHOLDER: str = "Message the room"

SHARE_FILE_BUTTON: str = "Share File"
SHARE_DIALOG_TITLE: str = "Select a document to share"
SHARE_FILE_FILTER: str = "Documents (*.md *.txt);;All files (*.*)"
ABOUT_BUTTON: str = "About"
HELP_BUTTON: str = "Help"
