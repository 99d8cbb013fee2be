"""Static metadata describing Study Room."""

APP_NAME = "Study Room"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "Study Room hosts collaborative study sessions: a shared countdown, a broadcast "
    "document and a live quiz, kept in sync by clients polling the room snapshot."
)

HELP_TEXT = (
    "Share the room code with your group. Everyone must press Ready before the "
    "session timer can start.\n\n"
    "Quiz files use blocks separated by blank lines:\n\n"
    "Q: What is $2 + 2$?\n"
    "A: 3\nB: 4\nC: 5\nD: 22\n"
    "CORRECT: B\n"
    "EXPLANATION: Two plus two is four."
)
