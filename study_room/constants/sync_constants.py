"""Polling cadence for clients that mirror a room snapshot."""

ROOM_POLL_INTERVAL_MS: int = 2000
COUNTDOWN_TICK_INTERVAL_MS: int = 1000
HTTP_TIMEOUT_SECONDS: float = 10.0
