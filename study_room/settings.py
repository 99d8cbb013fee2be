"""Environment-driven settings layered over the constant defaults."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from study_room.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from study_room.constants.room_constants import (
    CHAT_HISTORY_LIMIT,
    DEFAULT_ROOM_CAPACITY,
    DEFAULT_ROOM_NAME,
    ROOM_TTL_HOURS,
)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STUDY_ROOM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    headless: bool = False

    room_capacity: int = DEFAULT_ROOM_CAPACITY
    chat_history_limit: int = CHAT_HISTORY_LIMIT
    room_ttl_hours: int = ROOM_TTL_HOURS

    host_user_id: str = "host"
    host_username: str = "Host"
    room_name: str = DEFAULT_ROOM_NAME


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings()
