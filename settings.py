"""Configuration for the outage relay.

Read once from the environment at startup, using the monitoring engine's
``WATCHMEN_*`` variable names. Invalid or missing values raise
``ConfigurationError`` so they surface before any event is accepted.
"""
from __future__ import annotations

import logging
from typing import Annotated, Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from core.composer import DEFAULT_VIEW_URL_TEMPLATE
from core.debounce import DEFAULT_WINDOW_MS
from core.errors import ConfigurationError
from models.event import EventKind


class RelaySettings(BaseSettings):
    """Slack relay settings."""

    # Slack incoming webhook URL
    notification_url: str = Field(validation_alias="WATCHMEN_SLACK_NOTIFICATION_URL")
    channel: str = Field(default="#general", validation_alias="WATCHMEN_SLACK_NOTIFICATION_CHANNEL")
    username: str = Field(default="Watchmen", validation_alias="WATCHMEN_SLACK_NOTIFICATION_USERNAME")
    icon_emoji: str = Field(default=":mega:", validation_alias="WATCHMEN_SLACK_NOTIFICATION_ICON_EMOJI")
    debounce_ms: int = Field(default=DEFAULT_WINDOW_MS, gt=0, validation_alias="WATCHMEN_SLACK_DEBOUNCE")
    # Comma-separated in the environment
    notification_events: Annotated[tuple[EventKind, ...], NoDecode] = Field(
        default=tuple(EventKind),
        validation_alias="WATCHMEN_SLACK_NOTIFICATION_EVENTS",
    )
    base_url: str = Field(default="", validation_alias="WATCHMEN_BASE_URL")
    view_url_template: str = Field(
        default=DEFAULT_VIEW_URL_TEMPLATE,
        validation_alias="WATCHMEN_SLACK_VIEW_URL_TEMPLATE",
    )
    timeout_seconds: float = Field(default=10.0, gt=0, validation_alias="WATCHMEN_SLACK_TIMEOUT")
    log_level: str = Field(default="INFO", validation_alias="WATCHMEN_SLACK_LOG_LEVEL")

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("notification_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError("must be an http(s) URL")
        return value

    @field_validator("notification_events", mode="before")
    @classmethod
    def _split_events(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [part.strip() for part in value.split(",") if part.strip()]
        if not value:
            return tuple(EventKind)
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"unknown log level {value!r}")
        return value

    @property
    def slack_defaults(self) -> dict[str, str]:
        return {
            "channel": self.channel,
            "username": self.username,
            "icon_emoji": self.icon_emoji,
        }


def load_settings(**overrides: Any) -> RelaySettings:
    """Load settings from the environment, raising ConfigurationError on bad input."""
    try:
        return RelaySettings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid relay configuration:\n{exc}") from exc


__all__ = ["RelaySettings", "load_settings"]
