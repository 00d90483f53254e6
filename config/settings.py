"""Global Settings - Loads configuration from environment variables.

Centralizes all configuration so the server components don't read env vars
directly. A Settings instance is built once at startup and handed to the app.
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SCOPES = ["https://www.googleapis.com/auth/calendar"]


@dataclass
class Settings:
    """Application-wide settings loaded from environment variables."""

    # HTTP listener
    host: str = "127.0.0.1"
    port: int = 3000

    # Google OAuth / Calendar
    google_credentials_path: str = "credentials.json"
    google_token_path: str = "token.json"
    scopes: list[str] = field(default_factory=lambda: list(DEFAULT_SCOPES))
    calendar_id: str = "primary"
    force_consent: bool = True

    # Event defaults
    event_timezone: str = "Africa/Tunis"
    event_summary: str = "Team Sync via Google Meet"
    event_description: str = "Created automatically using the Google Calendar API!"
    auto_create_event: bool = False

    # Process behaviour
    open_browser: bool = True
    log_level: str = "INFO"

    @property
    def base_url(self) -> str:
        return f"http://localhost:{self.port}"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_scopes(raw: str | None) -> list[str]:
    """Split a scope list on commas or whitespace, dropping empties."""
    if not raw:
        return list(DEFAULT_SCOPES)
    scopes = [s for s in raw.replace(",", " ").split() if s]
    return scopes or list(DEFAULT_SCOPES)


def load_settings() -> Settings:
    """Load settings from environment variables with sensible defaults.

    Environment variables:
        HOST, PORT: Address the HTTP listener binds to
        SCOPES: Comma- or space-separated OAuth scopes
        GOOGLE_CALENDAR_CREDENTIALS_PATH: Path to Google OAuth credentials.json
        GOOGLE_CALENDAR_TOKEN_PATH: Path to the persisted token.json
        CALENDAR_ID: Calendar that receives new events (default: "primary")
        FORCE_CONSENT: Ask Google to re-prompt consent so a refresh token is issued
        EVENT_TIMEZONE: IANA timezone string for created events
        EVENT_SUMMARY, EVENT_DESCRIPTION: Default event text
        AUTO_CREATE_EVENT: Create a default event on GET / instead of showing a form
        OPEN_BROWSER: Open the root URL on startup when not authenticated
        LOG_LEVEL: Root logging level

    Returns:
        A populated Settings instance.
    """
    return Settings(
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "3000")),
        google_credentials_path=os.getenv("GOOGLE_CALENDAR_CREDENTIALS_PATH", "credentials.json"),
        google_token_path=os.getenv("GOOGLE_CALENDAR_TOKEN_PATH", "token.json"),
        scopes=_parse_scopes(os.getenv("SCOPES")),
        calendar_id=os.getenv("CALENDAR_ID", "primary"),
        force_consent=_env_bool("FORCE_CONSENT", True),
        event_timezone=os.getenv("EVENT_TIMEZONE", "Africa/Tunis"),
        event_summary=os.getenv("EVENT_SUMMARY", "Team Sync via Google Meet"),
        event_description=os.getenv(
            "EVENT_DESCRIPTION", "Created automatically using the Google Calendar API!"
        ),
        auto_create_event=_env_bool("AUTO_CREATE_EVENT", False),
        open_browser=_env_bool("OPEN_BROWSER", True),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
