"""Error kinds raised by the server components.

Every error carries a short message that is safe to show in the browser and
an optional ``detail`` that only goes to the server log.
"""


class AppError(Exception):
    """Base class for all expected failures."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


class ConfigError(AppError):
    """Client credentials file is missing or malformed. Fatal at startup."""


class StorageError(AppError):
    """The token file could not be written or removed."""


class AuthError(AppError):
    """The authorization code was rejected or the provider was unreachable."""


class GatewayError(AppError):
    """The calendar service refused or failed the event creation call."""
