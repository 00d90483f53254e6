"""Client credentials and token persistence.

Reads the OAuth client (id, secret, redirect URI) from the Google credentials
JSON file, and keeps the single TokenRecord that decides whether this process
is authenticated. The token lives behind the TokenStore interface so the flat
file can be replaced without touching the session logic.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from core.errors import ConfigError, StorageError

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

# Credential files downloaded from Google Cloud nest the client under one of these
CLIENT_SECTIONS = ("web", "installed")


@dataclass(frozen=True)
class ClientCredentials:
    """OAuth client application identity."""

    client_id: str
    client_secret: str
    redirect_uri: str
    auth_uri: str = GOOGLE_AUTH_URI
    token_uri: str = GOOGLE_TOKEN_URI

    def to_client_config(self) -> dict[str, Any]:
        """Render in the client-secrets shape expected by google_auth_oauthlib."""
        return {
            "web": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uris": [self.redirect_uri],
                "auth_uri": self.auth_uri,
                "token_uri": self.token_uri,
            }
        }


@dataclass
class TokenRecord:
    """Persisted OAuth token bundle."""

    access_token: str
    scope: str = ""
    token_type: str = "Bearer"
    refresh_token: str | None = None
    expiry: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenRecord":
        scope = data.get("scope", "")
        if isinstance(scope, list):
            scope = " ".join(scope)
        return cls(
            access_token=data["access_token"],
            scope=scope,
            token_type=data.get("token_type") or "Bearer",
            refresh_token=data.get("refresh_token"),
            expiry=data.get("expiry"),
        )


def load_client_credentials(credentials_path: str) -> ClientCredentials:
    """Load the OAuth client from a Google credentials JSON file.

    Args:
        credentials_path: Path to credentials.json.

    Returns:
        ClientCredentials built from the first redirect URI.

    Raises:
        ConfigError: If the file is missing, not JSON, or lacks required fields.
    """
    path = Path(credentials_path)
    if not path.exists():
        raise ConfigError(
            f"Credentials file not found at {credentials_path}. "
            "Download an OAuth client from Google Cloud Console."
        )

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigError(f"Credentials file {credentials_path} is not readable JSON", str(e)) from e

    if not isinstance(data, dict):
        raise ConfigError(f"Credentials file {credentials_path} must contain a JSON object")

    section = next((data[key] for key in CLIENT_SECTIONS if isinstance(data.get(key), dict)), None)
    if section is None:
        raise ConfigError(
            f"Credentials file {credentials_path} has no 'web' or 'installed' client section"
        )

    client_id = section.get("client_id")
    client_secret = section.get("client_secret")
    redirect_uris = section.get("redirect_uris")
    if not client_id or not client_secret:
        raise ConfigError("Credentials file is missing client_id or client_secret")
    if not isinstance(redirect_uris, list) or not redirect_uris:
        raise ConfigError("Credentials file must list at least one redirect URI")

    return ClientCredentials(
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri=redirect_uris[0],
        auth_uri=section.get("auth_uri") or GOOGLE_AUTH_URI,
        token_uri=section.get("token_uri") or GOOGLE_TOKEN_URI,
    )


class TokenStore(ABC):
    """Holds at most one TokenRecord."""

    @abstractmethod
    def read(self) -> TokenRecord | None:
        """Return the stored record, or None when unauthenticated."""

    @abstractmethod
    def write(self, record: TokenRecord) -> None:
        """Store the record, replacing any previous one."""

    @abstractmethod
    def clear(self) -> bool:
        """Remove the record if present. Returns True if something was removed."""

    def exists(self) -> bool:
        """Authenticated means a readable record, not just a file on disk."""
        return self.read() is not None


class FileTokenStore(TokenStore):
    """TokenStore backed by a single JSON file."""

    def __init__(self, token_path: str) -> None:
        self.path = Path(token_path)

    def read(self) -> TokenRecord | None:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return TokenRecord.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable token file %s: %s", self.path, e)
            return None

    def write(self, record: TokenRecord) -> None:
        try:
            self.path.write_text(json.dumps(record.to_dict()), encoding="utf-8")
        except OSError as e:
            raise StorageError("Could not save the access token", str(e)) from e
        logger.info("Token stored to %s", self.path)

    def clear(self) -> bool:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError("Could not remove the access token", str(e)) from e
        logger.info("Token removed from %s", self.path)
        return True
