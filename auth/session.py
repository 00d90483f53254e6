"""OAuth session handling for Google.

Builds the consent URL, trades an authorization code for tokens, and wraps a
stored token into credentials the Calendar API client can sign requests with.
Nothing here touches token storage; callers persist what they get back.
"""

import hashlib
import logging

import requests
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from auth.credential_store import ClientCredentials, TokenRecord
from core.errors import AuthError

logger = logging.getLogger(__name__)


class OAuthSessionManager:
    """Authorization-code flow with offline access for one client."""

    def __init__(self, client: ClientCredentials, scopes: list[str]) -> None:
        self.client = client
        self.scopes = list(scopes)

    def _new_flow(self, scopes: list[str]) -> Flow:
        # The exchange happens in a later request with a fresh Flow, so no PKCE verifier
        return Flow.from_client_config(
            self.client.to_client_config(),
            scopes=scopes,
            redirect_uri=self.client.redirect_uri,
            autogenerate_code_verifier=False,
        )

    def build_authorization_url(
        self,
        scopes: list[str] | None = None,
        force_consent: bool = True,
        state: str | None = None,
    ) -> str:
        """Build the provider consent URL.

        Args:
            scopes: Scopes to request (defaults to the manager's scopes).
            force_consent: Add prompt=consent so Google issues a refresh token
                even when the user has consented before.
            state: State value; derived from the client id and scopes when omitted.

        Returns:
            The authorization URL for the user to visit.
        """
        scopes = scopes or self.scopes
        params = {
            "access_type": "offline",
            "state": state if state is not None else self._fixed_state(scopes),
        }
        if force_consent:
            params["prompt"] = "consent"

        flow = self._new_flow(scopes)
        auth_url, _ = flow.authorization_url(**params)
        return auth_url

    def _fixed_state(self, scopes: list[str]) -> str:
        """Same client and scopes always yield the same state."""
        seed = f"{self.client.client_id} {' '.join(scopes)}"
        return hashlib.sha256(seed.encode("utf-8")).hexdigest()[:32]

    def exchange_code_for_tokens(self, code: str) -> TokenRecord:
        """Trade an authorization code for a TokenRecord.

        Args:
            code: The ``code`` query parameter from the OAuth callback.

        Returns:
            The token bundle. Not persisted.

        Raises:
            AuthError: If the code is empty, rejected, or the provider is unreachable.
        """
        if not code:
            raise AuthError("No authorization code was supplied")

        flow = self._new_flow(self.scopes)
        try:
            flow.fetch_token(code=code)
        except OAuth2Error as e:
            raise AuthError("The authorization code was rejected", e.description or e.error) from e
        except requests.RequestException as e:
            raise AuthError("Could not reach the authorization server", str(e)) from e
        except Warning as e:
            # oauthlib signals a granted-scope mismatch by raising a Warning
            raise AuthError("The granted permissions do not match the request", str(e)) from e

        creds = flow.credentials
        token_info = flow.oauth2session.token or {}
        record = TokenRecord(
            access_token=creds.token,
            refresh_token=creds.refresh_token,
            expiry=creds.expiry.isoformat() if creds.expiry else None,
            scope=" ".join(creds.scopes or self.scopes),
            token_type=token_info.get("token_type") or "Bearer",
        )
        if record.refresh_token is None:
            logger.warning("Provider did not issue a refresh token")
        return record

    def authorized_client(self, record: TokenRecord) -> Credentials:
        """Wrap a stored token as bearer credentials.

        Only the access token is attached, so an expired token is not refreshed
        and the calendar call fails instead.
        """
        return Credentials(token=record.access_token)
