"""Tests for the OAuth session manager."""

from datetime import datetime
from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs, urlparse

import pytest
import requests
from oauthlib.oauth2.rfc6749.errors import InvalidGrantError

from auth.credential_store import ClientCredentials, TokenRecord
from auth.session import OAuthSessionManager
from core.errors import AuthError

SCOPES = ["https://www.googleapis.com/auth/calendar"]


def _manager(scopes: list[str] = SCOPES) -> OAuthSessionManager:
    client = ClientCredentials(
        client_id="test-client.apps.googleusercontent.com",
        client_secret="test-secret",
        redirect_uri="http://localhost:3000/oauth2callback",
    )
    return OAuthSessionManager(client, scopes)


def _query(url: str) -> dict[str, list[str]]:
    return parse_qs(urlparse(url).query)


# ---------------------------------------------------------------------------
# build_authorization_url
# ---------------------------------------------------------------------------


class TestBuildAuthorizationUrl:
    def test_embeds_client_and_scope(self) -> None:
        url = _manager().build_authorization_url()
        params = _query(url)

        assert url.startswith("https://accounts.google.com/o/oauth2/auth?")
        assert params["client_id"] == ["test-client.apps.googleusercontent.com"]
        assert params["redirect_uri"] == ["http://localhost:3000/oauth2callback"]
        assert params["scope"] == ["https://www.googleapis.com/auth/calendar"]
        assert params["response_type"] == ["code"]
        assert params["access_type"] == ["offline"]
        assert params["prompt"] == ["consent"]

    def test_no_pkce_challenge(self) -> None:
        params = _query(_manager().build_authorization_url())
        assert "code_challenge" not in params

    def test_without_forced_consent(self) -> None:
        params = _query(_manager().build_authorization_url(force_consent=False))
        assert "prompt" not in params
        assert params["access_type"] == ["offline"]

    def test_multiple_scopes_override(self) -> None:
        scopes = [
            "https://www.googleapis.com/auth/calendar.events",
            "https://www.googleapis.com/auth/calendar.readonly",
        ]
        params = _query(_manager().build_authorization_url(scopes=scopes))
        assert params["scope"] == [" ".join(scopes)]

    def test_deterministic_by_default(self) -> None:
        manager = _manager()
        first = manager.build_authorization_url()
        assert first == manager.build_authorization_url()
        assert len(_query(first)["state"][0]) == 32

    def test_default_state_depends_on_scopes(self) -> None:
        manager = _manager()
        a = _query(manager.build_authorization_url())["state"]
        b = _query(manager.build_authorization_url(scopes=["https://www.googleapis.com/auth/calendar.events"]))["state"]
        assert a != b

    def test_deterministic_with_fixed_state(self) -> None:
        manager = _manager()
        first = manager.build_authorization_url(state="fixed")
        second = manager.build_authorization_url(state="fixed")
        assert first == second
        assert _query(first)["state"] == ["fixed"]


# ---------------------------------------------------------------------------
# exchange_code_for_tokens
# ---------------------------------------------------------------------------


class TestExchangeCodeForTokens:
    def _flow(self) -> MagicMock:
        flow = MagicMock()
        flow.credentials.token = "ya29.access"
        flow.credentials.refresh_token = "1//refresh"
        flow.credentials.expiry = datetime(2025, 2, 17, 10, 0, 0)
        flow.credentials.scopes = SCOPES
        flow.oauth2session.token = {"token_type": "Bearer"}
        return flow

    @patch("auth.session.Flow")
    def test_success(self, mock_flow_cls) -> None:
        flow = self._flow()
        mock_flow_cls.from_client_config.return_value = flow

        record = _manager().exchange_code_for_tokens("4/auth-code")

        flow.fetch_token.assert_called_once_with(code="4/auth-code")
        assert record == TokenRecord(
            access_token="ya29.access",
            refresh_token="1//refresh",
            expiry="2025-02-17T10:00:00",
            scope="https://www.googleapis.com/auth/calendar",
            token_type="Bearer",
        )

    @patch("auth.session.Flow")
    def test_rejected_code(self, mock_flow_cls) -> None:
        flow = self._flow()
        flow.fetch_token.side_effect = InvalidGrantError(description="Bad Request")
        mock_flow_cls.from_client_config.return_value = flow

        with pytest.raises(AuthError) as exc:
            _manager().exchange_code_for_tokens("expired-code")
        assert exc.value.message == "The authorization code was rejected"
        assert exc.value.detail == "Bad Request"

    @patch("auth.session.Flow")
    def test_provider_unreachable(self, mock_flow_cls) -> None:
        flow = self._flow()
        flow.fetch_token.side_effect = requests.ConnectionError("boom")
        mock_flow_cls.from_client_config.return_value = flow

        with pytest.raises(AuthError, match="Could not reach"):
            _manager().exchange_code_for_tokens("code")

    @patch("auth.session.Flow")
    def test_scope_change_warning(self, mock_flow_cls) -> None:
        flow = self._flow()
        flow.fetch_token.side_effect = Warning("Scope has changed")
        mock_flow_cls.from_client_config.return_value = flow

        with pytest.raises(AuthError, match="permissions"):
            _manager().exchange_code_for_tokens("code")

    def test_empty_code(self) -> None:
        with pytest.raises(AuthError):
            _manager().exchange_code_for_tokens("")


# ---------------------------------------------------------------------------
# authorized_client
# ---------------------------------------------------------------------------


class TestAuthorizedClient:
    def test_bearer_only(self) -> None:
        record = TokenRecord(access_token="ya29.access", refresh_token="1//refresh")
        creds = _manager().authorized_client(record)

        assert creds.token == "ya29.access"
        assert creds.refresh_token is None
        headers: dict[str, str] = {}
        creds.apply(headers)
        assert headers["authorization"] == "Bearer ya29.access"
