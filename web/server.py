"""Front controller HTTP server.

Flask app that:
- Serves GET / (sign-in link, event form, or an auto-created event)
- Handles GET /oauth2callback (code exchange, token persisted)
- Handles POST /create-event (compose + send to Google Calendar)
- Handles GET /logout (token removed)
- Serves GET /healthz (liveness and authentication state)

Collaborators are built once in create_app() and kept on the app's extensions
map; there is no module-level state. Network calls run on a worker thread and
come back as Result values.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable

from flask import Blueprint, Flask, Response, current_app, jsonify, redirect, request, url_for

from auth.credential_store import (
    ClientCredentials,
    FileTokenStore,
    TokenRecord,
    TokenStore,
    load_client_credentials,
)
from auth.session import OAuthSessionManager
from config.settings import Settings
from core.errors import AppError, GatewayError, StorageError
from core.result import Result
from events.composer import EventDefaults, compose
from events.gateway import CalendarGateway, to_created_event
from web import views

logger = logging.getLogger(__name__)

EXTENSION_KEY = "meet_server"

bp = Blueprint("meet", __name__)


@dataclass
class ServerContext:
    """Everything a request handler needs, built once at startup."""

    settings: Settings
    token_store: TokenStore
    session: OAuthSessionManager
    gateway: CalendarGateway
    defaults: EventDefaults


def create_app(
    settings: Settings,
    client_credentials: ClientCredentials | None = None,
    token_store: TokenStore | None = None,
    session: OAuthSessionManager | None = None,
    gateway: CalendarGateway | None = None,
) -> Flask:
    """Build the Flask app.

    Args:
        settings: Loaded settings.
        client_credentials: OAuth client; read from settings' credentials path if omitted.
        token_store: Token persistence; a FileTokenStore on settings' token path if omitted.
        session: OAuth session manager override (tests).
        gateway: Calendar gateway override (tests).

    Raises:
        ConfigError: If the credentials file has to be read and is invalid.
    """
    if session is None:
        if client_credentials is None:
            client_credentials = load_client_credentials(settings.google_credentials_path)
        session = OAuthSessionManager(client_credentials, settings.scopes)

    app = Flask(__name__)
    app.extensions[EXTENSION_KEY] = ServerContext(
        settings=settings,
        token_store=token_store or FileTokenStore(settings.google_token_path),
        session=session,
        gateway=gateway or CalendarGateway(settings.calendar_id),
        defaults=EventDefaults(
            summary=settings.event_summary,
            description=settings.event_description,
            time_zone=settings.event_timezone,
        ),
    )
    app.register_blueprint(bp)
    return app


def _context() -> ServerContext:
    return current_app.extensions[EXTENSION_KEY]


async def _attempt(func: Callable[..., Any], *args: Any) -> Result:
    """Run a blocking call off the event loop and capture expected failures."""
    try:
        value = await asyncio.to_thread(func, *args)
    except AppError as e:
        return Result.failure(e)
    return Result.success(value)


async def _create_and_render(
    ctx: ServerContext,
    record: TokenRecord,
    emails: str | None,
    summary: str | None = None,
    description: str | None = None,
) -> str | tuple[str, int]:
    event = compose(emails, ctx.defaults, summary=summary, description=description)
    creds = ctx.session.authorized_client(record)

    result = await _attempt(ctx.gateway.create_event, creds, event)
    try:
        response = result.unwrap()
    except GatewayError as e:
        logger.error("Event creation failed: %s", e)
        return views.render_error("Error creating event. Check the server log for details."), 502

    return views.render_created_event(to_created_event(response))


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@bp.route("/", methods=["GET"])
async def index() -> str | tuple[str, int]:
    """Sign-in link when unauthenticated, otherwise the form (or an event)."""
    ctx = _context()
    record = ctx.token_store.read()

    if record is None:
        auth_url = ctx.session.build_authorization_url(force_consent=ctx.settings.force_consent)
        return views.render_sign_in(auth_url)

    if ctx.settings.auto_create_event:
        return await _create_and_render(ctx, record, emails=None)

    return views.render_event_form(ctx.defaults)


@bp.route("/oauth2callback", methods=["GET"])
async def oauth2callback() -> str | tuple[str, int]:
    """Complete the code exchange and persist the token."""
    ctx = _context()

    denied = request.args.get("error")
    if denied:
        logger.warning("Authorization denied by provider: %s", denied)
        return views.render_error("Authorization was denied. Return to the home page to try again."), 400

    code = request.args.get("code")
    if not code:
        return views.render_error("No code found in query params."), 400

    result = await _attempt(ctx.session.exchange_code_for_tokens, code)
    if not result.ok:
        logger.error("Error retrieving access token: %s", result.error)
        return views.render_error(f"Error during authentication: {result.error.message}."), 400

    try:
        ctx.token_store.write(result.value)
    except StorageError as e:
        logger.error("Failed to persist token: %s", e)
        return views.render_error("Something went wrong while saving your sign-in."), 500

    return views.render_auth_success()


@bp.route("/create-event", methods=["POST"])
async def create_event() -> Response | str | tuple[str, int]:
    """Create an event from the submitted form."""
    ctx = _context()
    record = ctx.token_store.read()
    if record is None:
        return redirect(url_for("meet.index"))

    return await _create_and_render(
        ctx,
        record,
        emails=request.form.get("emails", ""),
        summary=request.form.get("summary"),
        description=request.form.get("description"),
    )


@bp.route("/logout", methods=["GET"])
def logout() -> str | tuple[str, int]:
    """Forget the stored token."""
    ctx = _context()
    try:
        ctx.token_store.clear()
    except StorageError as e:
        logger.error("Failed to remove token: %s", e)
        return views.render_error("Something went wrong while signing out."), 500
    return views.render_signed_out()


@bp.route("/healthz", methods=["GET"])
def healthz() -> Response:
    return jsonify({"status": "ok", "authenticated": _context().token_store.exists()})
