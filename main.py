"""Google Meet Scheduler - Entry Point.

Loads settings and OAuth client credentials, starts the HTTP server, and
opens a browser on the root page when no token has been saved yet.

Usage:
    python main.py                # Port from $PORT (default 3000)
    python main.py --port 8080
    python main.py --no-browser
"""

import argparse
import logging
import sys
import threading
import webbrowser

from auth.credential_store import FileTokenStore, load_client_credentials
from config.settings import load_settings
from core.errors import ConfigError
from web.server import create_app

logger = logging.getLogger("main")


def main() -> None:
    """Parse arguments and run the server."""
    parser = argparse.ArgumentParser(description="Create Google Calendar events with Meet links.")
    parser.add_argument("--port", type=int, help="Port to listen on (overrides $PORT).")
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Don't open a browser for authentication on startup.",
    )
    args = parser.parse_args()

    settings = load_settings()
    if args.port:
        settings.port = args.port
    if args.no_browser:
        settings.open_browser = False

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    # Suppress Werkzeug request logs
    logging.getLogger("werkzeug").setLevel(logging.WARNING)

    try:
        client = load_client_credentials(settings.google_credentials_path)
    except ConfigError as e:
        logger.error("Cannot start: %s", e)
        sys.exit(1)

    token_store = FileTokenStore(settings.google_token_path)
    app = create_app(settings, client_credentials=client, token_store=token_store)

    print(f"Server running at {settings.base_url}")
    if token_store.exists():
        print(f"You are already authenticated. Go to {settings.base_url}")
    elif settings.open_browser:
        print("Opening browser for authentication...")
        threading.Timer(1.0, webbrowser.open, args=(settings.base_url,)).start()

    app.run(host=settings.host, port=settings.port, debug=False, use_reloader=False)


if __name__ == "__main__":
    main()
