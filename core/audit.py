"""Calendar Event Audit Log.

Appends every event creation attempt to a daily log file as newline-delimited
JSON (NDJSON), so a created meeting can be traced back to the request that
produced it even after the browser page is gone. Filter with jq.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

# Directory for event audit logs
LOG_DIR = Path("logs") / "calendar_events"

_error_logger = logging.getLogger("core.audit")


def _ensure_log_dir() -> None:
    """Create the log directory if it doesn't exist."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)


def log_event_creation(
    request_id: str,
    outcome: str,
    payload: dict[str, Any] | None = None,
) -> None:
    """Log one event creation attempt to the daily log file.

    Args:
        request_id: The conference request id sent with the event.
        outcome: Either "created" or "failed".
        payload: Extra fields (summary, attendees, meeting link, error).
    """
    today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    log_entry = {
        "logged_at": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "request_id": request_id,
        "outcome": outcome,
        "event": payload or {},
    }

    try:
        _ensure_log_dir()
        with open(LOG_DIR / f"{today}.log", "a", encoding="utf-8") as f:
            f.write(json.dumps(log_entry, default=str) + "\n")
    except OSError as e:
        _error_logger.error("Failed to write event audit log: %s", e)
