"""Event Composer.

Turns raw form input into an EventRequest: a short meeting starting a few
minutes from now, with a Google Meet conference requested and any valid-looking
attendee addresses attached.
"""

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

START_OFFSET = timedelta(minutes=5)
DURATION = timedelta(minutes=30)


@dataclass(frozen=True)
class EventDefaults:
    """Values used when a request doesn't override them."""

    summary: str
    description: str
    time_zone: str


@dataclass
class EventRequest:
    """A calendar event ready to be sent to the gateway."""

    summary: str
    description: str
    start_time: datetime
    end_time: datetime
    time_zone: str
    request_id: str
    attendee_emails: list[str] = field(default_factory=list)
    conferencing_requested: bool = True


def parse_attendees(raw: str | None) -> list[str]:
    """Split a comma-separated address list, keeping entries that contain '@'.

    Malformed entries are dropped silently; order is preserved.
    """
    if not raw:
        return []
    emails = []
    for entry in raw.split(","):
        entry = entry.strip()
        if "@" in entry:
            emails.append(entry)
    return emails


def new_request_id() -> str:
    """Conference request id, unique per call."""
    return f"meet-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


def compose(
    emails: str | None,
    defaults: EventDefaults,
    summary: str | None = None,
    description: str | None = None,
    now: datetime | None = None,
) -> EventRequest:
    """Build an EventRequest from form input.

    Args:
        emails: Comma-separated attendee addresses (may be empty).
        defaults: Fallback summary, description, and time zone.
        summary: Optional title override; blank means use the default.
        description: Optional description override; blank means use the default.
        now: Reference time, defaults to the current UTC time.

    Returns:
        An EventRequest starting START_OFFSET from now and lasting DURATION.
    """
    now = now or datetime.now(timezone.utc)
    start = now + START_OFFSET

    return EventRequest(
        summary=(summary or "").strip() or defaults.summary,
        description=(description or "").strip() or defaults.description,
        start_time=start,
        end_time=start + DURATION,
        time_zone=defaults.time_zone,
        request_id=new_request_id(),
        attendee_emails=parse_attendees(emails),
        conferencing_requested=True,
    )
