"""Google Calendar API gateway.

Sends a composed event to Google Calendar with a Meet conference request and
pulls the generated meeting link out of the response. This module isolates all
Calendar-API-specific code so the web layer stays clean.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from core.audit import log_event_creation
from core.errors import GatewayError
from events.composer import EventRequest

logger = logging.getLogger(__name__)

CONFERENCE_SOLUTION = "hangoutsMeet"
VIDEO_ENTRY_POINT = "video"


@dataclass
class CreatedEvent:
    """The parts of a created event the result page shows."""

    summary: str
    start_time: str
    meeting_link: str | None = None
    event_id: str | None = None
    html_link: str | None = None


def build_event_body(event: EventRequest) -> dict[str, Any]:
    """Render an EventRequest as a Calendar v3 event resource."""
    body: dict[str, Any] = {
        "summary": event.summary,
        "description": event.description,
        "start": {
            "dateTime": event.start_time.isoformat(),
            "timeZone": event.time_zone,
        },
        "end": {
            "dateTime": event.end_time.isoformat(),
            "timeZone": event.time_zone,
        },
    }

    if event.attendee_emails:
        body["attendees"] = [{"email": email} for email in event.attendee_emails]

    if event.conferencing_requested:
        body["conferenceData"] = {
            "createRequest": {
                "requestId": event.request_id,
                "conferenceSolutionKey": {"type": CONFERENCE_SOLUTION},
            }
        }

    return body


def extract_meeting_link(response: dict[str, Any]) -> str | None:
    """Return the video entry point URI, or None if the conference isn't ready.

    Google may create the conference asynchronously, in which case the
    response carries no entry points yet.
    """
    conference = response.get("conferenceData") or {}
    for entry in conference.get("entryPoints") or []:
        if entry.get("entryPointType") == VIDEO_ENTRY_POINT and entry.get("uri"):
            return entry["uri"]
    return None


def to_created_event(response: dict[str, Any]) -> CreatedEvent:
    """Project a raw insert response onto CreatedEvent."""
    start = response.get("start", {})
    return CreatedEvent(
        summary=response.get("summary", "(No title)"),
        start_time=start.get("dateTime") or start.get("date", ""),
        meeting_link=extract_meeting_link(response),
        event_id=response.get("id"),
        html_link=response.get("htmlLink"),
    )


class CalendarGateway:
    """Creates events on one Google Calendar."""

    def __init__(self, calendar_id: str = "primary") -> None:
        self.calendar_id = calendar_id

    def create_event(self, creds: Credentials, event: EventRequest) -> dict[str, Any]:
        """Insert an event with conferencing enabled.

        Args:
            creds: Bearer credentials from the session manager.
            event: The composed event.

        Returns:
            The raw event dict returned by the Calendar API.

        Raises:
            GatewayError: If the API call fails for any reason. Not retried.
        """
        body = build_event_body(event)
        logger.info(
            "Creating event '%s' on calendar '%s' with %d attendee(s)",
            event.summary, self.calendar_id, len(event.attendee_emails),
        )

        try:
            service = build("calendar", "v3", credentials=creds, cache_discovery=False)
            response = (
                service.events()
                .insert(
                    calendarId=self.calendar_id,
                    body=body,
                    conferenceDataVersion=1,
                    sendUpdates="all" if event.attendee_emails else "none",
                )
                .execute()
            )
        except HttpError as e:
            self._record_failure(event, e)
            raise GatewayError("The calendar service rejected the event", str(e)) from e
        except GoogleAuthError as e:
            self._record_failure(event, e)
            raise GatewayError("The stored access token was not accepted", str(e)) from e
        except (httplib2.HttpLib2Error, OSError) as e:
            self._record_failure(event, e)
            raise GatewayError("Could not reach the calendar service", str(e)) from e

        meeting_link = extract_meeting_link(response)
        logger.info(
            "Event created: %s starting %s, meet link: %s",
            response.get("summary"),
            response.get("start", {}).get("dateTime"),
            meeting_link or "none yet",
        )
        log_event_creation(
            event.request_id,
            "created",
            {
                "event_id": response.get("id"),
                "summary": response.get("summary"),
                "attendees": event.attendee_emails,
                "meeting_link": meeting_link,
            },
        )
        return response

    def _record_failure(self, event: EventRequest, error: Exception) -> None:
        logger.error("Error creating event '%s': %s", event.summary, error)
        log_event_creation(
            event.request_id,
            "failed",
            {"summary": event.summary, "attendees": event.attendee_emails, "error": str(error)},
        )
