"""HTML rendering for the front controller.

Pages are small Jinja templates rendered with Flask's render_template_string,
so anything coming back from Google is escaped before it reaches the browser.
"""

from flask import render_template_string
from markupsafe import Markup

from events.composer import EventDefaults
from events.gateway import CreatedEvent

NO_MEETING_LINK = "No Meet link found"

LAYOUT = """<!doctype html>
<html>
<head><meta charset="utf-8"><title>{{ title }}</title></head>
<body>
{{ body }}
</body>
</html>
"""

SIGN_IN = """<h1>Google Meet Scheduler</h1>
<p><a href="{{ auth_url }}">Sign in with Google</a></p>
"""

EVENT_FORM = """<h1>Create a Google Meet event</h1>
<form method="post" action="{{ url_for('meet.create_event') }}">
  <p><label>Title <input type="text" name="summary" placeholder="{{ defaults.summary }}"></label></p>
  <p><label>Description <textarea name="description" placeholder="{{ defaults.description }}"></textarea></label></p>
  <p><label>Attendees (comma-separated) <input type="text" name="emails" placeholder="a@example.com, b@example.com"></label></p>
  <p><button type="submit">Create event</button></p>
</form>
<p>Starts in a few minutes, times shown in {{ defaults.time_zone }}.</p>
<p><a href="{{ url_for('meet.logout') }}">Sign out</a></p>
"""

EVENT_CREATED = """<h2>Event Created Successfully</h2>
<p><strong>Title:</strong> {{ event.summary }}</p>
<p><strong>Start:</strong> {{ event.start_time }}</p>
{% if event.meeting_link %}
<p><strong>Meet Link:</strong> <a href="{{ event.meeting_link }}" target="_blank">{{ event.meeting_link }}</a></p>
{% else %}
<p><strong>Meet Link:</strong> {{ no_link }}</p>
{% endif %}
{% if event.html_link %}
<p><a href="{{ event.html_link }}" target="_blank">Open in Google Calendar</a></p>
{% endif %}
<p><a href="{{ url_for('meet.index') }}">Back</a></p>
"""

AUTH_SUCCESS = """<h3>Authentication successful!</h3>
<p><a href="{{ url_for('meet.index') }}">Return to the home page.</a></p>
"""

SIGNED_OUT = """<h3>You have been signed out.</h3>
<p><a href="{{ url_for('meet.index') }}">Sign in again</a></p>
"""

ERROR = """<h3>{{ message }}</h3>
<p><a href="{{ url_for('meet.index') }}">Return to the home page.</a></p>
"""


def _page(title: str, template: str, **context) -> str:
    body = render_template_string(template, **context)
    return render_template_string(LAYOUT, title=title, body=Markup(body))


def render_sign_in(auth_url: str) -> str:
    return _page("Sign in", SIGN_IN, auth_url=auth_url)


def render_event_form(defaults: EventDefaults) -> str:
    return _page("Create event", EVENT_FORM, defaults=defaults)


def render_created_event(event: CreatedEvent) -> str:
    return _page("Event created", EVENT_CREATED, event=event, no_link=NO_MEETING_LINK)


def render_auth_success() -> str:
    return _page("Signed in", AUTH_SUCCESS)


def render_signed_out() -> str:
    return _page("Signed out", SIGNED_OUT)


def render_error(message: str) -> str:
    return _page("Error", ERROR, message=message)
