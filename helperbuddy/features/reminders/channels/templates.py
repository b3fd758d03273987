"""Reminder message rendering.

Email bodies come from Jinja2 templates next to this package
(``templates/reminder.html`` and ``templates/reminder.txt``); HTML output is
autoescaped, so titles and messages are safe to interpolate.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
BRAND = "HelperBuddy"

# 19 Oct 2026, 09:30 AM IST
SCHEDULED_FORMAT = "%d %b %Y, %I:%M %p %Z"


@lru_cache(maxsize=1)
def get_template_env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def format_scheduled_time(scheduled_time: datetime, tz: tzinfo | None = None) -> str:
    """Render an instant as civil time in ``tz`` (UTC when unset)."""
    if tz is not None:
        scheduled_time = scheduled_time.astimezone(tz)
    return scheduled_time.strftime(SCHEDULED_FORMAT)


def render_subject(title: str) -> str:
    return f"🔔 Reminder: {title}"


def render_email(
    title: str,
    message: str,
    scheduled_time: datetime,
    tz: tzinfo | None = None,
) -> tuple[str, str]:
    """Render the HTML and plain text bodies of a reminder email.

    Returns:
        Tuple of (html_body, text_body).
    """
    env = get_template_env()
    context = {
        "brand": BRAND,
        "title": title,
        "message": message,
        "scheduled_for": format_scheduled_time(scheduled_time, tz),
    }
    html_body = env.get_template("reminder.html").render(**context)
    text_body = env.get_template("reminder.txt").render(**context)
    return html_body, text_body


def render_sms(title: str, message: str) -> str:
    return f"🔔 {BRAND} Reminder: {title}\n\n{message}"


__all__ = [
    "format_scheduled_time",
    "get_template_env",
    "render_email",
    "render_sms",
    "render_subject",
]
