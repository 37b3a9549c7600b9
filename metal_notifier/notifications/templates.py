"""Email bodies for subscriber and admin notifications."""

import base64
import html
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from ..models import Release

SUBJECTS = {
    "releases": "Latest Heavy Metal Releases",
    "intro": "Welcome to Heavy Metal Releases Notifier",
    "end_of_service": "End of Service",
    "error_admin": "Heavy Metal Notifier Error",
}


class EmailTemplate(str, Enum):
    """Kinds of email the notifier sends."""

    RELEASES = "releases"
    INTRO = "intro"
    END_OF_SERVICE = "end_of_service"
    ERROR_ADMIN = "error_admin"

    @property
    def subject(self) -> str:
        return SUBJECTS[self.value]


@dataclass
class RenderedEmail:
    """Subject plus HTML and plain-text bodies."""

    subject: str
    html: str
    text: str


def _token(email: str) -> str:
    return base64.b64encode(email.encode("utf-8")).decode("ascii")


def unsubscribe_url(app_url: str, email: str) -> str:
    """Link that unsubscribes the given address."""
    return f"{app_url}/stop?id={_token(email)}"


def render_releases_email(
    name: str, email: str, releases: List[Release], app_url: str
) -> RenderedEmail:
    """
    Render the daily releases email.

    Format:
    1. Greeting with the subscriber's name
    2. One entry per release (artist - album) with its links
    3. Unsubscribe footer

    Args:
        name: Greeting name, usually the local part of the address
        email: Recipient address, used for the unsubscribe link
        releases: Releases with links already attached
        app_url: Base URL of the web application

    Returns:
        The rendered email
    """
    stop_url = unsubscribe_url(app_url, email)

    text_lines = [f"Hi {name},", "", "New heavy metal releases today:", ""]
    html_lines = [
        f"<p>Hi {html.escape(name)},</p>",
        "<p>New heavy metal releases today:</p>",
        "<ul>",
    ]

    for release in releases:
        text_lines.append(f"  * {release.artist} - {release.album}")
        html_links = []
        for link in release.links:
            text_lines.append(f"    {link.platform.value}: {link.url}")
            html_links.append(
                f'<a href="{html.escape(link.url)}">{html.escape(link.platform.value)}</a>'
            )

        item = f"<strong>{html.escape(release.artist)}</strong> - {html.escape(release.album)}"
        if html_links:
            item += " (" + " | ".join(html_links) + ")"
        html_lines.append(f"<li>{item}</li>")

    html_lines.append("</ul>")
    html_lines.append(
        f'<p><small>Don\'t want these emails? <a href="{html.escape(stop_url)}">Unsubscribe</a>.</small></p>'
    )
    text_lines.extend(["", f"Unsubscribe: {stop_url}"])

    return RenderedEmail(
        subject=EmailTemplate.RELEASES.subject,
        html="\n".join(html_lines),
        text="\n".join(text_lines),
    )


def render_simple_email(template: EmailTemplate, **data) -> RenderedEmail:
    """Render the intro, end-of-service and admin error emails."""
    text, html_body = _simple_bodies(template, data)
    return RenderedEmail(subject=template.subject, html=html_body, text=text)


def _simple_bodies(template: EmailTemplate, data: dict) -> Tuple[str, str]:
    name = data.get("name", "")
    if template is EmailTemplate.INTRO:
        confirm_url = f"{data['app_url']}/confirm?id={_token(data['email'])}"
        text = (
            f"Hi {name},\n\nThanks for signing up. Confirm your subscription to "
            f"start receiving heavy metal releases:\n{confirm_url}"
        )
    elif template is EmailTemplate.END_OF_SERVICE:
        text = (
            f"Hi {name},\n\nYou have been unsubscribed and will no longer "
            "receive heavy metal release notifications."
        )
    elif template is EmailTemplate.ERROR_ADMIN:
        text = f"An error occurred:\n\n{data.get('text', '')}"
    else:
        raise ValueError(f"{template.value} needs its own renderer")

    html_body = "".join(
        f"<p>{html.escape(paragraph).replace(chr(10), '<br>')}</p>"
        for paragraph in text.split("\n\n")
    )
    return text, html_body
