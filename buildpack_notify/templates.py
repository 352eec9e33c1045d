"""
buildpack_notify/templates.py
HTML body of the restage notification e-mail.
Exports: NotifyEmail, render_notify_email
"""

from dataclasses import dataclass
from html import escape

from buildpack_notify.cf.models import Application
from buildpack_notify.releases import BuildpackReleaseInfo


@dataclass
class NotifyEmail:
    """Values rendered into one notification."""

    username: str
    apps: list[Application]
    is_multiple_app: bool
    buildpacks: list[BuildpackReleaseInfo]


def _render_app(app: Application) -> str:
    return f"<li><code>{escape(app.name)}</code> (guid {escape(app.guid)})</li>"


def _render_buildpack(buildpack: BuildpackReleaseInfo) -> str:
    label = escape(buildpack.name)
    if buildpack.version:
        label += f" {escape(buildpack.version)}"
    if not buildpack.url:
        return f"<li>{label}</li>"
    return f'<li><a href="{escape(buildpack.url, quote=True)}">{label}</a></li>'


def render_notify_email(email: NotifyEmail) -> str:
    """Render the notification body for one recipient."""
    noun = "applications" if email.is_multiple_app else "application"
    pronoun = "them" if email.is_multiple_app else "it"
    apps_html = "\n".join(_render_app(app) for app in email.apps)
    buildpacks_html = "\n".join(_render_buildpack(bp) for bp in email.buildpacks)
    return (
        "<html><body>\n"
        f"<p>Hello {escape(email.username)},</p>\n"
        f"<p>You are receiving this e-mail because you are a Space Manager or Space Developer "
        f"of the following {noun}, which {'are' if email.is_multiple_app else 'is'} running on "
        f"an outdated system buildpack:</p>\n"
        f"<ul>\n{apps_html}\n</ul>\n"
        "<p>The following buildpacks have been updated with security and bug fixes:</p>\n"
        f"<ul>\n{buildpacks_html}\n</ul>\n"
        f"<p>To pick up the updates, restage your {noun} with "
        f"<code>cf restage APPNAME</code>. Restage {pronoun} soon to stay secure.</p>\n"
        "</body></html>\n"
    )
