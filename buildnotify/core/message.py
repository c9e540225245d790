"""Status message composition for build notifications."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from buildnotify.config import NotifyConfig
from buildnotify.core.templating import render_trim
from buildnotify.models import Build, Repo

if TYPE_CHECKING:
    from buildnotify.plugin import Plugin

CI_NAME = "Drone CI"

_FAILED_STATUSES = frozenset({"failure", "error", "killed"})

# Letters, digits and underscores belong to a word; anything else separates
_WORD_START_RE = re.compile(r"(?<!\w)\w")


@dataclass(frozen=True)
class RenderedMessage:
    color: str
    text: str
    fallback: str


def select_color(status: str) -> str:
    if status == "success":
        return "good"
    if status in _FAILED_STATUSES:
        return "danger"
    return "warning"


def select_icon(status: str) -> str:
    if status == "success":
        return ":white_check_mark:"
    if status in _FAILED_STATUSES:
        return ":x:"
    return ":warning:"


def title_case(text: str) -> str:
    """Upper-case the first letter of every word, leaving the rest untouched."""
    return _WORD_START_RE.sub(lambda m: m.group(0).upper(), text)


def compose_fallback(repo: Repo, build: Build) -> str:
    return (
        f"{build.status} {repo.owner}/{repo.name}#{build.short_commit} "
        f"({build.branch}) by {build.author}"
    )


def compose_title(build: Build) -> str:
    icon = select_icon(build.status)
    status = build.status.upper()

    if build.event == "promote" and build.deploy_to:
        return f"*{icon} Deploy {title_case(build.deploy_to)} {status}*"
    if build.deploy_to:
        return f"*{icon} {title_case(build.deploy_to)} {title_case(build.event)} {status}*"
    return f"*{icon} {title_case(build.event)} {status}*"


def _host_span(link: str) -> tuple[int, int] | None:
    """Start and end offsets of the host in ``link``, brackets included.

    None when the link has no host. Raises ValueError for links urllib
    rejects, including a non-numeric or out of range port.
    """
    parts = urlsplit(link)
    _ = parts.port  # ValueError on a bad port
    if not parts.hostname or "//" not in link:
        return None

    netloc_start = link.index("//") + 2
    if link[netloc_start : netloc_start + len(parts.netloc)] != parts.netloc:
        return None

    # Userinfo may contain the hostname too; the host follows the last "@"
    start = netloc_start + parts.netloc.rfind("@") + 1
    host = link[start : netloc_start + len(parts.netloc)]
    if host.startswith("["):
        return start, start + host.index("]") + 1
    return start, start + len(host.partition(":")[0])


def rewrite_links(link: str, host_internal: str, host_external: str) -> tuple[str, str]:
    """Return the run link with its hostname replaced by each override."""
    try:
        span = _host_span(link)
    except ValueError:
        return link, link
    if span is None:
        return link, link
    start, end = span
    return (
        link[:start] + host_internal + link[end:],
        link[:start] + host_external + link[end:],
    )


def compose_footer(build: Build, config: NotifyConfig) -> str:
    if config.host_internal and config.host_external:
        internal, external = rewrite_links(build.link, config.host_internal, config.host_external)
        return f"<{internal}|{CI_NAME}> (<{external}|External>)"
    return f"<{build.link}|{CI_NAME}>"


def compose_body(repo: Repo, build: Build, config: NotifyConfig) -> str:
    return "\n".join(
        [
            compose_title(build),
            f"Repo: `{repo.owner}/{repo.name}` ({build.branch})",
            f"Build #{build.number} ({build.short_commit}) by {build.author}",
            compose_footer(build, config),
        ]
    )


def render(plugin: Plugin) -> RenderedMessage:
    """Produce the attachment color, text and fallback for a plugin run.

    Custom templates replace the built-in body and fallback independently.
    Raises TemplateError when a custom template fails to render.
    """
    config = plugin.config

    color = config.color or select_color(plugin.build.status)

    if config.template:
        text = render_trim(config.template, plugin)
    else:
        text = compose_body(plugin.repo, plugin.build, config)

    if config.fallback:
        fallback = render_trim(config.fallback, plugin)
    else:
        fallback = compose_fallback(plugin.repo, plugin.build)

    return RenderedMessage(color=color, text=text, fallback=fallback)


def _prepend(prefix: str, value: str) -> str:
    return value if value.startswith(prefix) else prefix + value


def build_recipient(config: NotifyConfig) -> str:
    """Channel field for the payload; empty sends to the webhook's default channel."""
    recipient = config.recipient
    if recipient is None:
        return ""
    if recipient.kind == "user":
        return _prepend("@", recipient.name)
    return _prepend("#", recipient.name)
