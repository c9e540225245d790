"""User-supplied message templates rendered with Jinja2.

A template receives the whole notification bundle as context::

    {{ build.status | uppercase }} {{ repo.owner }}/{{ repo.name }}
    {% if build.status is success %}:tada:{% endif %}

Template strings that are ``http(s)://`` or ``file://`` URLs are loaded from
that location first.
"""

from __future__ import annotations

import re
import time
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from typing import TYPE_CHECKING, Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import httpx
import jinja2
from jinja2.sandbox import SandboxedEnvironment

from buildnotify.errors import TemplateError
from buildnotify.models import short_sha
from buildnotify.utils.logging import get_logger

if TYPE_CHECKING:
    from buildnotify.plugin import Plugin

log = get_logger(__name__)

_FAILED_STATUSES = frozenset({"failure", "error", "killed"})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def duration(started: int | float, finished: int | float) -> str:
    """Human readable elapsed time between two unix timestamps, e.g. ``1m 5s``."""
    delta = max(int(finished) - int(started), 0)
    days, delta = divmod(delta, 86400)
    hours, delta = divmod(delta, 3600)
    minutes, seconds = divmod(delta, 60)

    parts = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    parts.append(f"{seconds}s")
    return " ".join(parts)


def since(started: int | float) -> str:
    return duration(started, time.time())


def format_datetime(
    timestamp: int | float,
    layout: str = "%Y-%m-%d %H:%M:%S",
    zone: str = "UTC",
) -> str:
    tz: tzinfo = timezone.utc
    if zone.upper() != "UTC":
        try:
            tz = ZoneInfo(zone)
        except (ZoneInfoNotFoundError, ValueError):
            log.warning("template_unknown_timezone", zone=zone)
    return datetime.fromtimestamp(timestamp, tz=tz).strftime(layout)


def uppercasefirst(value: Any) -> str:
    text = str(value)
    return text[:1].upper() + text[1:]


def regex_replace(value: Any, pattern: str, replacement: str) -> str:
    return re.sub(pattern, replacement, str(value))


def is_success(status: Any) -> bool:
    return str(status) == "success"


def is_failure(status: Any) -> bool:
    return str(status) in _FAILED_STATUSES


def _build_environment() -> SandboxedEnvironment:
    # Templates are untrusted input
    env = SandboxedEnvironment(autoescape=False)
    env.filters.update(
        {
            "uppercasefirst": uppercasefirst,
            "uppercase": lambda v: str(v).upper(),
            "lowercase": lambda v: str(v).lower(),
            "regex_replace": regex_replace,
            "short_sha": lambda v: short_sha(str(v)),
            "datetime": format_datetime,
            "since": since,
        }
    )
    env.globals.update(
        {
            "duration": duration,
            "since": since,
            "datetime": format_datetime,
        }
    )
    env.tests.update({"success": is_success, "failure": is_failure})
    return env


_ENV = _build_environment()


# ---------------------------------------------------------------------------
# Loading and rendering
# ---------------------------------------------------------------------------

def load_template(source: str, timeout: float = 30.0) -> str:
    """Resolve a template argument to its text.

    Plain strings are returned unchanged; remote and file references are
    fetched.
    """
    if source.startswith(("http://", "https://")):
        try:
            response = httpx.get(source, timeout=timeout, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise TemplateError(f"failed to fetch template from {source}: {exc}") from exc
        log.debug("template_fetched", source=source, size=len(response.text))
        return response.text

    if source.startswith("file://"):
        path = Path(source.removeprefix("file://"))
        try:
            return path.read_text()
        except OSError as exc:
            raise TemplateError(f"failed to read template file {path}: {exc}") from exc

    return source


def template_context(plugin: Plugin) -> dict[str, Any]:
    return {
        "repo": plugin.repo,
        "build": plugin.build,
        "config": plugin.config,
        "job": plugin.job,
    }


def render(template: str, context: dict[str, Any], timeout: float = 30.0) -> str:
    source = load_template(template, timeout=timeout)
    try:
        return _ENV.from_string(source).render(context)
    except jinja2.TemplateError as exc:
        raise TemplateError(f"failed to render template: {exc}") from exc
    except Exception as exc:
        # Helpers and expressions fail with arbitrary types (re.error, TypeError, ...)
        raise TemplateError(f"template raised {type(exc).__name__}: {exc}") from exc


def render_trim(template: str, plugin: Plugin) -> str:
    """Render ``template`` against the plugin bundle and strip surrounding whitespace.

    Remote templates are fetched with the plugin's configured HTTP timeout.
    """
    return render(template, template_context(plugin), timeout=plugin.config.timeout).strip()
