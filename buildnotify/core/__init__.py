"""Message composition and templating."""

from buildnotify.core.message import (
    RenderedMessage,
    build_recipient,
    compose_body,
    compose_fallback,
    render,
    select_color,
    select_icon,
)
from buildnotify.core.templating import render_trim

__all__ = [
    "RenderedMessage",
    "build_recipient",
    "compose_body",
    "compose_fallback",
    "render",
    "render_trim",
    "select_color",
    "select_icon",
]
