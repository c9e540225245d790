"""Error types raised while rendering or delivering a notification."""

from __future__ import annotations


class NotifyError(Exception):
    """Base class for failures that abort a notification run."""


class TemplateError(NotifyError):
    """A custom message or fallback template could not be rendered."""


class TransportError(NotifyError):
    """The webhook POST failed or returned a non-success response."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
