"""Abstract notification sender."""

from __future__ import annotations

from abc import ABC, abstractmethod

from buildnotify.transports.models import WebhookPayload


class NotificationSender(ABC):
    @property
    @abstractmethod
    def platform_name(self) -> str: ...

    @abstractmethod
    def send(self, payload: WebhookPayload) -> None:
        """Deliver one payload. Raises TransportError on failure."""
        ...
