"""Slack incoming-webhook delivery over httpx."""

from __future__ import annotations

import httpx

from buildnotify.errors import TransportError
from buildnotify.transports.base import NotificationSender
from buildnotify.transports.models import WebhookPayload
from buildnotify.utils.logging import get_logger

log = get_logger(__name__)


class SlackWebhook(NotificationSender):
    """POSTs payloads as JSON to a single incoming-webhook URL."""

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._client = client

    @property
    def platform_name(self) -> str:
        return "slack"

    def send(self, payload: WebhookPayload) -> None:
        if not self._url:
            raise TransportError("no webhook URL configured")

        body = payload.to_dict()
        try:
            if self._client is not None:
                resp = self._client.post(self._url, json=body, timeout=self._timeout)
            else:
                with httpx.Client(timeout=self._timeout) as client:
                    resp = client.post(self._url, json=body)
        except httpx.HTTPError as exc:
            raise TransportError(f"webhook request failed: {exc}") from exc

        if not resp.is_success:
            log.error("webhook_send_error", status=resp.status_code, body=resp.text[:200])
            raise TransportError(
                f"webhook returned HTTP {resp.status_code}",
                status_code=resp.status_code,
                body=resp.text,
            )

        log.info("notification_sent", channel=payload.channel or "default", status=resp.status_code)


class RecordingSender(NotificationSender):
    """Keeps payloads instead of sending them. Used for dry runs."""

    def __init__(self) -> None:
        self.sent: list[WebhookPayload] = []

    @property
    def platform_name(self) -> str:
        return "dry-run"

    def send(self, payload: WebhookPayload) -> None:
        self.sent.append(payload)
        log.info("notification_recorded", payload=payload.to_dict())
