"""buildnotify transports."""

from buildnotify.transports.base import NotificationSender
from buildnotify.transports.models import Attachment, WebhookPayload
from buildnotify.transports.slack_webhook import RecordingSender, SlackWebhook

__all__ = [
    "Attachment",
    "NotificationSender",
    "RecordingSender",
    "SlackWebhook",
    "WebhookPayload",
]
