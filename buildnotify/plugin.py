"""One notification run: the CI metadata bundle and its delivery."""

from __future__ import annotations

from dataclasses import dataclass, field

from buildnotify.config import NotifyConfig
from buildnotify.core import build_recipient, render
from buildnotify.models import Build, Job, Repo
from buildnotify.transports.base import NotificationSender
from buildnotify.transports.models import Attachment, WebhookPayload
from buildnotify.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class Plugin:
    repo: Repo = field(default_factory=Repo)
    build: Build = field(default_factory=Build)
    config: NotifyConfig = field(default_factory=NotifyConfig)
    job: Job = field(default_factory=Job)

    def payload(self) -> WebhookPayload:
        """Build the webhook payload. Raises TemplateError on template failures."""
        message = render(self)
        attachment = Attachment(
            color=message.color,
            fallback=message.fallback,
            text=message.text,
            image_url=self.config.image_url,
        )
        return WebhookPayload(
            username=self.config.username,
            icon_url=self.config.icon_url,
            icon_emoji=self.config.icon_emoji,
            channel=build_recipient(self.config),
            link_names=self.config.link_names,
            attachments=[attachment],
        )

    def exec(self, sender: NotificationSender) -> None:
        payload = self.payload()
        log.info(
            "notification_rendered",
            repo=self.repo.full_name,
            build=self.build.number,
            status=self.build.status,
            platform=sender.platform_name,
        )
        sender.send(payload)
