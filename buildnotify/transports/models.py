"""Incoming-webhook payload models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Attachment:
    color: str = ""
    fallback: str = ""
    text: str = ""
    image_url: str = ""
    mrkdwn_in: list[str] = field(default_factory=lambda: ["text", "fallback"])

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in self.__dict__.items() if value}


@dataclass
class WebhookPayload:
    username: str = ""
    icon_url: str = ""
    icon_emoji: str = ""
    channel: str = ""
    link_names: bool = False
    attachments: list[Attachment] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """JSON body for the webhook with empty fields left out."""
        data: dict[str, Any] = {
            "username": self.username,
            "icon_url": self.icon_url,
            "icon_emoji": self.icon_emoji,
            "channel": self.channel,
            "link_names": "1" if self.link_names else "",
        }
        data = {key: value for key, value in data.items() if value}
        if self.attachments:
            data["attachments"] = [a.to_dict() for a in self.attachments]
        return data
