"""buildnotify entry point: binds CLI flags and CI env vars, then sends one notification."""

from __future__ import annotations

import sys

import click

from buildnotify import __version__
from buildnotify.config import NotifyConfig, Recipient, load_settings
from buildnotify.errors import NotifyError
from buildnotify.models import Author, Build, CommitMessage, Job, Repo
from buildnotify.plugin import Plugin
from buildnotify.transports import NotificationSender, RecordingSender, SlackWebhook
from buildnotify.utils import get_logger, register_secret, setup_logging

log = get_logger(__name__)


def run(plugin: Plugin, sender: NotificationSender) -> int:
    """Execute one notification and map failures to an exit code."""
    try:
        plugin.exec(sender)
    except NotifyError as exc:
        log.error("notification_failed", error=str(exc), kind=type(exc).__name__)
        return 1
    return 0


@click.command()
@click.version_option(__version__, prog_name="buildnotify")
@click.option("--config", "config_path", default=None, help="Path to config YAML file")
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--dry-run", is_flag=True, help="Render the message but don't send it")
# Plugin options
@click.option("--webhook", envvar=["PLUGIN_WEBHOOK", "SLACK_WEBHOOK", "WEBHOOK"], default="", help="Incoming webhook URL")
@click.option("--channel", envvar=["PLUGIN_CHANNEL", "SLACK_CHANNEL"], default="", help="Channel to post to")
@click.option("--recipient", envvar=["PLUGIN_RECIPIENT", "SLACK_RECIPIENT"], default="", help="User to message directly; wins over --channel")
@click.option("--username", envvar=["PLUGIN_USERNAME", "SLACK_USERNAME"], default="", help="Display username")
@click.option("--template", envvar=["PLUGIN_TEMPLATE", "SLACK_TEMPLATE"], default="", help="Message template or template URL")
@click.option("--fallback", envvar=["PLUGIN_FALLBACK", "SLACK_FALLBACK"], default="", help="Fallback text template")
@click.option("--color", envvar=["PLUGIN_COLOR", "SLACK_COLOR"], default="", help="Attachment color override")
@click.option("--image", "image_url", envvar=["PLUGIN_IMAGE_URL", "SLACK_IMAGE_URL"], default="", help="Attachment image URL")
@click.option("--icon-url", envvar=["PLUGIN_ICON_URL", "SLACK_ICON_URL"], default="", help="Bot icon URL")
@click.option("--icon-emoji", envvar=["PLUGIN_ICON_EMOJI", "SLACK_ICON_EMOJI"], default="", help="Bot icon emoji")
@click.option("--host-internal", envvar=["PLUGIN_HOST_INTERNAL", "SLACK_HOST_INTERNAL"], default="", help="Hostname for the internal CI link")
@click.option("--host-external", envvar=["PLUGIN_HOST_EXTERNAL", "SLACK_HOST_EXTERNAL"], default="", help="Hostname for the external CI link")
@click.option("--link-names", envvar=["PLUGIN_LINK_NAMES", "SLACK_LINK_NAMES"], is_flag=True, default=False, help="Expand literal @mentions")
# CI metadata
@click.option("--repo.owner", "repo_owner", envvar="DRONE_REPO_OWNER", default="")
@click.option("--repo.name", "repo_name", envvar="DRONE_REPO_NAME", default="")
@click.option("--repo.link", "repo_link", envvar="DRONE_REPO_LINK", default="")
@click.option("--commit.sha", "commit_sha", envvar="DRONE_COMMIT_SHA", default="")
@click.option("--commit.ref", "commit_ref", envvar="DRONE_COMMIT_REF", default="refs/heads/master")
@click.option("--commit.branch", "commit_branch", envvar="DRONE_COMMIT_BRANCH", default="master")
@click.option("--commit.author", "commit_author", envvar="DRONE_COMMIT_AUTHOR", default="")
@click.option("--commit.author.name", "commit_author_name", envvar="DRONE_COMMIT_AUTHOR_NAME", default="")
@click.option("--commit.author.email", "commit_author_email", envvar="DRONE_COMMIT_AUTHOR_EMAIL", default="")
@click.option("--commit.author.avatar", "commit_author_avatar", envvar="DRONE_COMMIT_AUTHOR_AVATAR", default="")
@click.option("--commit.pull", "commit_pull", envvar="DRONE_PULL_REQUEST", default="")
@click.option("--commit.message", "commit_message", envvar="DRONE_COMMIT_MESSAGE", default="")
@click.option("--build.event", "build_event", envvar="DRONE_BUILD_EVENT", default="push")
@click.option("--build.number", "build_number", envvar="DRONE_BUILD_NUMBER", type=int, default=0)
@click.option("--build.parent", "build_parent", envvar="DRONE_BUILD_PARENT", type=int, default=0)
@click.option("--build.status", "build_status", envvar="DRONE_BUILD_STATUS", default="success")
@click.option("--build.link", "build_link", envvar="DRONE_BUILD_LINK", default="")
@click.option("--build.started", "build_started", envvar="DRONE_BUILD_STARTED", type=int, default=0)
@click.option("--build.created", "build_created", envvar="DRONE_BUILD_CREATED", type=int, default=0)
@click.option("--build.finished", "build_finished", envvar="DRONE_BUILD_FINISHED", type=int, default=0)
@click.option("--build.tag", "build_tag", envvar="DRONE_TAG", default="")
@click.option("--build.deploy-to", "build_deploy_to", envvar="DRONE_DEPLOY_TO", default="")
@click.option("--job.started", "job_started", envvar="DRONE_JOB_STARTED", type=int, default=0)
def cli(
    config_path: str | None,
    log_level: str | None,
    dry_run: bool,
    webhook: str,
    channel: str,
    recipient: str,
    username: str,
    template: str,
    fallback: str,
    color: str,
    image_url: str,
    icon_url: str,
    icon_emoji: str,
    host_internal: str,
    host_external: str,
    link_names: bool,
    repo_owner: str,
    repo_name: str,
    repo_link: str,
    commit_sha: str,
    commit_ref: str,
    commit_branch: str,
    commit_author: str,
    commit_author_name: str,
    commit_author_email: str,
    commit_author_avatar: str,
    commit_pull: str,
    commit_message: str,
    build_event: str,
    build_number: int,
    build_parent: int,
    build_status: str,
    build_link: str,
    build_started: int,
    build_created: int,
    build_finished: int,
    build_tag: str,
    build_deploy_to: str,
    job_started: int,
) -> None:
    """Send a build status notification to a Slack incoming webhook."""
    settings = load_settings(config_path)
    if log_level:
        settings.log_level = log_level
    if dry_run:
        settings.dry_run = True
    setup_logging(level=settings.log_level, json_output=settings.log_json)
    register_secret(webhook)

    plugin = Plugin(
        repo=Repo(owner=repo_owner, name=repo_name, link=repo_link),
        build=Build(
            event=build_event,
            number=build_number,
            parent=build_parent,
            commit=commit_sha,
            ref=commit_ref,
            branch=commit_branch,
            tag=build_tag,
            pull=commit_pull,
            deploy_to=build_deploy_to,
            status=build_status,
            link=build_link,
            author=Author(
                username=commit_author,
                name=commit_author_name,
                email=commit_author_email,
                avatar=commit_author_avatar,
            ),
            message=CommitMessage(commit_message),
            started=build_started,
            created=build_created,
            finished=build_finished,
        ),
        config=NotifyConfig(
            webhook=webhook,
            recipient=Recipient.from_options(user=recipient, channel=channel),
            username=username,
            template=template,
            fallback=fallback,
            color=color,
            image_url=image_url,
            icon_url=icon_url,
            icon_emoji=icon_emoji,
            host_internal=host_internal,
            host_external=host_external,
            link_names=link_names,
            timeout=settings.http_timeout,
        ),
        job=Job(started=job_started),
    )

    sender: NotificationSender
    if settings.dry_run:
        sender = RecordingSender()
    else:
        sender = SlackWebhook(webhook, timeout=settings.http_timeout)

    sys.exit(run(plugin, sender))


if __name__ == "__main__":
    cli()
