"""Slack channel adapter (incoming webhooks, attachment style)."""

import json
from typing import Any, Mapping, Optional

import httpx

from exception_alerts.channels import ChannelPayload, NotificationContext, NotificationOptions
from exception_alerts.channels.base import ChannelNotifier
from exception_alerts.channels.format_value import format_data_lines
from exception_alerts.schemas import SlackConfig

_IDENTITY_KEYS = ("channel", "username", "icon_emoji", "icon_url")


def is_request_key(key: str) -> bool:
    """Keys that go in the "Data" field rather than "Extra Data"."""
    return key.startswith("Request") or key in ("Parameters", "Current")


def _code_block(lines: list[str]) -> str:
    return "```" + "\n".join(lines) + "```"


def _fields(config: SlackConfig, ctx: NotificationContext) -> list[dict[str, Any]]:
    fields = [
        {"title": "Exception", "value": ctx.message.replace("`", "'")},
        {"title": "Hostname", "value": ctx.hostname},
    ]

    if ctx.backtrace is not None:
        frames = ctx.backtrace[: config.backtrace_lines]
        fields.append({"title": "Backtrace", "value": _code_block(frames)})

    request_data = {k: v for k, v in ctx.data.items() if is_request_key(k)}
    extra_data = {k: v for k, v in ctx.data.items() if not is_request_key(k)}
    if request_data:
        fields.append({"title": "Data", "value": _code_block(format_data_lines(request_data))})
    if extra_data:
        fields.append({"title": "Extra Data", "value": _code_block(format_data_lines(extra_data))})

    fields.extend(dict(field) for field in config.additional_fields)
    return fields


def format_slack(
    config: SlackConfig,
    ctx: NotificationContext,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ChannelPayload:
    """
    Format a notification for a Slack incoming webhook.

    Only a per-call ``channel`` override is honoured; it replaces the
    configured default channel.
    """
    attachment = {
        "color": config.color,
        "text": str(ctx.headline),
        "fields": _fields(config, ctx),
        "mrkdwn_in": ["text", "fields"],
    }

    slack_body: dict[str, Any] = dict(config.additional_parameters)
    for key in _IDENTITY_KEYS:
        value = getattr(config, key)
        if value:
            slack_body[key] = value
    if overrides and "channel" in overrides:
        slack_body["channel"] = overrides["channel"]
    slack_body["text"] = ""
    slack_body["attachments"] = [attachment]

    return ChannelPayload(
        method="POST",
        url=config.webhook_url,
        headers={"Content-Type": "application/json"},
        body=json.dumps(slack_body, default=str),
    )


class SlackNotifier(ChannelNotifier):
    """
    Posts exceptions to a Slack incoming webhook.

    Options:
        - webhook_url (required)
        - channel, username, icon_emoji, icon_url: message defaults
        - additional_parameters: merged into the payload; its ``color`` key
          sets the attachment color instead (default "danger")
        - backtrace_lines, additional_fields, ignore_data_if, hostname, timeout
    """

    @property
    def channel_type(self) -> str:
        return "slack"

    def prepare(self, config: SlackConfig) -> None:
        # urlparse accepts URLs httpx cannot send to (bad port, control chars).
        httpx.URL(config.webhook_url)

    def format(self, ctx: NotificationContext, options: NotificationOptions) -> ChannelPayload:
        return format_slack(self.config, ctx, options.overrides)
