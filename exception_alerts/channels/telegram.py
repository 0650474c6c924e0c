"""Telegram channel adapter (Bot API sendMessage)."""

import json
import re
from typing import Any, Callable, Mapping, Optional

import httpx

from exception_alerts.channels import ChannelPayload, NotificationContext, NotificationOptions
from exception_alerts.channels.base import ChannelNotifier
from exception_alerts.channels.format_value import format_value
from exception_alerts.schemas import TelegramConfig

_MARKDOWN_V2_SPECIAL = re.compile(r"([_*\[\]()~`>#+\-=|{}.!\\])")

_IDENTITY_KEYS = ("username", "icon_url", "icon_emoji")


def escape_markdown_v2(text: Any) -> str:
    """Backslash-escape every MarkdownV2 special character."""
    if text is None:
        return ""
    return _MARKDOWN_V2_SPECIAL.sub(r"\\\1", format_value(text))


def escape_markdown(text: Any) -> str:
    """Legacy Markdown mode: only backticks are neutralised."""
    if text is None:
        return ""
    return format_value(text).replace("`", "'")


ESCAPERS: dict[str, Callable[[Any], str]] = {
    "MarkdownV2": escape_markdown_v2,
    "Markdown": escape_markdown,
}


def _fenced(lines: list[str]) -> str:
    return "```\n" + "\n".join(lines) + "\n```"


def format_text(config: TelegramConfig, ctx: NotificationContext) -> str:
    """
    Compose the message text.

    Unlike Slack, the data block is one flat list; request entries are not
    split from the rest.
    """
    esc = ESCAPERS[config.render_mode]

    segments = [
        ctx.headline.render(esc),
        f"*Exception:* {esc(ctx.message)}",
        f"*Hostname:* {esc(ctx.hostname)}",
    ]

    if ctx.backtrace is not None:
        frames = [esc(line) for line in ctx.backtrace[: config.backtrace_lines]]
        segments.append("*Backtrace:*\n" + _fenced(frames))

    if ctx.data:
        lines = [f"{esc(k)}: {esc(v)}" for k, v in ctx.data.items()]
        segments.append("*Data:*\n" + _fenced(lines))

    for field in config.additional_fields:
        segments.append(f"*{esc(field['title'])}:* {esc(field['value'])}")

    return "\n\n".join(segments)


def format_telegram(
    config: TelegramConfig,
    ctx: NotificationContext,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ChannelPayload:
    """
    Format a notification for the Telegram bot API.

    Identity fields (username, icon_url, icon_emoji) are sent only when given
    for this call.
    """
    telegram_body: dict[str, Any] = dict(config.additional_parameters)
    telegram_body.update(
        chat_id=config.chat_id,
        text=format_text(config, ctx),
        parse_mode=config.render_mode,
    )
    for key in _IDENTITY_KEYS:
        if overrides and key in overrides:
            telegram_body[key] = overrides[key]

    return ChannelPayload(
        method="POST",
        url=config.send_message_url,
        headers={"Content-Type": "application/json"},
        body=json.dumps(telegram_body, default=str),
    )


class TelegramNotifier(ChannelNotifier):
    """
    Sends exceptions to a Telegram chat through a bot.

    Options:
        - token, chat_id (required)
        - render_mode: "MarkdownV2" (default) or legacy "Markdown"
        - api_base_url: defaults to https://api.telegram.org
        - additional_parameters: merged into the sendMessage payload
        - backtrace_lines, additional_fields, ignore_data_if, hostname, timeout
    """

    @property
    def channel_type(self) -> str:
        return "telegram"

    def prepare(self, config: TelegramConfig) -> None:
        # Fails early on a token that cannot form a valid URL.
        httpx.URL(config.send_message_url)

    def format(self, ctx: NotificationContext, options: NotificationOptions) -> ChannelPayload:
        return format_telegram(self.config, ctx, options.overrides)

    def delivery_problem(self, response: httpx.Response) -> Optional[str]:
        problem = super().delivery_problem(response)
        if problem:
            return problem
        try:
            reply = response.json()
        except ValueError:
            return None
        if isinstance(reply, dict) and reply.get("ok") is False:
            return f"api error: {reply.get('description', 'unknown')}"
        return None
