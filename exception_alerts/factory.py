"""
Building notifiers, and the process-wide list used by ``notify_exception``.

Integrations that already hold option dicts call ``create_notifier``;
deployments configured through environment variables rely on
``get_notifiers``, which reads ``Settings`` once.
"""

import logging
from typing import Any, Iterable, Mapping, Optional

import httpx

from exception_alerts.channels.base import ChannelNotifier, ExceptionLike, OptionsLike
from exception_alerts.channels.detect import detect_from_options, suggest_channel_type
from exception_alerts.channels.dispatcher import dispatch_exception
from exception_alerts.channels.slack import SlackNotifier
from exception_alerts.channels.telegram import TelegramNotifier
from exception_alerts.config import Settings

logger = logging.getLogger(__name__)

NOTIFIER_CLASSES: dict[str, type[ChannelNotifier]] = {
    "slack": SlackNotifier,
    "telegram": TelegramNotifier,
}

_notifiers: Optional[list[ChannelNotifier]] = None


def create_notifier(
    channel_type: str,
    options: Mapping[str, Any],
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> ChannelNotifier:
    """
    Instantiate the notifier for *channel_type* ("slack", "telegram" or "auto").

    Bad options give a disabled notifier; an unknown type is a ValueError.
    """
    if channel_type == "auto":
        detected = detect_from_options(options)
        if detected is None:
            raise ValueError("Cannot detect channel type from options")
        channel_type = detected

    cls = NOTIFIER_CLASSES.get(channel_type)
    if cls is None:
        message = f"Unknown channel type: {channel_type}"
        suggestion = suggest_channel_type(channel_type)
        if suggestion:
            message += f" (did you mean '{suggestion}'?)"
        raise ValueError(message)

    return cls(options, http_client=http_client)


def notifiers_from_settings(
    config: Settings,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> list[ChannelNotifier]:
    """One notifier per channel that has any setting present."""
    notifiers = []
    for channel_type, options in (
        ("slack", config.slack_options()),
        ("telegram", config.telegram_options()),
    ):
        if options is None:
            continue
        notifiers.append(create_notifier(channel_type, options, http_client=http_client))

    if not notifiers:
        logger.info("No exception notification channels configured")
    return notifiers


def get_notifiers() -> list[ChannelNotifier]:
    """
    Return the shared notifier list, building it from settings on first use.
    """
    global _notifiers
    if _notifiers is None:
        from exception_alerts.config import settings

        _notifiers = notifiers_from_settings(settings)
    return _notifiers


def set_notifiers(notifiers: Optional[Iterable[ChannelNotifier]]) -> None:
    """Replace the shared notifier list; ``None`` rebuilds it from settings next time."""
    global _notifiers
    _notifiers = list(notifiers) if notifiers is not None else None


async def notify_exception(exception: ExceptionLike, options: OptionsLike = None) -> list[bool]:
    """Send *exception* to every shared notifier."""
    return await dispatch_exception(get_notifiers(), exception, options)
