"""Exception dispatcher for all configured channels."""

import asyncio
import logging
from typing import Iterable

from exception_alerts.channels.base import ChannelNotifier, ExceptionLike, OptionsLike

logger = logging.getLogger(__name__)


async def dispatch_exception(
    notifiers: Iterable[ChannelNotifier],
    exception: ExceptionLike,
    options: OptionsLike = None,
) -> list[bool]:
    """
    Send *exception* to every notifier concurrently.

    One result per notifier, in order: True when that channel accepted the
    message. A notifier that raises is logged and counted as False; the
    others are unaffected.
    """
    notifiers = list(notifiers)
    tasks = [_notify_safely(notifier, exception, options) for notifier in notifiers]
    if not tasks:
        return []
    return list(await asyncio.gather(*tasks))


async def _notify_safely(
    notifier: ChannelNotifier,
    exception: ExceptionLike,
    options: OptionsLike,
) -> bool:
    if not notifier.enabled:
        return False
    try:
        return await notifier.notify(exception, options)
    except Exception as e:
        logger.error(
            "Error notifying %s channel: %s", notifier.channel_type, e, exc_info=True
        )
        return False
