"""Format exceptions into chat alerts and deliver them to Slack and Telegram."""

from exception_alerts.channels import (
    ChannelPayload,
    ExceptionInfo,
    Headline,
    NotificationContext,
    NotificationOptions,
)
from exception_alerts.channels.backtrace import BacktraceCleaner
from exception_alerts.channels.base import ChannelNotifier
from exception_alerts.channels.dispatcher import dispatch_exception
from exception_alerts.channels.redact import redact
from exception_alerts.channels.slack import SlackNotifier
from exception_alerts.channels.telegram import TelegramNotifier
from exception_alerts.factory import create_notifier, get_notifiers, notify_exception

__version__ = "0.1.0"

__all__ = [
    "BacktraceCleaner",
    "ChannelNotifier",
    "ChannelPayload",
    "ExceptionInfo",
    "Headline",
    "NotificationContext",
    "NotificationOptions",
    "SlackNotifier",
    "TelegramNotifier",
    "create_notifier",
    "dispatch_exception",
    "get_notifiers",
    "notify_exception",
    "redact",
]
