"""Base class shared by every channel notifier."""

import logging
import socket
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Union

import httpx

from exception_alerts.channels import (
    ChannelPayload,
    ExceptionInfo,
    NotificationContext,
    NotificationOptions,
)
from exception_alerts.channels.backtrace import BacktraceCleaner
from exception_alerts.channels.context import extract
from exception_alerts.channels.redact import redact
from exception_alerts.channels.validate import InvalidConfig, parse_channel_config
from exception_alerts.schemas import ChannelConfig

logger = logging.getLogger(__name__)

ExceptionLike = Union[BaseException, ExceptionInfo]
OptionsLike = Union[None, Mapping[str, Any], NotificationOptions]


class ChannelNotifier(ABC):
    """
    One configured connection to an external channel.

    The enabled/disabled decision is made once, in ``__init__``. A disabled
    notifier never touches the network and ``notify`` returns ``False``.
    """

    @property
    @abstractmethod
    def channel_type(self) -> str:
        ...

    def __init__(
        self,
        options: Optional[Mapping[str, Any]] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        backtrace_cleaner: Optional[BacktraceCleaner] = None,
    ):
        self.config: Optional[ChannelConfig] = None
        self.disabled_reason: Optional[str] = None
        self._http_client = http_client
        self._cleaner = backtrace_cleaner or BacktraceCleaner()

        try:
            parsed = parse_channel_config(self.channel_type, options or {})
            if not isinstance(parsed, InvalidConfig):
                self.prepare(parsed)
        except Exception as e:
            parsed = InvalidConfig(f"{type(e).__name__}: {e}")

        if isinstance(parsed, InvalidConfig):
            self.disabled_reason = parsed.reason
            logger.warning("%s notifier disabled: %s", self.channel_type, parsed.reason)
        else:
            self.config = parsed

    @property
    def enabled(self) -> bool:
        return self.config is not None

    def prepare(self, config: ChannelConfig) -> None:
        """Hook for channel-specific setup; raising here disables the notifier."""

    @abstractmethod
    def format(self, ctx: NotificationContext, options: NotificationOptions) -> ChannelPayload:
        """Render *ctx* into this channel's outbound request."""

    def delivery_problem(self, response: httpx.Response) -> Optional[str]:
        """Describe why *response* means the message was not delivered, if it does."""
        if response.status_code >= 400:
            return f"status {response.status_code}: {response.text[:200]}"
        return None

    def build_context(self, exception: ExceptionLike, options: OptionsLike = None) -> NotificationContext:
        if self.config is None:
            raise RuntimeError(f"{self.channel_type} notifier is disabled: {self.disabled_reason}")

        info = ExceptionInfo.coerce(exception)
        opts = NotificationOptions.coerce(options)

        headline, data = extract(info.class_name, opts)
        predicate = opts.ignore_data_if or self.config.ignore_data_if
        backtrace = self._cleaner.clean(info) if info.backtrace is not None else None

        return NotificationContext(
            headline=headline,
            message=info.message,
            hostname=self.config.hostname or socket.gethostname(),
            data=redact(data, predicate),
            backtrace=backtrace,
        )

    def build_payload(self, exception: ExceptionLike, options: OptionsLike = None) -> ChannelPayload:
        opts = NotificationOptions.coerce(options)
        return self.format(self.build_context(exception, opts), opts)

    async def notify(self, exception: ExceptionLike, options: OptionsLike = None) -> bool:
        """
        Format and deliver one alert.

        Returns True when the channel accepted the message. Delivery failures
        are logged and reported as False; malformed input propagates.
        """
        if not self.enabled:
            return False

        payload = self.build_payload(exception, options)
        return await self._send(payload)

    async def _send(self, payload: ChannelPayload) -> bool:
        try:
            if self._http_client is not None:
                response = await self._request(self._http_client, payload)
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                    response = await self._request(client, payload)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(
                "Failed to send %s notification: %s", self.channel_type, e, exc_info=True
            )
            return False

        problem = self.delivery_problem(response)
        if problem:
            logger.warning("%s notification rejected, %s", self.channel_type, problem)
            return False

        logger.debug("Successfully sent %s notification", self.channel_type)
        return True

    @staticmethod
    async def _request(client: httpx.AsyncClient, payload: ChannelPayload) -> httpx.Response:
        return await client.request(
            method=payload.method,
            url=payload.url,
            headers=payload.headers,
            content=payload.body,
        )

    def __repr__(self) -> str:
        state = "enabled" if self.enabled else f"disabled ({self.disabled_reason})"
        return f"<{type(self).__name__} {state}>"
