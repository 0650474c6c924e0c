"""Base types for exception notification channel adapters."""

import traceback
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Union

DataPredicate = Callable[[Any, Any], bool]


@dataclass
class ChannelPayload:
    """Represents the HTTP request payload for a notification channel."""
    method: str
    url: str
    headers: dict[str, str]
    body: str  # JSON string


@dataclass(frozen=True)
class ExceptionInfo:
    """
    What the pipeline needs to know about an exception.

    ``backtrace`` is ``None`` when the exception was never raised, which is
    distinct from an empty trace.
    """
    class_name: str
    message: str
    backtrace: Optional[tuple[str, ...]] = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ExceptionInfo":
        backtrace = None
        if exc.__traceback__ is not None:
            # Innermost frame first so a prefix keeps the failure site.
            frames = reversed(traceback.extract_tb(exc.__traceback__))
            backtrace = tuple(
                f"{frame.filename}:{frame.lineno}:in `{frame.name}'" for frame in frames
            )
        return cls(class_name=type(exc).__name__, message=str(exc), backtrace=backtrace)

    @classmethod
    def coerce(cls, exception: Union[BaseException, "ExceptionInfo"]) -> "ExceptionInfo":
        if isinstance(exception, cls):
            return exception
        return cls.from_exception(exception)


_OPTION_FIELDS = ("env", "data", "accumulated_errors_count", "ignore_data_if")


@dataclass
class NotificationOptions:
    """Per-call data supplied by whoever caught the exception."""
    env: Optional[Mapping[str, Any]] = None
    data: dict = field(default_factory=dict)
    accumulated_errors_count: int = 0
    ignore_data_if: Optional[DataPredicate] = None
    overrides: dict = field(default_factory=dict)

    @classmethod
    def coerce(
        cls, options: Union[None, Mapping[str, Any], "NotificationOptions"]
    ) -> "NotificationOptions":
        """
        Accept ``None``, an instance, or a plain mapping.

        Mapping keys that are not option fields (``channel``, ``username``...)
        are collected as channel-specific overrides.
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options

        known = {k: v for k, v in options.items() if k in _OPTION_FIELDS}
        overrides = dict(options.get("overrides") or {})
        overrides.update(
            (k, v) for k, v in options.items() if k not in _OPTION_FIELDS and k != "overrides"
        )
        return cls(
            env=known.get("env"),
            data=dict(known.get("data") or {}),
            accumulated_errors_count=int(known.get("accumulated_errors_count") or 0),
            ignore_data_if=known.get("ignore_data_if"),
            overrides=overrides,
        )


@dataclass(frozen=True)
class Headline:
    """Structured first line of an alert; ``str()`` gives the plain text."""
    count_word: str
    class_name: str
    request: Optional[str] = None
    handler: Optional[str] = None

    def render(self, escape: Optional[Callable[[str], str]] = None) -> str:
        """Render the headline, escaping only the dynamic parts."""
        esc = escape or (lambda s: s)
        parts = [f"{self.count_word} `{esc(self.class_name)}`"]
        if self.request is None:
            parts.append("occurred in background")
        else:
            parts.append(f"occurred while `{esc(self.request)}`")
            if self.handler is not None:
                parts.append(f"was processed by `{esc(self.handler)}`")
        return " ".join(parts)

    def __str__(self) -> str:
        return self.render()


@dataclass
class NotificationContext:
    """Channel-agnostic summary of one exception occurrence."""
    headline: Headline
    message: str
    hostname: str
    data: dict = field(default_factory=dict)
    backtrace: Optional[list[str]] = None
