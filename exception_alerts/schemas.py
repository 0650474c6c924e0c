"""Pydantic schemas for per-channel notifier configuration."""

from typing import Any, Callable, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_BACKTRACE_LINES = 10
DEFAULT_TIMEOUT = 10.0
DEFAULT_TELEGRAM_API = "https://api.telegram.org"


class ChannelConfig(BaseModel):
    """Options shared by every channel."""

    backtrace_lines: int = Field(DEFAULT_BACKTRACE_LINES, ge=0, description="Max frames per message")
    additional_fields: list[dict] = Field(
        default_factory=list, description="Extra {title, value} entries appended to every message"
    )
    ignore_data_if: Optional[Callable[[Any, Any], bool]] = Field(
        None, description="Predicate (key, value) -> bool; matching data entries are dropped"
    )
    additional_parameters: dict = Field(
        default_factory=dict, description="Merged into the outbound API payload"
    )
    hostname: Optional[str] = Field(None, description="Overrides the local host name")
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="HTTP timeout in seconds")

    model_config = {"extra": "ignore", "frozen": True}

    @field_validator("additional_fields")
    @classmethod
    def _fields_have_title(cls, value: list[dict]) -> list[dict]:
        for item in value:
            if "title" not in item or "value" not in item:
                raise ValueError("additional_fields entries need 'title' and 'value'")
        return value


class SlackConfig(ChannelConfig):
    webhook_url: str
    channel: Optional[str] = None
    username: Optional[str] = None
    icon_emoji: Optional[str] = None
    icon_url: Optional[str] = None
    color: str = "danger"

    @model_validator(mode="before")
    @classmethod
    def _take_color(cls, data: Any) -> Any:
        # color is rendered on the attachment, not sent as a top-level parameter
        if isinstance(data, dict) and isinstance(data.get("additional_parameters"), dict):
            params = dict(data["additional_parameters"])
            color = params.pop("color", None)
            data = {**data, "additional_parameters": params}
            if color is not None:
                data["color"] = color
        return data


class TelegramConfig(ChannelConfig):
    token: str = Field(..., min_length=1)
    chat_id: Union[int, str]
    api_base_url: str = DEFAULT_TELEGRAM_API
    render_mode: Literal["MarkdownV2", "Markdown"] = "MarkdownV2"
    username: Optional[str] = None
    icon_emoji: Optional[str] = None
    icon_url: Optional[str] = None

    @property
    def send_message_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}/bot{self.token}/sendMessage"
