"""Config validation for notification channels."""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union
from urllib.parse import urlparse

from pydantic import ValidationError

from exception_alerts.schemas import ChannelConfig, SlackConfig, TelegramConfig

VALID_CHANNEL_TYPES = {"slack", "telegram"}

_CONFIG_MODELS: dict[str, type[ChannelConfig]] = {
    "slack": SlackConfig,
    "telegram": TelegramConfig,
}


@dataclass(frozen=True)
class InvalidConfig:
    """Why a channel could not be configured."""
    reason: str


ParsedConfig = Union[SlackConfig, TelegramConfig, InvalidConfig]


def validate_channel_config(channel_type: str, config: Mapping[str, Any]) -> Optional[str]:
    """
    Validate channel config for a given type.
    Returns None if valid, or an error message string if invalid.
    """
    validators = {
        "slack": _validate_slack,
        "telegram": _validate_telegram,
    }
    validator = validators.get(channel_type)
    if not validator:
        return f"Unknown channel type: {channel_type}"
    return validator(config)


def parse_channel_config(channel_type: str, config: Mapping[str, Any]) -> ParsedConfig:
    """Build the typed config for *channel_type*, or an ``InvalidConfig``."""
    err = validate_channel_config(channel_type, config)
    if err:
        return InvalidConfig(err)
    try:
        return _CONFIG_MODELS[channel_type].model_validate(dict(config))
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or channel_type
        return InvalidConfig(f"{location}: {first['msg']}")


# --- Internal validators ---


def _require_fields(config: Mapping[str, Any], fields: list[str]) -> Optional[str]:
    for field in fields:
        if not config.get(field):
            return f"Missing required field: {field}"
    return None


def _validate_url(value, field_name: str) -> Optional[str]:
    if not isinstance(value, str) or not value:
        return f"Missing required field: {field_name}"
    try:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https"):
            return f"{field_name} must use http or https protocol"
        if not parsed.netloc:
            return f"{field_name} is not a valid URL"
    except ValueError:
        return f"{field_name} is not a valid URL"
    return None


def _validate_slack(config: Mapping[str, Any]) -> Optional[str]:
    return _validate_url(config.get("webhook_url"), "webhook_url")


def _validate_telegram(config: Mapping[str, Any]) -> Optional[str]:
    err = _require_fields(config, ["token", "chat_id"])
    if err:
        return err
    api_base_url = config.get("api_base_url")
    if api_base_url is not None:
        return _validate_url(api_base_url, "api_base_url")
    return None
