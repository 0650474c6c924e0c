"""Auto-detection of channel type from configuration."""

from typing import Any, Mapping, Optional

from exception_alerts.channels.validate import VALID_CHANNEL_TYPES

# Common typos -> correct type
_CHANNEL_SUGGESTIONS: dict[str, str] = {
    "slak": "slack",
    "sclack": "slack",
    "slack_webhook": "slack",
    "mattermost": "slack",
    "telegarm": "telegram",
    "telgram": "telegram",
    "tg": "telegram",
    "bot": "telegram",
}


def detect_channel_type(url: str) -> Optional[str]:
    """
    Detect the channel type from a URL.

    Returns:
        'slack', 'telegram', or None when the URL is not recognised
    """
    url_lower = url.lower()

    if "hooks.slack.com/" in url_lower:
        return "slack"

    if "api.telegram.org" in url_lower:
        return "telegram"

    return None


def detect_from_options(options: Mapping[str, Any]) -> Optional[str]:
    """Guess the channel type from the keys and URLs present in *options*."""
    if options.get("webhook_url"):
        return detect_channel_type(str(options["webhook_url"])) or "slack"
    if options.get("token") or options.get("chat_id"):
        return "telegram"
    return None


def suggest_channel_type(input_type: str) -> Optional[str]:
    """Return a suggestion if the input looks like a typo of a valid type."""
    if input_type in VALID_CHANNEL_TYPES:
        return None
    return _CHANNEL_SUGGESTIONS.get(input_type.lower())
