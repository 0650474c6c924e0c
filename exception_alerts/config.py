from typing import Literal, Optional

from pydantic_settings import BaseSettings

from exception_alerts.schemas import DEFAULT_BACKTRACE_LINES, DEFAULT_TIMEOUT


class Settings(BaseSettings):
    # Slack incoming webhook
    slack_webhook_url: str = ""
    slack_channel: str = ""
    slack_username: str = ""

    # Telegram bot
    telegram_token: str = ""
    telegram_chat_id: str = ""
    telegram_render_mode: Literal["MarkdownV2", "Markdown"] = "MarkdownV2"

    # Shared message options
    backtrace_lines: int = DEFAULT_BACKTRACE_LINES
    http_timeout: float = DEFAULT_TIMEOUT
    hostname: Optional[str] = None

    model_config = {"env_prefix": "EXCEPTION_ALERTS_", "env_file": ".env", "extra": "ignore"}

    def shared_options(self) -> dict:
        options = {"backtrace_lines": self.backtrace_lines, "timeout": self.http_timeout}
        if self.hostname:
            options["hostname"] = self.hostname
        return options

    def slack_options(self) -> Optional[dict]:
        """Options for a Slack notifier, or None if nothing Slack-related is set."""
        if not (self.slack_webhook_url or self.slack_channel or self.slack_username):
            return None
        options = {"webhook_url": self.slack_webhook_url, **self.shared_options()}
        if self.slack_channel:
            options["channel"] = self.slack_channel
        if self.slack_username:
            options["username"] = self.slack_username
        return options

    def telegram_options(self) -> Optional[dict]:
        """Options for a Telegram notifier, or None if nothing Telegram-related is set."""
        if not (self.telegram_token or self.telegram_chat_id):
            return None
        return {
            "token": self.telegram_token,
            "chat_id": self.telegram_chat_id,
            "render_mode": self.telegram_render_mode,
            **self.shared_options(),
        }


settings = Settings()
