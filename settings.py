from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from models import AlertFamily, DispatchTarget

TELEGRAM_API_BASE = "https://api.telegram.org"


class Settings(BaseSettings):
    """Relay configuration, built once at startup and handed to the app.

    Read from the environment and a .env file, variable names are the
    upper-case field names (TELEGRAM_BOT_TOKEN, WEBHOOK_SECRETS...).
    """

    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    # Zone bot
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None
    # Threshold / cross bot
    telegram_bot_token1: Optional[str] = None
    telegram_chat_id1: Optional[str] = None

    webhook_secret: Optional[str] = None
    webhook_secrets: Optional[str] = None  # comma-separated

    telegram_api_base: str = TELEGRAM_API_BASE
    telegram_timeout: Optional[float] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @field_validator("telegram_api_base", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    @property
    def allowed_secrets(self) -> list[str]:
        secrets = []
        if self.webhook_secrets:
            for s in self.webhook_secrets.split(","):
                s = s.strip()
                if s and s not in secrets:
                    secrets.append(s)
        if self.webhook_secret and self.webhook_secret not in secrets:
            secrets.append(self.webhook_secret)
        return secrets

    def missing_for(self, family: AlertFamily) -> list[str]:
        """Names of the environment variables the family's target still needs."""
        suffix = "1" if family is AlertFamily.CROSS else ""
        token, chat_id = self._target_values(family)
        missing = []
        if not token:
            missing.append(f"TELEGRAM_BOT_TOKEN{suffix}")
        if not chat_id:
            missing.append(f"TELEGRAM_CHAT_ID{suffix}")
        return missing

    def target_for(self, family: AlertFamily) -> DispatchTarget:
        token, chat_id = self._target_values(family)
        return DispatchTarget(token=token, chat_id=chat_id)

    def _target_values(self, family):
        if family is AlertFamily.CROSS:
            return self.telegram_bot_token1, self.telegram_chat_id1
        return self.telegram_bot_token, self.telegram_chat_id
