from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class AlertFamily(str, Enum):
    ZONE = "zone"
    CROSS = "cross"

    @property
    def bot_type(self):
        return "cross_bot" if self is AlertFamily.CROSS else "zone_bot"

    @property
    def target_label(self):
        # Label reported with missing_env_vars
        return "threshold_bot" if self is AlertFamily.CROSS else "zone_bot"

    @property
    def telegram_target(self):
        return "bot1" if self is AlertFamily.CROSS else "bot0"


class AlertPayload(BaseModel):
    """Alert sent by a cTrader bot.

    Every field is optional and loosely typed, the bots send numbers and
    strings interchangeably. Only the camelCase keys the bots send fill the
    fields, anything else is kept as an extra. Defaults are applied when the
    message is formatted, see alerts.py.
    """

    model_config = ConfigDict(extra="allow")

    symbol: Optional[Any] = None
    event_type: Optional[Any] = Field(default=None, alias="eventType")

    # Time fields
    utc_date: Optional[Any] = Field(default=None, alias="utcDate")
    signal_time_utc: Optional[Any] = Field(default=None, alias="signalTimeUtc")
    event_time_utc: Optional[Any] = Field(default=None, alias="eventTimeUtc")
    server_time_utc: Optional[Any] = Field(default=None, alias="serverTimeUtc")
    ny_date: Optional[Any] = Field(default=None, alias="nyDate")
    date_ny: Optional[Any] = Field(default=None, alias="dateNY")
    signal_time_ny: Optional[Any] = Field(default=None, alias="signalTimeNY")
    event_time_ny: Optional[Any] = Field(default=None, alias="eventTimeNY")

    # Zone bot
    range_high: Optional[Any] = Field(default=None, alias="rangeHigh")
    range_low: Optional[Any] = Field(default=None, alias="rangeLow")
    mid: Optional[Any] = None
    session: Optional[Any] = None
    reason: Optional[Any] = None
    extra: Optional[Any] = None

    # Cross (threshold) bot
    timeframe: Optional[Any] = None
    tf: Optional[Any] = None
    line: Optional[Any] = None
    value: Optional[Any] = None
    threshold: Optional[Any] = None
    price: Optional[Any] = None
    bid: Optional[Any] = None
    ask: Optional[Any] = None

    def has(self, name: str) -> bool:
        """True if the key was sent, even with a null value."""
        return name in self.model_fields_set


class DispatchTarget(BaseModel):
    token: str
    chat_id: str


class DispatchResult(BaseModel):
    delivered: bool
    status_code: int
    error: Optional[str] = None
