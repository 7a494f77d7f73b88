# alerts.py
"""Classification and Telegram text formatting for cTrader alerts.

Two bots post to the relay. The zone bot reports the early-session range
(zone ready, breakout, re-entry...), the threshold bot reports a slow RSI
line crossing a level. Both share the same time block.
"""

import math
from decimal import ROUND_HALF_UP, Decimal

from models import AlertFamily, AlertPayload

MAX_MESSAGE_LENGTH = 3900  # Telegram hard limit is 4096
TRUNCATED_MARKER = "\n…(truncated)"

DEFAULT_SYMBOL = "UNKNOWN"
DEFAULT_EVENT_TYPE = "signal"
DEFAULT_SESSION = "00:00–04:00 UTC"
DEFAULT_LINE = "slow_line"
DEFAULT_TITLE = "📌 cTrader Alert"

CROSS_EVENTS = {"CROSS_UP", "CROSS_DOWN"}
CROSS_LINE = "slow_ma_of_rsi"

ZONE_TITLES = {
    "zoneReady": "🟦 ZONE READY",
    "breakout": "🚨 OUT OF ZONE",
    "entered": "🟩 ENTERED ZONE",
    "closeInside": "✅ CLOSE INSIDE",
    "test": "🔧 TEST",
}

CROSS_TITLES = {
    "CROSS_UP": "📈 THRESHOLD BREAK (UP)",
    "CROSS_DOWN": "📉 THRESHOLD BREAK (DOWN)",
}


def classify_payload(payload: AlertPayload) -> AlertFamily:
    if isinstance(payload.event_type, str) and payload.event_type in CROSS_EVENTS:
        return AlertFamily.CROSS
    if payload.has("threshold") and payload.has("value"):
        return AlertFamily.CROSS
    if payload.line == CROSS_LINE:
        return AlertFamily.CROSS
    return AlertFamily.ZONE


# Value helpers
def first_set(*values, default=""):
    """First value that is not None, else default. Empty strings count as set."""
    for value in values:
        if value is not None:
            return value
    return default


def is_truthy(value) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return False
    return value is not None and value is not False and value != 0 and value != ""


def int_to_float(value: int) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def number_text(number: float) -> str:
    """Shortest round-trip digits, plain notation for exponents in [-7, 21)."""
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number == 0:
        return "0"
    sign = "-" if number < 0 else ""
    parsed = Decimal(repr(abs(number))).normalize()
    digits = "".join(str(d) for d in parsed.as_tuple().digits)
    k = len(digits)
    n = parsed.as_tuple().exponent + k  # position of the decimal point

    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * -n + digits
    exponent = n - 1
    exp_text = f"e{'+' if exponent > 0 else '-'}{abs(exponent)}"
    if k == 1:
        return sign + digits + exp_text
    return sign + digits[0] + "." + digits[1:] + exp_text


def to_text(value) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return number_text(int_to_float(value))
    if isinstance(value, float):
        return number_text(value)
    if isinstance(value, list):
        # Arrays join their items with commas, null items are blank
        return ",".join("" if item is None else to_text(item) for item in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def to_number(value) -> float:
    """Numeric coercion with the loose rules the bots rely on.

    null, empty and blank strings are 0, booleans are 1/0, numeric strings
    (including 0x/0o/0b literals) are parsed, arrays go through their text
    form, anything else is NaN.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, int):
        return int_to_float(value)
    if isinstance(value, float):
        return value
    if isinstance(value, list):
        return to_number(to_text(value))
    if not isinstance(value, str):
        return math.nan
    text = value.strip()
    if text == "":
        return 0.0
    if "_" in text:
        return math.nan
    if text[:2].lower() in ("0x", "0o", "0b"):
        try:
            return int_to_float(int(text, 0))
        except ValueError:
            return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def format_fixed(number: float, places: int = 3) -> str:
    if abs(number) >= 1e21:
        return to_text(number)
    if number == 0:
        number = 0.0  # no "-0.000" for negative zero
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(number).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{rounded:f}"


def format_reading(payload: AlertPayload, name: str) -> str:
    """Render value/threshold with 3 decimals, or the raw value if not numeric."""
    if not payload.has(name):
        return ""
    raw = getattr(payload, name)
    number = to_number(raw)
    if math.isfinite(number):
        return format_fixed(number)
    return to_text(raw)


# Formatting
def build_time_block(payload: AlertPayload) -> str:
    ny_date = first_set(payload.ny_date, payload.date_ny)
    ny_time = first_set(payload.signal_time_ny, payload.event_time_ny)
    if is_truthy(ny_date) or is_truthy(ny_time):
        label, date, time = "NY", ny_date, ny_time
    else:
        label = "UTC"
        date = first_set(payload.utc_date)
        time = first_set(payload.signal_time_utc, payload.event_time_utc, payload.server_time_utc)

    block = f"Date({label}): {to_text(date)}" if is_truthy(date) else ""
    if is_truthy(time):
        block += f"\nTime({label}): {to_text(time)}"
    return block


def format_zone_message(payload: AlertPayload, time_block: str) -> str:
    event_type = first_set(payload.event_type, default=DEFAULT_EVENT_TYPE)
    title = ZONE_TITLES.get(event_type, DEFAULT_TITLE) if isinstance(event_type, str) else DEFAULT_TITLE
    symbol = first_set(payload.symbol, default=DEFAULT_SYMBOL)
    range_high = first_set(payload.range_high)
    range_low = first_set(payload.range_low)
    mid = first_set(payload.mid)
    session = first_set(payload.session, default=DEFAULT_SESSION)
    reason = first_set(payload.reason)
    extra = first_set(payload.extra)

    zone_block = ""
    if is_truthy(range_high) and is_truthy(range_low):
        zone_block = f"Zone ({to_text(session)})\nH: {to_text(range_high)}\nL: {to_text(range_low)}"
        if is_truthy(mid):
            zone_block += f"\nMID: {to_text(mid)}"

    text = f"{title}\nSymbol: {to_text(symbol)}\n{time_block}\n\n"
    if zone_block:
        text += zone_block + "\n\n"
    text += f"Reason: {to_text(reason)}"
    if is_truthy(extra):
        text += f"\nExtra: {to_text(extra)}"
    return text


def format_cross_message(payload: AlertPayload, time_block: str) -> str:
    event_type = first_set(payload.event_type, default=DEFAULT_EVENT_TYPE)
    title = CROSS_TITLES.get(event_type, DEFAULT_TITLE) if isinstance(event_type, str) else DEFAULT_TITLE
    symbol = first_set(payload.symbol, default=DEFAULT_SYMBOL)
    timeframe = first_set(payload.timeframe, payload.tf)
    line = first_set(payload.line, default=DEFAULT_LINE)
    price = first_set(payload.price, payload.bid, payload.ask)

    text = f"{title}\nSymbol: {to_text(symbol)}"
    if is_truthy(timeframe):
        text += f" ({to_text(timeframe)})"
    text += "\n"
    if time_block:
        text += time_block + "\n"
    text += (
        f"\nLine: {to_text(line)}"
        f"\nValue: {format_reading(payload, 'value')}"
        f"\nThreshold: {format_reading(payload, 'threshold')}"
    )
    if price != "":
        text += f"\nPrice: {to_text(price)}"
    return text


def utf16_length(text: str) -> int:
    """Length as Telegram counts it, astral characters (emoji) take two units."""
    return len(text.encode("utf-16-le")) // 2


def truncate_message(text: str, limit: int = MAX_MESSAGE_LENGTH) -> str:
    if utf16_length(text) <= limit:
        return text
    units = 0
    for i, char in enumerate(text):
        units += 2 if ord(char) > 0xFFFF else 1
        if units > limit:
            # Never split a surrogate pair
            return text[:i] + TRUNCATED_MARKER
    return text


def format_message(payload: AlertPayload, family: AlertFamily) -> str:
    time_block = build_time_block(payload)
    if family is AlertFamily.CROSS:
        text = format_cross_message(payload, time_block)
    else:
        text = format_zone_message(payload, time_block)
    return truncate_message(text)
