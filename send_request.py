import json
import os
import sys

import requests
from dotenv import load_dotenv

# Simulate a cTrader bot posting an alert to the relay
# Usage: python send_request.py [zone|cross] [url]

DEFAULT_URL = "http://127.0.0.1:8000/webhook"

SAMPLES = {
    "zone": {
        "eventType": "breakout",
        "symbol": "EURUSD",
        "rangeHigh": "1.0950",
        "rangeLow": "1.0900",
        "mid": "1.0925",
        "session": "00:00–04:00 UTC",
        "nyDate": "2024-01-01",
        "signalTimeNY": "09:30",
        "reason": "price exited range",
    },
    "cross": {
        "eventType": "CROSS_UP",
        "symbol": "XAUUSD",
        "timeframe": "m15",
        "line": "slow_ma_of_rsi",
        "value": 50.4321,
        "threshold": 50,
        "price": 2034.55,
        "utcDate": "2024-01-01",
        "signalTimeUtc": "14:30",
    },
}


def build_sample(kind="zone"):
    if kind not in SAMPLES:
        raise ValueError(f"Unknown sample '{kind}', expected one of {sorted(SAMPLES)}")
    return dict(SAMPLES[kind])


def send_sample(kind="zone", url=DEFAULT_URL, secret=None):
    headers = {"Content-Type": "application/json"}
    if secret:
        headers["x-webhook-secret"] = secret
    return requests.post(url, headers=headers, data=json.dumps(build_sample(kind)))


if __name__ == "__main__":
    load_dotenv()
    kind = sys.argv[1] if len(sys.argv) > 1 else "zone"
    url = sys.argv[2] if len(sys.argv) > 2 else DEFAULT_URL
    secret = os.getenv("WEBHOOK_SECRET") or (os.getenv("WEBHOOK_SECRETS") or "").split(",")[0].strip()
    response = send_sample(kind, url, secret)
    print(response.status_code, response.text)
