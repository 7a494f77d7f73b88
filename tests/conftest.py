import pytest
from fastapi.testclient import TestClient

from main import create_app
from settings import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in Settings.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        telegram_bot_token="zone-token",
        telegram_chat_id="1001",
        telegram_bot_token1="cross-token",
        telegram_chat_id1="2002",
        webhook_secrets="a,b",
    )


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))


@pytest.fixture
def zone_payload():
    return {
        "eventType": "breakout",
        "symbol": "EURUSD",
        "rangeHigh": "1.1",
        "rangeLow": "1.05",
        "reason": "price exited range",
    }


@pytest.fixture
def cross_payload():
    return {
        "eventType": "CROSS_UP",
        "symbol": "XAUUSD",
        "value": 1.23456,
        "threshold": 1.2,
    }
