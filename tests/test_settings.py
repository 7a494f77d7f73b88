from models import AlertFamily, DispatchTarget
from settings import Settings


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "zone-token")
    monkeypatch.setenv("TELEGRAM_CHAT_ID", "1001")
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN1", "cross-token")
    monkeypatch.setenv("TELEGRAM_CHAT_ID1", "2002")
    monkeypatch.setenv("WEBHOOK_SECRET", "s3")
    monkeypatch.setenv("TELEGRAM_TIMEOUT", "5")
    monkeypatch.setenv("TELEGRAM_API_BASE", "http://localhost:9000/")

    settings = Settings(_env_file=None)

    assert settings.target_for(AlertFamily.ZONE) == DispatchTarget(token="zone-token", chat_id="1001")
    assert settings.target_for(AlertFamily.CROSS) == DispatchTarget(token="cross-token", chat_id="2002")
    assert settings.allowed_secrets == ["s3"]
    assert settings.telegram_timeout == 5.0
    assert settings.telegram_api_base == "http://localhost:9000"


def test_empty_environment_values_are_unset(monkeypatch):
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "")
    monkeypatch.setenv("TELEGRAM_API_BASE", "")
    monkeypatch.setenv("TELEGRAM_TIMEOUT", "")

    settings = Settings(_env_file=None)

    assert settings.telegram_bot_token is None
    assert settings.telegram_api_base == "https://api.telegram.org"
    assert settings.telegram_timeout is None


def test_reads_dotenv_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("TELEGRAM_BOT_TOKEN1=from-file\nWEBHOOK_SECRETS=x,y\n", encoding="utf-8")

    settings = Settings(_env_file=env_file)

    assert settings.telegram_bot_token1 == "from-file"
    assert settings.allowed_secrets == ["x", "y"]


def test_allowed_secrets_merge_and_dedupe():
    settings = Settings(_env_file=None, webhook_secrets=" a, b ,,a", webhook_secret="b")
    assert settings.allowed_secrets == ["a", "b"]

    settings = Settings(_env_file=None, webhook_secrets="a", webhook_secret="c")
    assert settings.allowed_secrets == ["a", "c"]


def test_allowed_secrets_empty():
    assert Settings(_env_file=None).allowed_secrets == []
    assert Settings(_env_file=None, webhook_secrets=" , ").allowed_secrets == []


def test_missing_for_zone():
    settings = Settings(_env_file=None, telegram_bot_token1="t", telegram_chat_id1="c")
    assert settings.missing_for(AlertFamily.ZONE) == ["TELEGRAM_BOT_TOKEN", "TELEGRAM_CHAT_ID"]
    assert settings.missing_for(AlertFamily.CROSS) == []


def test_missing_for_cross():
    settings = Settings(_env_file=None, telegram_bot_token="t", telegram_chat_id="c", telegram_chat_id1="c1")
    assert settings.missing_for(AlertFamily.CROSS) == ["TELEGRAM_BOT_TOKEN1"]
