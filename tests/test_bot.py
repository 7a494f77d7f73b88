from unittest.mock import Mock, patch

import pytest
import requests

from bot import send_message, send_url
from models import DispatchTarget


@pytest.fixture
def target():
    return DispatchTarget(token="123:abc", chat_id="-1001")


def test_send_url():
    assert send_url("123:abc") == "https://api.telegram.org/bot123:abc/sendMessage"
    assert send_url("t", "http://localhost:9000") == "http://localhost:9000/bott/sendMessage"


def test_send_message_delivered(target):
    with patch("bot.requests.post", return_value=Mock(status_code=200, text='{"ok":true}')) as post:
        result = send_message("hello", target)

    assert result.delivered
    assert result.error is None
    post.assert_called_once_with(
        "https://api.telegram.org/bot123:abc/sendMessage",
        json={"chat_id": "-1001", "text": "hello"},
        timeout=None,
    )


def test_send_message_failed_keeps_provider_body(target):
    body = '{"ok":false,"error_code":400,"description":"Bad Request: chat not found"}'
    with patch("bot.requests.post", return_value=Mock(status_code=400, text=body)) as post:
        result = send_message("hello", target, timeout=5)

    assert not result.delivered
    assert result.status_code == 400
    assert result.error == body
    assert post.call_count == 1
    assert post.call_args.kwargs["timeout"] == 5


def test_send_message_network_error_propagates(target):
    with patch("bot.requests.post", side_effect=requests.ConnectionError("connection refused")):
        with pytest.raises(requests.ConnectionError):
            send_message("hello", target)
