import logging

import requests

from models import DispatchResult, DispatchTarget
from settings import TELEGRAM_API_BASE

logger = logging.getLogger(__name__)


def send_url(token, api_base=TELEGRAM_API_BASE):
    return f"{api_base}/bot{token}/sendMessage"


def send_message(text: str, target: DispatchTarget, api_base=TELEGRAM_API_BASE, timeout=None) -> DispatchResult:
    """Post one message to a Telegram chat. Single attempt, no retry.

    Network errors are not caught here, the webhook reports them as server_error.
    """
    response = requests.post(
        send_url(target.token, api_base),
        json={"chat_id": target.chat_id, "text": text},
        timeout=timeout,
    )
    if not 200 <= response.status_code < 300:
        logger.error(f"Telegram request failed ({response.status_code}): {response.text}")
        return DispatchResult(delivered=False, status_code=response.status_code, error=response.text)

    logger.info(f"Telegram message delivered to chat {target.chat_id}")
    return DispatchResult(delivered=True, status_code=response.status_code)
