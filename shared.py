import logging
import sys
from collections.abc import Mapping
from typing import Optional

SECRET_HEADER = "x-webhook-secret"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(level="INFO", log_file=None):
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8", mode="a"))
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, handlers=handlers)


class RelayError(Exception):
    """Terminal failure of a webhook request, rendered as {"ok": false, ...}."""

    def __init__(self, status_code: int, error: str, **fields):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.fields = fields

    def to_body(self):
        return {"ok": False, "error": self.error, **self.fields}


# Secret helpers
def get_header(headers: Mapping, name: str) -> Optional[str]:
    # Proxies and clients disagree on header casing
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def is_authorized(secret: Optional[str], allowed_secrets) -> bool:
    if not allowed_secrets or not secret:
        return False
    return secret in allowed_secrets


def check_secret(headers: Mapping, allowed_secrets):
    secret = get_header(headers, SECRET_HEADER)
    if not is_authorized(secret, allowed_secrets):
        logger.info("❌ Unauthorized request, invalid or missing secret.")
        raise RelayError(401, "unauthorized")
