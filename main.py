import json
import logging
import os
from typing import Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from alerts import classify_payload, format_message
from bot import send_message
from models import AlertPayload
from settings import Settings
from shared import RelayError, check_secret, setup_logging

logger = logging.getLogger(__name__)

# Every method reaches the handler so non-POST gets the JSON 405 body
WEBHOOK_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

router = APIRouter()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def reject_constant(name):
    raise ValueError(f"{name} is not valid JSON")


def parse_payload(body: bytes) -> AlertPayload:
    if not body:
        return AlertPayload()
    try:
        data = json.loads(body, parse_constant=reject_constant)
    except ValueError as e:
        logger.info(f"Error parsing JSON payload: {e}")
        raise RelayError(400, "invalid_json")
    if not isinstance(data, dict):
        logger.info(f"Payload is not a JSON object, using defaults: {data!r}")
        data = {}
    return AlertPayload.model_validate(data)


@router.get('/')
async def home():
    return {"message": "Running"}


@router.get('/health')
async def health():
    return {"status": "healthy"}


@router.api_route('/webhook', methods=WEBHOOK_METHODS)
async def webhook(request: Request, settings: Settings = Depends(get_settings)):
    logger.info(f"Received {request.method} {request.url.path}")
    if request.method != "POST":
        logger.info("Invalid HTTP method. Expected POST.")
        raise RelayError(405, "method_not_allowed")

    try:
        check_secret(request.headers, settings.allowed_secrets)
        payload = parse_payload(await request.body())
        logger.info(f"Parsed payload: {payload.model_dump(by_alias=True, exclude_unset=True)}")

        family = classify_payload(payload)
        missing = settings.missing_for(family)
        if missing:
            logger.error(f"Missing environment variables: {missing}")
            raise RelayError(500, "missing_env_vars", missing=missing, target=family.target_label)

        text = format_message(payload, family)
        logger.info(f"Prepared Telegram message: {text}")

        result = await run_in_threadpool(
            send_message,
            text,
            settings.target_for(family),
            settings.telegram_api_base,
            settings.telegram_timeout,
        )
        if not result.delivered:
            raise RelayError(500, "telegram_failed", details=result.error)
    except RelayError:
        raise
    except Exception as e:
        logger.exception(f"Server error: {e}")
        raise RelayError(500, "server_error", details=str(e))

    return {"ok": True, "type": family.bot_type, "telegram_target": family.telegram_target}


async def relay_error_handler(request: Request, exc: RelayError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Methods outside WEBHOOK_METHODS are refused by the router itself
    if exc.status_code == 405:
        return JSONResponse(
            status_code=405,
            content=RelayError(405, "method_not_allowed").to_body(),
            headers=exc.headers,
        )
    return await http_exception_handler(request, exc)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    if settings is None:
        settings = Settings()
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title="cTrader alert relay")
    app.state.settings = settings
    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
