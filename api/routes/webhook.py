"""
Bot webhook endpoint.
Receives platform requests and routes them through a fresh dispatch controller.
"""

from fastapi import APIRouter, HTTPException
from typing import Any, Callable
import logging

from config import settings
from core.bots import WelcomeBot
from core.dispatch import DispatchController
from core.platform import Request
from models.schemas import WebhookPayload

logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.WEBHOOK_PREFIX, tags=["Bot"])

BotFactory = Callable[[Request], DispatchController]

# One controller per request; handlers are registered by the factory
_bot_factory: BotFactory = WelcomeBot


def set_bot_factory(factory: BotFactory):
    """Install the bot class (or factory) that answers webhook requests"""
    global _bot_factory
    _bot_factory = factory


def get_bot_factory() -> BotFactory:
    return _bot_factory


@router.post("/webhook")
def handle_webhook(payload: WebhookPayload) -> Any:
    """
    Handle one platform request.

    Returns the built reply, or the raw handler result when
    EXPOSE_RAW_RESULT is enabled.
    """
    request = Request(payload)
    logger.info(
        f"Webhook request type={request.get_request_type()} "
        f"session={request.get_session_id()}"
    )

    bot = _bot_factory(request)
    try:
        return bot.run(build_response=not settings.EXPOSE_RAW_RESULT)
    except Exception as e:
        logger.error(f"Bot handler failed: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Bot handler failed")
