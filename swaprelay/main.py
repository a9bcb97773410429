# swaprelay/main.py
from __future__ import annotations

import logging

from fastapi import BackgroundTasks, Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from swaprelay.bot.swap_alert_bot import get_bot, initialize_bot, process_webhook
from swaprelay.core.config import settings
from swaprelay.database import init_db
from swaprelay.monitoring import run_selftest
from swaprelay.notifications.chat import TelegramChatSender
from swaprelay.relay import Relay, get_relay

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

WEBHOOK_ACK = "Webhook received!"

app = FastAPI(title="Swap Relay")


@app.on_event("startup")
async def startup_event():
    # DB first, then the bot (the bot's commands write to the DB)
    try:
        init_db()
        logger.info("DB initialized")
    except Exception:
        logger.exception("DB init failed (startup). Continuing to boot app.")

    relay = get_relay()
    try:
        await initialize_bot(relay.manager)
        bot = get_bot()
        if bot.application:
            relay.dispatcher.sender = TelegramChatSender(bot.application.bot)
        logger.info("Bot initialized")
    except Exception:
        logger.exception("Bot init failed (startup). Continuing to boot app.")


@app.on_event("shutdown")
async def shutdown_event():
    await get_bot().shutdown()
    await get_relay().close()


@app.get("/")
async def root():
    return {"message": "Swap Relay is running"}


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/ready")
async def ready(relay: Relay = Depends(get_relay)):
    result = await run_selftest(relay, quick=True)
    return {"status": result.get("status", "unknown"), "checks": result.get("checks", [])}


@app.get("/selftest")
async def selftest(relay: Relay = Depends(get_relay)):
    return await run_selftest(relay, quick=False)


async def _process_batch(relay: Relay, payload) -> None:
    try:
        await relay.process_webhook_batch(payload)
    except Exception:
        logger.exception("Webhook batch processing failed")


@app.post("/webhook")
async def helius_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    relay: Relay = Depends(get_relay),
):
    """
    Helius only needs the acknowledgment; processing runs after the response
    is sent and never changes the status code.
    """
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Helius webhook received invalid JSON")
        return PlainTextResponse(WEBHOOK_ACK, status_code=status.HTTP_200_OK)

    logger.debug("Received webhook: %s", payload)
    background_tasks.add_task(_process_batch, relay, payload)
    return PlainTextResponse(WEBHOOK_ACK, status_code=status.HTTP_200_OK)


@app.post("/webhook/telegram")
async def telegram_webhook(request: Request):
    """
    Telegram expects fast 200 responses.
    Even if we hit an internal exception, we return 200 to avoid retries storms.
    """
    try:
        update_dict = await request.json()
    except ValueError:
        logger.warning("Telegram webhook received invalid JSON")
        return JSONResponse({"ok": False, "error": "invalid_json"}, status_code=status.HTTP_200_OK)

    try:
        await process_webhook(update_dict)
        return JSONResponse({"ok": True}, status_code=status.HTTP_200_OK)
    except Exception:
        logger.exception("Telegram webhook processing failed")
        return JSONResponse({"ok": False}, status_code=status.HTTP_200_OK)
