"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import BackgroundTasks, FastAPI, Request

from visit_tracker.api.telegram_models import (
    TelegramMessage,
    TelegramPhotoSize,
    TelegramUpdate,
)
from visit_tracker.app_logging import configure_logging
from visit_tracker.containers import AppContainer
from visit_tracker.domain.geo import Coordinate
from visit_tracker.domain.models import PhotoSubmission, Sender
from visit_tracker.services.visits import FlowReply
from visit_tracker.telegram_commands import (
    CHAT_MENU_BUTTON,
    BotCommand,
    parse_command,
    telegram_commands,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.telegram_client.set_my_commands(
                telegram_commands()
            )
            await app.state.container.telegram_client.set_chat_menu_button(
                CHAT_MENU_BUTTON
            )
        except Exception:
            logger.exception("Failed to sync Telegram bot commands")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/telegram/webhook")
    async def telegram_webhook(
        update: TelegramUpdate, request: Request, background_tasks: BackgroundTasks
    ) -> dict[str, str]:
        """Handle Telegram webhook updates."""
        state_container: AppContainer = request.app.state.container
        if state_container.degraded:
            logger.info(
                "Ignoring update without a bot token",
                extra={"update_id": update.update_id},
            )
            return {"status": "ok"}
        message = update.message
        if message is None or message.from_user is None:
            return {"status": "ok"}

        sender = Sender(
            telegram_id=message.from_user.id,
            first_name=message.from_user.first_name,
            username=message.from_user.username,
        )
        parsed = parse_command(message.text)
        if parsed and parsed.command is BotCommand.REPORT:
            background_tasks.add_task(
                state_container.report_command_handler.handle,
                requester_id=sender.telegram_id,
                chat_id=message.chat.id,
                range_arg=parsed.first_arg or "day",
            )
            return {"status": "ok"}

        step = parsed.command.value.command if parsed else _event_kind(message)
        try:
            reply = await _dispatch(state_container, sender, message)
        except Exception as exc:
            logger.exception(
                "Failed to handle update",
                extra={
                    "telegram_id": sender.telegram_id,
                    "step": step,
                    "update_id": update.update_id,
                },
            )
            reply = FlowReply(
                text=_format_error(
                    state_container, exc, "Something went wrong, please try later."
                )
            )
        if reply is None:
            return {"status": "ok"}

        await _deliver(state_container, message.chat.id, reply, step)
        if reply.broadcast:
            admin_ids = state_container.participant_service.admin_ids
            for chat_id in sorted({message.chat.id, *admin_ids}):
                await _deliver(
                    state_container, chat_id, FlowReply(text=reply.broadcast), step
                )
        return {"status": "ok"}

    return app


async def _dispatch(
    container: AppContainer, sender: Sender, message: TelegramMessage
) -> FlowReply | None:
    """Route a message to the visit flow or the roster commands."""
    parsed = parse_command(message.text)
    if parsed is not None:
        if parsed.command is BotCommand.START:
            return await container.visit_flow.start(sender)
        if parsed.command is BotCommand.VISIT:
            return await container.visit_flow.begin_visit(sender, parsed.first_arg)
        if parsed.command is BotCommand.EMPLOYEES:
            return await container.roster_service.list_employees(sender.telegram_id)
        if parsed.command is BotCommand.EMPLOYEE_ACTIVATE:
            return await container.roster_service.set_active(
                sender.telegram_id, parsed.first_arg, active=True
            )
        if parsed.command is BotCommand.EMPLOYEE_DEACTIVATE:
            return await container.roster_service.set_active(
                sender.telegram_id, parsed.first_arg, active=False
            )
        return None
    if message.photo:
        photo = _select_largest_photo(message.photo)
        return await container.visit_flow.handle_photo(
            sender,
            PhotoSubmission(file_id=photo.file_id, forwarded=message.is_forwarded),
        )
    if message.location:
        return await container.visit_flow.handle_location(
            sender,
            Coordinate(
                latitude=message.location.latitude,
                longitude=message.location.longitude,
            ),
        )
    if message.text:
        return await container.visit_flow.handle_text(sender, message.text)
    return None


async def _deliver(
    container: AppContainer, chat_id: int, reply: FlowReply, step: str
) -> None:
    """Send a reply, logging instead of raising on transport errors."""
    try:
        await container.telegram_client.send_message(
            chat_id=chat_id, text=reply.text, reply_markup=reply.reply_markup
        )
    except Exception:
        logging.getLogger(__name__).exception(
            "Failed to deliver reply", extra={"chat_id": chat_id, "step": step}
        )


def _event_kind(message: TelegramMessage) -> str:
    if message.photo:
        return "photo"
    if message.location:
        return "location"
    return "text"


def _select_largest_photo(photos: list[TelegramPhotoSize]) -> TelegramPhotoSize:
    """Select the largest photo size from the Telegram payload."""
    return max(photos, key=lambda photo: (photo.width * photo.height))


def _format_error(container: AppContainer, exc: Exception, fallback: str) -> str:
    """Return a user-facing error message with local debug info."""
    if container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback
