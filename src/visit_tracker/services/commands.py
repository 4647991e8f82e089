"""Command handlers that run outside the visit flow."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from visit_tracker.adapters.telegram_client import TelegramClient
from visit_tracker.domain.errors import InvalidArgument, Unauthorized
from visit_tracker.domain.reports import ReportDocument
from visit_tracker.services.participants import ParticipantService
from visit_tracker.services.reports import ReportGenerator

logger = logging.getLogger(__name__)

REPORT_FAILED = "Could not build the report, please try again later."


@dataclass
class ReportCommandHandler:
    """Handle the /report Telegram command."""

    participants: ParticipantService
    report_generator: ReportGenerator
    render: Callable[[ReportDocument], bytes]
    telegram_client: TelegramClient

    async def handle(
        self, requester_id: int, chat_id: int, range_arg: str = "day"
    ) -> None:
        """Build the requested report and send it as a single document."""
        context = {"telegram_id": requester_id, "range": range_arg}
        try:
            if not await self.participants.is_admin(requester_id):
                await self._reply(chat_id, Unauthorized().reply, context)
                return
            await self.telegram_client.send_message(
                chat_id=chat_id, text="Generating report..."
            )
            document = await self.report_generator.generate_report(range_arg)
            content = self.render(document)
        except InvalidArgument as exc:
            await self._reply(chat_id, exc.reply, context)
            return
        except Exception:
            logger.exception("Report generation failed", extra=context)
            await self._reply(chat_id, REPORT_FAILED, context)
            return
        logger.info(
            "Report generated",
            extra={"range": range_arg, "rows": len(document.rows)},
        )
        try:
            await self.telegram_client.send_document(
                chat_id=chat_id, filename=document.filename, content=content
            )
        except Exception:
            logger.exception("Failed to deliver report", extra=context)

    async def _reply(
        self, chat_id: int, text: str, context: dict[str, object]
    ) -> None:
        try:
            await self.telegram_client.send_message(chat_id=chat_id, text=text)
        except Exception:
            logger.exception("Failed to deliver report reply", extra=context)
