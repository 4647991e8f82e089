"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from supabase import create_client

from visit_tracker.adapters.supabase_participant_repository import (
    SupabaseParticipantRepository,
)
from visit_tracker.adapters.supabase_shop_repository import SupabaseShopRepository
from visit_tracker.adapters.supabase_visit_repository import SupabaseVisitRepository
from visit_tracker.adapters.telegram_client import (
    HttpxTelegramClient,
    NullTelegramClient,
    TelegramClient,
)
from visit_tracker.adapters.telegram_file_client import (
    HttpxTelegramFileClient,
    NullTelegramFileClient,
    TelegramFileClient,
)
from visit_tracker.adapters.xlsx_report_writer import render_xlsx
from visit_tracker.config import MAX_DISTANCE_METERS, Settings, parse_admin_ids
from visit_tracker.domain.geo import Coordinate, Geofence
from visit_tracker.services.admin import RosterService
from visit_tracker.services.commands import ReportCommandHandler
from visit_tracker.services.compliance import ComplianceAggregator
from visit_tracker.services.conversations import ConversationStateStore
from visit_tracker.services.participants import ParticipantService
from visit_tracker.services.reports import ReportGenerator
from visit_tracker.services.visits import VisitFlowEngine

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    telegram_client: TelegramClient
    telegram_file_client: TelegramFileClient
    participant_service: ParticipantService
    visit_flow: VisitFlowEngine
    roster_service: RosterService
    report_command_handler: ReportCommandHandler
    close_resources: Callable[[], Awaitable[None]]

    @property
    def degraded(self) -> bool:
        """True when no bot token is configured and updates are ignored."""
        return not self.settings.telegram_bot_token


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    participant_repository = SupabaseParticipantRepository(supabase_client)
    shop_repository = SupabaseShopRepository(supabase_client)
    visit_repository = SupabaseVisitRepository(supabase_client)

    telegram_client: TelegramClient
    telegram_file_client: TelegramFileClient
    if resolved_settings.telegram_bot_token:
        telegram_client = HttpxTelegramClient.create(
            resolved_settings.telegram_bot_token
        )
        telegram_file_client = HttpxTelegramFileClient.create(
            resolved_settings.telegram_bot_token
        )
    else:
        logger.warning("TELEGRAM_BOT_TOKEN is not set; Telegram updates are ignored")
        telegram_client = NullTelegramClient()
        telegram_file_client = NullTelegramFileClient()

    timezone = ZoneInfo(resolved_settings.timezone)
    participant_service = ParticipantService(
        repository=participant_repository,
        admin_ids=parse_admin_ids(resolved_settings.admin_ids),
    )
    compliance = ComplianceAggregator(repository=visit_repository, timezone=timezone)
    visit_flow = VisitFlowEngine(
        states=ConversationStateStore(),
        participants=participant_service,
        shop_repository=shop_repository,
        visit_repository=visit_repository,
        file_client=telegram_file_client,
        compliance=compliance,
        geofence=Geofence(
            target=Coordinate(
                latitude=resolved_settings.target_lat,
                longitude=resolved_settings.target_lng,
            ),
            radius_meters=MAX_DISTANCE_METERS,
        ),
        timezone=timezone,
    )
    report_generator = ReportGenerator(
        repository=visit_repository,
        timezone=timezone,
        photo_url=telegram_file_client.file_url,
    )
    report_handler = ReportCommandHandler(
        participants=participant_service,
        report_generator=report_generator,
        render=render_xlsx,
        telegram_client=telegram_client,
    )

    async def close_resources() -> None:
        await telegram_client.close()
        await telegram_file_client.close()

    return AppContainer(
        settings=resolved_settings,
        telegram_client=telegram_client,
        telegram_file_client=telegram_file_client,
        participant_service=participant_service,
        visit_flow=visit_flow,
        roster_service=RosterService(participant_service),
        report_command_handler=report_handler,
        close_resources=close_resources,
    )
