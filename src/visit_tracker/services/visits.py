"""Visit capture state machine: /visit, then photo, then location."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from zoneinfo import ZoneInfo

from visit_tracker.adapters.telegram_file_client import TelegramFileClient
from visit_tracker.domain.conversations import (
    AwaitingLocation,
    AwaitingPhoto,
    ConversationState,
    Registering,
)
from visit_tracker.domain.errors import (
    ForwardedMediaRejected,
    NotRegistered,
    OutOfFence,
    OutOfSequence,
    PersistenceFailure,
    TransportFailure,
    VisitTrackerError,
)
from visit_tracker.domain.geo import Coordinate, Geofence
from visit_tracker.domain.models import (
    NewVisit,
    PhotoSubmission,
    Sender,
    Shop,
    Visit,
)
from visit_tracker.services.compliance import ComplianceAggregator, VisitRepository
from visit_tracker.services.conversations import ConversationStateStore
from visit_tracker.services.participants import ParticipantService

logger = logging.getLogger(__name__)

SHARE_LOCATION_TEXT = "Share location"
ALL_REPORTED_NOTICE = "All employees have reported today!"
PHOTO_FIRST = "Please send a photo first."
LOCATION_FIRST = "Please share your location first."
NO_VISIT_FOR_LOCATION = (
    "Start a visit with /visit <SHOP_CODE> and send a photo first."
)


class ShopRepository(Protocol):
    """Persistence interface for shops."""

    def get_shop(self, code: str) -> Shop | None:
        """Return a shop by code, if present."""

    def upsert_shop(self, shop: Shop) -> None:
        """Insert or update a shop keyed by its code."""


@dataclass(frozen=True)
class FlowReply:
    """Represents the reply to an inbound event.

    ``broadcast`` carries a notice for the submitting chat and every admin.
    """

    text: str
    reply_markup: dict | None = None
    broadcast: str | None = None


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def _location_keyboard() -> dict:
    return {
        "keyboard": [[{"text": SHARE_LOCATION_TEXT, "request_location": True}]],
        "resize_keyboard": True,
        "one_time_keyboard": True,
    }


@dataclass
class VisitFlowEngine:
    """Drives registration and the photo-then-location visit flow."""

    states: ConversationStateStore
    participants: ParticipantService
    shop_repository: ShopRepository
    visit_repository: VisitRepository
    file_client: TelegramFileClient
    compliance: ComplianceAggregator
    geofence: Geofence
    timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))
    clock: Callable[[], datetime] = _utc_now

    async def start(self, sender: Sender) -> FlowReply:
        """Greet a known participant or begin registration."""
        async with self.states.serialized(sender.telegram_id):
            participant = await self.participants.get(sender.telegram_id)
            if participant is not None:
                if not participant.is_active:
                    await self.participants.set_active(participant, True)
                    return FlowReply(text="Your account has been reactivated.")
                return FlowReply(
                    text=(
                        f"Hi {participant.display_name}, "
                        "you are already registered."
                    )
                )
            self.states.set(sender.telegram_id, Registering())
            if sender.telegram_id in self.participants.admin_ids:
                return FlowReply(text="Welcome, administrator! Please send your name.")
            return FlowReply(
                text=(
                    "Welcome! Please send your employee ID or full name "
                    "to link your account."
                )
            )

    async def begin_visit(self, sender: Sender, shop_code: str | None) -> FlowReply:
        """Handle /visit <shop_code>."""
        if not shop_code:
            return FlowReply(text="Usage: /visit <SHOP_CODE>")
        async with self.states.serialized(sender.telegram_id):
            participant = await self.participants.get(sender.telegram_id)
            if participant is None:
                return FlowReply(text=NotRegistered().reply)
            self.states.set(sender.telegram_id, AwaitingPhoto(shop_code=shop_code))
        return FlowReply(
            text=(
                f"You started a visit to shop {shop_code}. "
                "Please send a photo (a selfie or a photo inside the shop)."
            )
        )

    async def handle_text(self, sender: Sender, text: str) -> FlowReply | None:
        """Handle text: registration input or an out-of-order message.

        Unrecognized commands count as out-of-order input but are never
        taken as registration details.
        """
        async with self.states.serialized(sender.telegram_id):
            state = self.states.get(sender.telegram_id)
            if isinstance(state, Registering):
                if text.startswith("/"):
                    return None
                return await self._register(sender, text)
            if text.strip() == SHARE_LOCATION_TEXT:
                return None
            if isinstance(state, AwaitingPhoto):
                return FlowReply(text=PHOTO_FIRST)
            if isinstance(state, AwaitingLocation):
                return FlowReply(text=LOCATION_FIRST)
            return None

    async def handle_photo(
        self, sender: Sender, photo: PhotoSubmission
    ) -> FlowReply:
        """Capture the visit photo and ask for the location."""
        async with self.states.serialized(sender.telegram_id):
            state = self.states.get(sender.telegram_id)
            try:
                next_state = self._accept_photo(state, photo)
            except VisitTrackerError as exc:
                return FlowReply(text=exc.reply)
            self.states.set(sender.telegram_id, next_state)
        return FlowReply(
            text="Please share your location (button below).",
            reply_markup=_location_keyboard(),
        )

    async def handle_location(self, sender: Sender, point: Coordinate) -> FlowReply:
        """Validate the location against the geofence and record the visit."""
        async with self.states.serialized(sender.telegram_id):
            state = self.states.get(sender.telegram_id)
            try:
                if not isinstance(state, AwaitingLocation):
                    if isinstance(state, AwaitingPhoto):
                        raise OutOfSequence(PHOTO_FIRST)
                    raise OutOfSequence(NO_VISIT_FOR_LOCATION)
                if not self.geofence.contains(point):
                    raise OutOfFence(self.geofence.distance_to(point))
                visit = await self._persist(sender, state, point)
            except VisitTrackerError as exc:
                return FlowReply(text=exc.reply)
            self.states.clear(sender.telegram_id)

        captured = visit.captured_at.astimezone(self.timezone).strftime("%H:%M:%S")
        reply = FlowReply(text=f"Thank you! Visit recorded at {captured}.")
        if await self._everyone_reported():
            return FlowReply(text=reply.text, broadcast=ALL_REPORTED_NOTICE)
        return reply

    def _accept_photo(
        self, state: ConversationState | None, photo: PhotoSubmission
    ) -> AwaitingLocation:
        if isinstance(state, AwaitingLocation):
            raise OutOfSequence(LOCATION_FIRST)
        if not isinstance(state, AwaitingPhoto):
            raise OutOfSequence()
        if not photo.file_id:
            raise OutOfSequence("Could not read the photo, please try again.")
        if photo.forwarded:
            raise ForwardedMediaRejected()
        return AwaitingLocation(shop_code=state.shop_code, photo_file_id=photo.file_id)

    async def _register(self, sender: Sender, text: str) -> FlowReply:
        try:
            existing = await self.participants.get(sender.telegram_id)
            if existing is not None:
                self.states.clear(sender.telegram_id)
                return FlowReply(text="You are already registered.")
            await self.participants.register(sender, text, self.clock())
        except Exception:
            logger.exception(
                "Registration failed",
                extra={"telegram_id": sender.telegram_id, "step": "register"},
            )
            return FlowReply(text="Registration failed, please try again later.")
        self.states.clear(sender.telegram_id)
        return FlowReply(text="Thank you! Your account is linked.")

    async def _persist(
        self, sender: Sender, state: AwaitingLocation, point: Coordinate
    ) -> Visit:
        captured_at = self.clock()
        context = {
            "telegram_id": sender.telegram_id,
            "shop_code": state.shop_code,
            "captured_at": captured_at.isoformat(),
        }
        try:
            file_path = await self.file_client.get_file_path(state.photo_file_id)
        except Exception as exc:
            logger.exception(
                "Failed to resolve visit photo",
                extra={**context, "step": "get_file"},
            )
            raise TransportFailure() from exc
        try:
            shop = await asyncio.to_thread(
                self.shop_repository.get_shop, state.shop_code
            )
            visit = NewVisit(
                telegram_id=sender.telegram_id,
                first_name=sender.first_name,
                username=sender.username,
                shop_code=state.shop_code,
                shop_name=shop.name if shop else state.shop_code,
                latitude=point.latitude,
                longitude=point.longitude,
                photo_file_id=state.photo_file_id,
                photo_file_path=file_path or None,
                captured_at=captured_at,
            )
            return await asyncio.to_thread(self.visit_repository.save_visit, visit)
        except Exception as exc:
            logger.exception(
                "Failed to save visit", extra={**context, "step": "save_visit"}
            )
            raise PersistenceFailure() from exc

    async def _everyone_reported(self) -> bool:
        try:
            roster = await self.participants.active_employee_ids()
            return await self.compliance.all_submitted_today(roster)
        except Exception:
            logger.exception("Compliance check failed")
            return False
