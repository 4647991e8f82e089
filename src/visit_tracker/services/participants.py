"""Participant lifecycle and authorization."""

import asyncio
import re
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Protocol

from visit_tracker.domain.models import Participant, Role, Sender

_NUMERIC = re.compile(r"^\d+$")


class ParticipantRepository(Protocol):
    """Persistence interface for participants."""

    def get_participant(self, telegram_id: int) -> Participant | None:
        """Return the participant for a Telegram id, if present."""

    def create_participant(self, participant: Participant) -> Participant:
        """Insert a participant and return the stored record."""

    def set_active(self, telegram_id: int, is_active: bool) -> None:
        """Update the active flag of a participant."""

    def list_participants(self, role: Role | None = None) -> list[Participant]:
        """Return participants, newest registrations first."""


@dataclass
class ParticipantService:
    """Application service for participant actions."""

    repository: ParticipantRepository
    admin_ids: frozenset[int] = frozenset()

    async def get(self, telegram_id: int) -> Participant | None:
        return await asyncio.to_thread(self.repository.get_participant, telegram_id)

    async def register(
        self, sender: Sender, identifier: str, registered_at: datetime
    ) -> Participant:
        """Create a participant from the text sent during registration.

        Digits-only text is stored as the employee ID, anything else as the
        full name.
        """
        text = identifier.strip()
        is_numeric = bool(_NUMERIC.match(text))
        participant = Participant(
            telegram_id=sender.telegram_id,
            role=self.role_for(sender.telegram_id),
            is_active=True,
            registered_at=registered_at,
            first_name=sender.first_name,
            username=sender.username,
            employee_id=text if is_numeric else None,
            full_name=text if text and not is_numeric else None,
        )
        return await asyncio.to_thread(
            self.repository.create_participant, participant
        )

    async def set_active(
        self, participant: Participant, is_active: bool
    ) -> Participant:
        await asyncio.to_thread(
            self.repository.set_active, participant.telegram_id, is_active
        )
        return replace(participant, is_active=is_active)

    async def list_employees(self) -> list[Participant]:
        return await asyncio.to_thread(
            self.repository.list_participants, Role.EMPLOYEE
        )

    async def active_employee_ids(self) -> set[int]:
        """Return the roster of employees expected to report today."""
        employees = await self.list_employees()
        return {emp.telegram_id for emp in employees if emp.is_active}

    async def is_admin(self, telegram_id: int) -> bool:
        """Return True for allow-listed ids and participants with the admin role."""
        if telegram_id in self.admin_ids:
            return True
        participant = await self.get(telegram_id)
        return participant is not None and participant.role is Role.ADMIN

    def role_for(self, telegram_id: int) -> Role:
        return Role.ADMIN if telegram_id in self.admin_ids else Role.EMPLOYEE
