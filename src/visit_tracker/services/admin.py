"""Roster management commands for administrators."""

from dataclasses import dataclass

from visit_tracker.domain.errors import InvalidArgument, Unauthorized
from visit_tracker.domain.models import Participant, Role
from visit_tracker.services.participants import ParticipantService
from visit_tracker.services.visits import FlowReply


@dataclass
class RosterService:
    """Lists, activates and deactivates employees."""

    participants: ParticipantService

    async def list_employees(self, requester_id: int) -> FlowReply:
        """Return the employee list, newest registrations first."""
        if not await self.participants.is_admin(requester_id):
            return FlowReply(text=Unauthorized().reply)
        employees = await self.participants.list_employees()
        if not employees:
            return FlowReply(text="No employees registered yet.")
        lines = ["Employees:", ""]
        for index, employee in enumerate(employees, start=1):
            lines.append(f"{index}. {_format_employee(employee)}")
        lines.extend(
            [
                "",
                "Management commands:",
                "/employee_activate <TG_ID> - activate an employee",
                "/employee_deactivate <TG_ID> - deactivate an employee",
            ]
        )
        return FlowReply(text="\n".join(lines))

    async def set_active(
        self, requester_id: int, raw_target: str | None, active: bool
    ) -> FlowReply:
        """Activate or deactivate an employee by Telegram id."""
        command = "employee_activate" if active else "employee_deactivate"
        if not await self.participants.is_admin(requester_id):
            return FlowReply(text=Unauthorized().reply)
        try:
            target_id = _parse_target(raw_target, command)
        except InvalidArgument as exc:
            return FlowReply(text=exc.reply)
        employee = await self.participants.get(target_id)
        if employee is None or employee.role is not Role.EMPLOYEE:
            return FlowReply(text="Employee not found.")
        updated = await self.participants.set_active(employee, active)
        verb = "activated" if active else "deactivated"
        return FlowReply(text=f"Employee {updated.display_name} {verb}.")


def _parse_target(raw: str | None, command: str) -> int:
    value = (raw or "").strip()
    if not value.isdigit() or int(value) == 0:
        raise InvalidArgument(f"Usage: /{command} <TELEGRAM_ID>")
    return int(value)


def _format_employee(employee: Participant) -> str:
    status = "active" if employee.is_active else "inactive"
    return (
        f"{employee.full_name or employee.first_name or employee.username or 'No name'}"
        f" (TG: {employee.telegram_id}, ID: {employee.employee_id or 'none'})"
        f" - {status}"
    )
