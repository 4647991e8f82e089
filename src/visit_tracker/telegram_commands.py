"""Telegram bot command configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class TelegramCommand:
    """Declarative bot command definition."""

    command: str
    description: str


class BotCommand(Enum):
    """Enum of bot commands (single source of truth)."""

    START = TelegramCommand("start", "Register or say hello")
    VISIT = TelegramCommand("visit", "Start a shop visit: /visit <SHOP_CODE>")
    REPORT = TelegramCommand("report", "Admin: visits report (day | week | date)")
    EMPLOYEES = TelegramCommand("employees", "Admin: list employees")
    EMPLOYEE_ACTIVATE = TelegramCommand(
        "employee_activate", "Admin: activate an employee"
    )
    EMPLOYEE_DEACTIVATE = TelegramCommand(
        "employee_deactivate", "Admin: deactivate an employee"
    )

    @classmethod
    def from_name(cls, name: str) -> "BotCommand | None":
        for entry in cls:
            if entry.value.command == name:
                return entry
        return None


@dataclass(frozen=True)
class ParsedCommand:
    """A slash command split into its name and arguments."""

    command: BotCommand
    args: list[str]

    @property
    def first_arg(self) -> str | None:
        return self.args[0] if self.args else None


def parse_command(text: str | None) -> ParsedCommand | None:
    """Parse ``/name[@bot] arg ...``; return None for non-commands."""
    if not text or not text.startswith("/"):
        return None
    head, *args = text.strip().split()
    name = head[1:].split("@", maxsplit=1)[0].lower()
    command = BotCommand.from_name(name)
    if command is None:
        return None
    return ParsedCommand(command=command, args=args)


def telegram_commands() -> list[dict[str, str]]:
    """Return commands formatted for Telegram API."""
    return [
        {"command": entry.value.command, "description": entry.value.description}
        for entry in BotCommand
    ]


CHAT_MENU_BUTTON: dict[str, object] = {"type": "commands"}
