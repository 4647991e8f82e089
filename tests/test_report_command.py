"""Tests for the /report command handler."""

import asyncio
from io import BytesIO

import pytest
from openpyxl import load_workbook

from visit_tracker.containers import AppContainer
from visit_tracker.domain.errors import Unauthorized
from visit_tracker.domain.models import Role
from tests.conftest import (
    ADMIN_ID,
    FIXED_NOW,
    FakeTelegramClient,
    InMemoryParticipantRepository,
    InMemoryVisitRepository,
)


def test_non_admin_is_refused(
    container: AppContainer, telegram_client: FakeTelegramClient
) -> None:
    asyncio.run(container.report_command_handler.handle(42, chat_id=500))

    assert telegram_client.messages == [(500, Unauthorized().reply)]
    assert telegram_client.documents == []


def test_admin_role_in_database_is_allowed(
    container: AppContainer,
    telegram_client: FakeTelegramClient,
    participant_repository: InMemoryParticipantRepository,
) -> None:
    participant_repository.add(77, role=Role.ADMIN)

    asyncio.run(container.report_command_handler.handle(77, chat_id=77))

    assert len(telegram_client.documents) == 1


def test_admin_receives_spreadsheet(
    container: AppContainer,
    telegram_client: FakeTelegramClient,
    visit_repository: InMemoryVisitRepository,
) -> None:
    visit_repository.add(42, FIXED_NOW, first_name="Ann")

    asyncio.run(
        container.report_command_handler.handle(ADMIN_ID, chat_id=10, range_arg="day")
    )

    assert telegram_client.messages == [(10, "Generating report...")]
    chat_id, filename, content = telegram_client.documents[0]
    assert chat_id == 10
    assert filename == "report_day.xlsx"
    sheet = load_workbook(BytesIO(content)).active
    assert sheet.max_row == 2
    assert sheet["B2"].value == "Ann"


def test_invalid_range_replies_with_usage(
    container: AppContainer, telegram_client: FakeTelegramClient
) -> None:
    handler = container.report_command_handler

    asyncio.run(handler.handle(ADMIN_ID, chat_id=10, range_arg="bogus"))

    assert "day | week | YYYY-MM-DD" in telegram_client.messages[-1][1]
    assert telegram_client.documents == []


def test_query_failure_sends_no_partial_document(
    container: AppContainer,
    telegram_client: FakeTelegramClient,
    visit_repository: InMemoryVisitRepository,
) -> None:
    visit_repository.fail_on_list = True

    asyncio.run(container.report_command_handler.handle(ADMIN_ID, chat_id=10))

    assert "could not build the report" in telegram_client.messages[-1][1].lower()
    assert telegram_client.documents == []


def test_admin_lookup_failure_replies_instead_of_raising(
    container: AppContainer,
    telegram_client: FakeTelegramClient,
    participant_repository: InMemoryParticipantRepository,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def broken_lookup(telegram_id: int) -> None:
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(participant_repository, "get_participant", broken_lookup)

    asyncio.run(container.report_command_handler.handle(42, chat_id=42))

    assert telegram_client.messages == [
        (42, "Could not build the report, please try again later.")
    ]
    assert telegram_client.documents == []
