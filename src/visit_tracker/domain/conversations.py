"""Conversation states for the registration and visit flows."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Registering:
    """Waiting for an employee ID or full name."""


@dataclass(frozen=True)
class AwaitingPhoto:
    """Visit started; waiting for a fresh photo."""

    shop_code: str


@dataclass(frozen=True)
class AwaitingLocation:
    """Photo captured; waiting for the participant's location."""

    shop_code: str
    photo_file_id: str


ConversationState = Registering | AwaitingPhoto | AwaitingLocation
