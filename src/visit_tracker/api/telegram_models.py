"""Pydantic models for Telegram webhook payloads."""

from pydantic import BaseModel, Field


class TelegramUser(BaseModel):
    """Telegram user payload."""

    id: int
    is_bot: bool | None = None
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None


class TelegramChat(BaseModel):
    """Telegram chat payload."""

    id: int
    type: str
    title: str | None = None
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class TelegramPhotoSize(BaseModel):
    """Telegram photo size payload."""

    file_id: str
    file_unique_id: str
    width: int
    height: int
    file_size: int | None = None


class TelegramLocation(BaseModel):
    """Telegram location payload."""

    latitude: float
    longitude: float
    horizontal_accuracy: float | None = None


class TelegramMessage(BaseModel):
    """Telegram message payload."""

    message_id: int
    date: int
    chat: TelegramChat
    from_user: TelegramUser | None = Field(default=None, alias="from")
    text: str | None = None
    caption: str | None = None
    photo: list[TelegramPhotoSize] | None = None
    location: TelegramLocation | None = None
    forward_date: int | None = None
    forward_from: TelegramUser | None = None
    forward_from_chat: TelegramChat | None = None
    forward_origin: dict[str, object] | None = None

    @property
    def is_forwarded(self) -> bool:
        """Return True when the message was relayed from another chat."""
        return any(
            value is not None
            for value in (
                self.forward_date,
                self.forward_from,
                self.forward_from_chat,
                self.forward_origin,
            )
        )


class TelegramUpdate(BaseModel):
    """Telegram update payload."""

    update_id: int
    message: TelegramMessage | None = None
