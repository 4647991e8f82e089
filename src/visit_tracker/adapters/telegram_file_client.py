"""Telegram file lookup client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

TELEGRAM_API_BASE = "https://api.telegram.org"


class TelegramFileClient(Protocol):
    """Interface for resolving Telegram media references."""

    async def get_file_path(self, file_id: str) -> str:
        """Return the server-side file path for a media reference."""

    def file_url(self, file_path: str) -> str:
        """Return the download URL for a cached file path."""


@dataclass
class HttpxTelegramFileClient(TelegramFileClient):
    """Telegram file client using httpx."""

    bot_token: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, bot_token: str) -> "HttpxTelegramFileClient":
        """Create a Telegram file client with a managed httpx session."""
        return cls(bot_token=bot_token, http_client=httpx.AsyncClient())

    async def get_file_path(self, file_id: str) -> str:
        """Resolve a file id via getFile."""
        url = f"{TELEGRAM_API_BASE}/bot{self.bot_token}/getFile"
        response = await self.http_client.get(
            url, params={"file_id": file_id}, timeout=10
        )
        response.raise_for_status()
        payload = response.json()
        if not payload.get("ok"):
            raise RuntimeError("Telegram getFile failed")
        return payload["result"].get("file_path", "")

    def file_url(self, file_path: str) -> str:
        return f"{TELEGRAM_API_BASE}/file/bot{self.bot_token}/{file_path}"

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


@dataclass
class NullTelegramFileClient(TelegramFileClient):
    """File client used when no bot token is configured."""

    async def get_file_path(self, file_id: str) -> str:
        return ""

    def file_url(self, file_path: str) -> str:
        return ""

    async def close(self) -> None:
        return None
