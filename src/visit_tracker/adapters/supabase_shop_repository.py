"""Supabase-backed shop repository."""

from dataclasses import dataclass

from supabase import Client

from visit_tracker.domain.models import Shop
from visit_tracker.services.visits import ShopRepository


@dataclass
class SupabaseShopRepository(ShopRepository):
    """Supabase implementation for shop lookups."""

    client: Client

    def get_shop(self, code: str) -> Shop | None:
        """Return a shop by code, if present."""
        response = (
            self.client.table("shops")
            .select("code, name")
            .eq("code", code)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return Shop(code=row["code"], name=row["name"])

    def upsert_shop(self, shop: Shop) -> None:
        """Insert or update a shop keyed by code."""
        self.client.table("shops").upsert(
            {"code": shop.code, "name": shop.name}, on_conflict="code"
        ).execute()
