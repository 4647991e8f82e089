"""Seed shops into Supabase: visit-tracker-seed-shops SHOP123="Shop name" ..."""

import argparse
import logging

from supabase import create_client

from visit_tracker.adapters.supabase_shop_repository import SupabaseShopRepository
from visit_tracker.app_logging import configure_logging
from visit_tracker.config import Settings
from visit_tracker.domain.models import Shop
from visit_tracker.services.visits import ShopRepository

logger = logging.getLogger(__name__)


def parse_shop(value: str) -> Shop:
    """Parse a ``CODE=Name`` argument; the name defaults to the code."""
    code, _, name = value.partition("=")
    code = code.strip()
    if not code:
        raise argparse.ArgumentTypeError(f"missing shop code in {value!r}")
    return Shop(code=code, name=name.strip() or code)


def seed_shops(repository: ShopRepository, shops: list[Shop]) -> int:
    """Upsert shops by code and return how many were written."""
    for shop in shops:
        repository.upsert_shop(shop)
        logger.info("Seeded shop %s", shop.code)
    return len(shops)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Upsert shops by code.")
    parser.add_argument("shops", nargs="+", type=parse_shop, metavar="CODE=NAME")
    args = parser.parse_args(argv)

    configure_logging()
    settings = Settings()
    client = create_client(settings.supabase_url, settings.supabase_service_key)
    seed_shops(SupabaseShopRepository(client), args.shops)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
