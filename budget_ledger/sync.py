"""Command line entry point for pulling accounts from the transaction feed"""

import argparse
import asyncio
import logging
from typing import Iterable

from budget_ledger.config import settings
from budget_ledger.infrastructure.clients.feed import FeedClient
from budget_ledger.infrastructure.database.session import SessionLocal, init_db
from budget_ledger.infrastructure.observability.logging import setup_logging
from budget_ledger.services.ingestion import IngestionService, SyncResult


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch transactions for each account from the feed service and store them."
    )
    parser.add_argument(
        "accounts",
        nargs="*",
        help="Account labels to sync (default: FEED_ACCOUNTS from the environment)",
    )
    parser.add_argument("--feed-url", default=None, help="Override the feed base URL")
    return parser.parse_args(list(argv) if argv is not None else None)


async def run(argv: Iterable[str] | None = None) -> SyncResult:
    args = parse_args(argv)
    accounts = args.accounts or settings.feed_accounts
    if not accounts:
        raise SystemExit("No accounts to sync: pass account labels or set FEED_ACCOUNTS")

    init_db()
    db = SessionLocal()
    try:
        service = IngestionService(db)
        result = await service.sync_accounts(FeedClient(base_url=args.feed_url), accounts)
    finally:
        db.close()

    logging.info(
        "Sync finished",
        extra={
            "step": "sync_complete",
            "processed": result.total_processed,
            "failed_accounts": result.failed,
            "rules_applied": result.rules_applied,
        },
    )
    return result


def main() -> None:
    setup_logging(settings.log_level)
    result = asyncio.run(run())
    if result.failed:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
