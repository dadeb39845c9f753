"""Utility script to print the dashboard payload for the seed ledger."""

from __future__ import annotations

import argparse
import json
from datetime import date

from realty_ledger import insights, seed
from realty_ledger.config import get_settings
from realty_ledger.logs import configure_logging
from realty_ledger.storage import JsonFileStore


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--user", help="Load this user's ledger from the local store instead of seed data")
    parser.add_argument("--as-of", type=date.fromisoformat, default=date.today(), help="Reference date (YYYY-MM-DD)")
    args = parser.parse_args()

    app_settings = get_settings().app
    configure_logging(app_settings.log_level, json=app_settings.log_json)

    transactions = seed.seed_transactions(args.as_of)
    settings = seed.DEFAULT_SETTINGS
    if args.user:
        stored = JsonFileStore(app_settings.store_path).load(args.user)
        if stored is not None:
            transactions, settings = stored.transactions, stored.settings

    payload = insights.calculate_dashboard(transactions, settings, args.as_of)
    print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
