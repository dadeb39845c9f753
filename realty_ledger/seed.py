"""Starter ledger and default scenario used when a user has no stored data.

The seed records are dated inside the reference month so every dashboard
panel has something to show on first run.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date

from .models import GlobalSettings, Transaction, TransactionStatus, TransactionType

INCOME_CATEGORIES = (
    "Commission",
    "Consulting",
    "Referral Fee",
)

EXPENSE_CATEGORIES = (
    "Marketing",
    "Staging",
    "Lead Gen",
    "Office",
    "Travel",
    "Education",
    "Licensing",
)

DEFAULT_SETTINGS = GlobalSettings()


@dataclass(frozen=True)
class SeedEntry:
    """Static template for one starter transaction."""

    id: str
    day: int
    description: str
    category: str
    amount: float
    type: TransactionType = TransactionType.EXPENSE
    status: TransactionStatus = TransactionStatus.COMPLETED


SEED_ENTRIES = (
    SeedEntry("1", 15, "123 Maple Drive Closing", "Commission", 12_500, TransactionType.INCOME),
    SeedEntry(
        "2",
        20,
        "450 Oak Ave Listing",
        "Commission",
        8_750,
        TransactionType.INCOME,
        TransactionStatus.PENDING,
    ),
    SeedEntry("3", 10, "789 Pine Ln Buyer Rep", "Commission", 9_200, TransactionType.INCOME),
    SeedEntry("4", 2, "Zillow Premier Agent", "Lead Gen", 850),
    SeedEntry("5", 5, "Luxury Staging Co.", "Staging", 2_100),
    SeedEntry("6", 12, "Pro Photography - Maple Dr", "Marketing", 450),
    SeedEntry("7", 18, "Open House Catering", "Marketing", 175),
    SeedEntry("8", 1, "Brokerage Desk Fees", "Office", 300),
    SeedEntry("9", 19, "Facebook Ads", "Marketing", 250),
)


def _day_in_month(reference: date, day: int) -> date:
    last_day = calendar.monthrange(reference.year, reference.month)[1]
    return date(reference.year, reference.month, min(day, last_day))


def seed_transactions(reference: date | None = None) -> list[Transaction]:
    """Return the starter ledger dated within ``reference``'s month."""

    reference = reference or date.today()
    return [
        Transaction(
            id=entry.id,
            date=_day_in_month(reference, entry.day),
            description=entry.description,
            category=entry.category,
            amount=entry.amount,
            type=entry.type,
            status=entry.status,
        )
        for entry in SEED_ENTRIES
    ]
