"""Shared utilities for Realty Ledger."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Mapping, Union

import pandas as pd
from pydantic import BaseModel

from .logs import get_logger
from .models import GlobalSettings, TransactionStatus, TransactionType

log = get_logger(__name__)

TransactionsLike = Union[Iterable[Union[BaseModel, Mapping]], pd.DataFrame]
SettingsLike = Union[GlobalSettings, Mapping]
DateLike = Union[date, datetime, pd.Timestamp, str]

TRANSACTION_COLUMNS = (
    "id",
    "date",
    "description",
    "category",
    "amount",
    "type",
    "status",
)

TYPE_COLUMNS = tuple(member.value for member in TransactionType)


def ensure_dataframe(transactions: TransactionsLike) -> pd.DataFrame:
    """Ensure the input payload is normalised to a :class:`pandas.DataFrame`."""

    if isinstance(transactions, pd.DataFrame):
        return transactions.copy()

    records = [
        item.model_dump(mode="json") if isinstance(item, BaseModel) else dict(item)
        for item in transactions
    ]
    return pd.DataFrame(records, columns=list(TRANSACTION_COLUMNS) if not records else None)


def transactions_frame(transactions: TransactionsLike) -> pd.DataFrame:
    """Return a clean ledger frame with coerced types and a parsed ``posted`` day.

    Records whose date does not parse as ``YYYY-MM-DD`` are dropped, so every
    derivation sees the same subset of the ledger.
    """

    df = ensure_dataframe(transactions)
    for column in TRANSACTION_COLUMNS:
        if column not in df:
            df[column] = None

    df["type"] = df["type"].map(lambda value: TransactionType(value).value)
    df["status"] = df["status"].map(lambda value: TransactionStatus(value).value)
    df["amount"] = pd.to_numeric(df["amount"], errors="coerce").fillna(0.0).astype(float)
    df["category"] = df["category"].fillna("").astype(str)
    df["date"] = df["date"].astype("string").str.strip().str[:10]
    df["posted"] = pd.to_datetime(df["date"], format="%Y-%m-%d", errors="coerce")

    invalid = df["posted"].isna()
    if invalid.any():
        log.warning(
            "transactions_skipped",
            reason="unparseable date",
            count=int(invalid.sum()),
            ids=[str(value) for value in df.loc[invalid, "id"].tolist()],
        )
        df = df.loc[~invalid]

    return df.reset_index(drop=True)


def type_totals(df: pd.DataFrame) -> dict[str, float]:
    """Sum ``amount`` per transaction type, with every type present."""

    if df.empty:
        return {name: 0.0 for name in TYPE_COLUMNS}
    totals = df.groupby("type")["amount"].sum()
    return {name: float(totals.get(name, 0.0)) for name in TYPE_COLUMNS}


def ensure_settings(settings: SettingsLike) -> GlobalSettings:
    if isinstance(settings, GlobalSettings):
        return settings
    return GlobalSettings.model_validate(dict(settings))


def to_timestamp(value: DateLike) -> pd.Timestamp:
    """Normalise a reference date to a midnight :class:`pandas.Timestamp`."""

    ts = pd.Timestamp(value)
    if ts.tzinfo is not None:
        # keep the wall-clock date; stored dates carry no zone
        ts = ts.tz_localize(None)
    return ts.normalize()


def format_currency(value: float, currency: str = "$") -> str:
    """Return a human-readable currency string."""

    sign = "-" if value < 0 else ""
    return f"{sign}{currency}{abs(value):,.2f}"
