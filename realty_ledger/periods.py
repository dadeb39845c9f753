"""Calendar bucketing helpers shared by the period summaries and forecasts."""

from __future__ import annotations

import pandas as pd

from .utils import DateLike, to_timestamp


def month_keys(posted: pd.Series) -> pd.Series:
    """Return the ``YYYY-MM`` bucket of each posted day."""

    return posted.dt.strftime("%Y-%m")


def month_label(period: pd.Period) -> str:
    return period.to_timestamp().strftime("%b %y")


def add_months(value: DateLike, months: int) -> pd.Period:
    """Return the monthly period ``months`` after the one containing ``value``."""

    return to_timestamp(value).to_period("M") + months


def iso_week(value: DateLike) -> tuple[int, int]:
    """Return ``(iso_year, iso_week)``; weeks start Monday, week 1 holds the first Thursday."""

    iso = to_timestamp(value).isocalendar()
    return int(iso[0]), int(iso[1])


def window_mask(posted: pd.Series, reference: DateLike, window: str) -> pd.Series:
    """Vectorised membership test of ``posted`` days in the reference window.

    ``window`` is one of ``"day"``, ``"week"`` or ``"month"``.
    """

    ref = to_timestamp(reference)
    if posted.empty:
        return pd.Series(False, index=posted.index, dtype=bool)

    if window == "day":
        return posted.dt.normalize() == ref
    if window == "week":
        iso = posted.dt.isocalendar()
        ref_year, ref_week = iso_week(ref)
        return ((iso["year"] == ref_year) & (iso["week"] == ref_week)).astype(bool)
    if window == "month":
        return (posted.dt.year == ref.year) & (posted.dt.month == ref.month)
    raise ValueError(f"unknown window {window!r}; expected day, week or month")
