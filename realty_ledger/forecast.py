"""Forward-looking projections: 12-month income/expense outlook and wealth growth."""

from __future__ import annotations

from math import ceil
from typing import TypedDict

import numpy as np
import pandas as pd

from . import periods, utils
from .models import TransactionStatus, TransactionType

FORECAST_MONTHS = 12
AVG_DAYS_PER_MONTH = 30.44
# Assumed annual market return on the reinvested share of net income.
MARKET_RETURN = 0.07
WEALTH_YEARS = 10


class ForecastPoint(TypedDict):
    month: str
    label: str
    forecast_income: float
    projected_expense: float
    pending: float
    net_potential: float


class WealthPoint(TypedDict):
    year: int
    wealth: float


def monthly_average(frame: pd.DataFrame) -> float:
    """Run-rate of ``frame["amount"]`` over the months its dates span (at least one)."""

    if frame.empty:
        return 0.0
    days = abs((frame["posted"].max() - frame["posted"].min()).days)
    months = max(1, ceil(days / AVG_DAYS_PER_MONTH))
    return float(frame["amount"].sum()) / months


def project_forward(
    transactions: utils.TransactionsLike,
    settings: utils.SettingsLike,
    reference_date: utils.DateLike,
) -> list[ForecastPoint]:
    """Project income and expenses for the 12 months starting at ``reference_date``.

    Each month's income is the historical run-rate of completed income, unless
    pending deals dated in that month add up to more; expenses start at their
    run-rate and compound monthly with inflation.
    """

    df = utils.transactions_frame(transactions)
    scenario = utils.ensure_settings(settings)

    is_income = df["type"] == TransactionType.INCOME.value
    completed_income = df.loc[is_income & (df["status"] == TransactionStatus.COMPLETED.value)]
    pending_income = df.loc[is_income & (df["status"] == TransactionStatus.PENDING.value)]
    expenses = df.loc[df["type"] == TransactionType.EXPENSE.value]

    avg_income = monthly_average(completed_income)
    avg_expense = monthly_average(expenses)

    pending_by_month = (
        pending_income.groupby(periods.month_keys(pending_income["posted"]))["amount"].sum()
        if not pending_income.empty
        else pd.Series(dtype=float)
    )

    monthly_inflation = scenario.inflation_rate / 100 / 12
    growth = np.power(1 + monthly_inflation, np.arange(FORECAST_MONTHS))

    points: list[ForecastPoint] = []
    for offset in range(FORECAST_MONTHS):
        period = periods.add_months(reference_date, offset)
        key = period.strftime("%Y-%m")
        pending = float(pending_by_month.get(key, 0.0))
        forecast_income = max(pending, avg_income)
        projected_expense = float(avg_expense * growth[offset])
        points.append(
            {
                "month": key,
                "label": periods.month_label(period),
                "forecast_income": forecast_income,
                "projected_expense": projected_expense,
                "pending": pending,
                "net_potential": forecast_income - projected_expense,
            }
        )
    return points


def project_wealth(
    annual_net: float,
    settings: utils.SettingsLike,
    years: int = WEALTH_YEARS,
) -> list[WealthPoint]:
    """Compound a yearly net figure into projected wealth.

    Each year the running balance plus ``annual_net`` is taxed, grown by the
    reinvested share of ``MARKET_RETURN``, deflated by inflation, and reduced
    by the fixed owner's draw.
    """

    scenario = utils.ensure_settings(settings)
    growth = 1 + scenario.reinvestment_rate / 100 * MARKET_RETURN

    wealth = 0.0
    points: list[WealthPoint] = []
    for year in range(1, years + 1):
        after_tax = (wealth + annual_net) * scenario.tax_multiplier
        wealth = after_tax * growth / scenario.inflation_multiplier - scenario.annual_withdrawal
        points.append({"year": year, "wealth": float(wealth)})
    return points
