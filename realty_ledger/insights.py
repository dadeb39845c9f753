"""Aggregation helpers behind the dashboard KPIs and charts."""

from __future__ import annotations

from math import ceil
from typing import TypedDict

import pandas as pd

from . import forecast, periods, summary, utils
from .models import TransactionStatus, TransactionType

DAYS_PER_MONTH = 30
UNCATEGORIZED = "Uncategorized"


class DashboardMetrics(TypedDict):
    total_income: float
    total_expense: float
    total_withdrawal: float
    total_saving: float
    pending_amount: float
    gross_income: float
    net_income: float
    net_cash_flow: float
    pending_commissions: float
    projected_next_year_expense: float
    projected_scenario_net: float
    months_span: int
    annualized_income: float
    annualized_expense: float


class MonthlyPoint(TypedDict):
    month: str
    income: float
    expense: float
    withdrawal: float
    saving: float
    gross_profit: float
    net_profit: float


class CategoryEntry(TypedDict):
    category: str
    total: float
    share: float


class DashboardPayload(TypedDict):
    metrics: DashboardMetrics
    monthly_series: list[MonthlyPoint]
    category_breakdown: list[CategoryEntry]
    forecast: list[forecast.ForecastPoint]
    periods: summary.PeriodSummaries
    goal: summary.GoalProgress
    wealth: list[forecast.WealthPoint]


def months_spanned(posted: pd.Series, days_per_month: float = DAYS_PER_MONTH) -> int:
    """Whole months covered by a set of days, never less than one."""

    if posted.empty:
        return 1
    days = (posted.max() - posted.min()).days
    return max(1, ceil(days / days_per_month))


def compute_metrics(
    transactions: utils.TransactionsLike,
    settings: utils.SettingsLike,
) -> DashboardMetrics:
    """Reduce the ledger to headline totals and tax/inflation adjusted figures."""

    df = utils.transactions_frame(transactions)
    scenario = utils.ensure_settings(settings)

    totals = utils.type_totals(df)
    total_income = totals[TransactionType.INCOME.value]
    total_expense = totals[TransactionType.EXPENSE.value]
    total_withdrawal = totals[TransactionType.WITHDRAWAL.value]
    total_saving = totals[TransactionType.SAVING.value]

    pending = df.loc[
        (df["type"] == TransactionType.INCOME.value)
        & (df["status"] == TransactionStatus.PENDING.value),
        "amount",
    ]
    pending_amount = float(pending.sum()) if not pending.empty else 0.0

    tax_multiplier = scenario.tax_multiplier
    inflation_multiplier = scenario.inflation_multiplier

    months_span = months_spanned(df["posted"])
    annualized_income = total_income / months_span * 12
    annualized_expense = total_expense / months_span * 12

    gross_income = total_income - total_expense

    return {
        "total_income": total_income,
        "total_expense": total_expense,
        "total_withdrawal": total_withdrawal,
        "total_saving": total_saving,
        "pending_amount": pending_amount,
        "gross_income": gross_income,
        "net_income": gross_income * tax_multiplier,
        "net_cash_flow": total_income - total_expense - total_withdrawal - total_saving,
        "pending_commissions": pending_amount * tax_multiplier,
        "projected_next_year_expense": total_expense * inflation_multiplier,
        "projected_scenario_net": (
            annualized_income - annualized_expense * inflation_multiplier
        ) * tax_multiplier,
        "months_span": int(months_span),
        "annualized_income": annualized_income,
        "annualized_expense": annualized_expense,
    }


def build_monthly_series(
    transactions: utils.TransactionsLike,
    settings: utils.SettingsLike,
) -> list[MonthlyPoint]:
    """Group the ledger by calendar month for the cash-flow chart.

    Only months with at least one transaction appear, oldest first.
    """

    df = utils.transactions_frame(transactions)
    if df.empty:
        return []

    tax_multiplier = utils.ensure_settings(settings).tax_multiplier
    df["month"] = periods.month_keys(df["posted"])

    grouped = (
        df.pivot_table(
            index="month",
            columns="type",
            values="amount",
            aggfunc="sum",
            fill_value=0.0,
        )
        .reindex(columns=list(utils.TYPE_COLUMNS), fill_value=0.0)
        .sort_index()
    )

    records: list[MonthlyPoint] = []
    for month, row in grouped.iterrows():
        income = float(row[TransactionType.INCOME.value])
        expense = float(row[TransactionType.EXPENSE.value])
        gross_profit = income - expense
        records.append(
            {
                "month": str(month),
                "income": income,
                "expense": expense,
                "withdrawal": float(row[TransactionType.WITHDRAWAL.value]),
                "saving": float(row[TransactionType.SAVING.value]),
                "gross_profit": gross_profit,
                "net_profit": gross_profit * tax_multiplier,
            }
        )
    return records


def build_category_breakdown(transactions: utils.TransactionsLike) -> list[CategoryEntry]:
    """Expense totals per category, largest first.

    Ties keep the order in which the categories first appear in the ledger.
    """

    df = utils.transactions_frame(transactions)
    spend = df.loc[df["type"] == TransactionType.EXPENSE.value].copy()
    if spend.empty:
        return []

    spend["category"] = spend["category"].str.strip().replace("", UNCATEGORIZED)
    totals = (
        spend.groupby("category", sort=False)["amount"]
        .sum()
        .sort_values(ascending=False, kind="stable")
    )
    overall = float(totals.sum())
    return [
        {
            "category": str(category),
            "total": float(value),
            "share": float(value / overall) if overall else 0.0,
        }
        for category, value in totals.items()
    ]


def calculate_dashboard(
    transactions: utils.TransactionsLike,
    settings: utils.SettingsLike,
    reference_now: utils.DateLike,
) -> DashboardPayload:
    """Compute every derived view of the ledger for one snapshot."""

    scenario = utils.ensure_settings(settings)
    if not isinstance(transactions, pd.DataFrame):
        transactions = list(transactions)

    periods = summary.summarize_periods(transactions, scenario, reference_now)
    return {
        "metrics": compute_metrics(transactions, scenario),
        "monthly_series": build_monthly_series(transactions, scenario),
        "category_breakdown": build_category_breakdown(transactions),
        "forecast": forecast.project_forward(transactions, scenario, reference_now),
        "periods": periods,
        "goal": summary.goal_progress(periods["month"], scenario),
        "wealth": forecast.project_wealth(periods["month"]["net"] * 12, scenario),
    }
