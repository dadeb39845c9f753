"""Day / week / month rollups for the live insights sidebar."""

from __future__ import annotations

from typing import Literal, TypedDict

from . import periods, utils
from .models import GoalType, TransactionType

WINDOW_LABELS = {
    "day": "Today",
    "week": "This Week",
    "month": "This Month",
}


class PeriodSummary(TypedDict):
    period: str
    income: float
    expense: float
    withdrawal: float
    saving: float
    # Cash flow before tax; ``net_after_tax`` applies the scenario tax rate.
    net: float
    net_after_tax: float


class PeriodSummaries(TypedDict):
    day: PeriodSummary
    week: PeriodSummary
    month: PeriodSummary


class GoalProgress(TypedDict):
    goal_type: Literal["revenue", "savings"]
    target: float
    achieved: float
    ratio: float
    percent: float


def summarize_periods(
    transactions: utils.TransactionsLike,
    settings: utils.SettingsLike,
    reference_now: utils.DateLike,
) -> PeriodSummaries:
    """Summarise the ledger for the day, ISO week and month containing ``reference_now``."""

    df = utils.transactions_frame(transactions)
    tax_multiplier = utils.ensure_settings(settings).tax_multiplier

    result = {}
    for window, label in WINDOW_LABELS.items():
        subset = df.loc[periods.window_mask(df["posted"], reference_now, window)]
        totals = utils.type_totals(subset)
        net = (
            totals[TransactionType.INCOME.value]
            - totals[TransactionType.EXPENSE.value]
            - totals[TransactionType.WITHDRAWAL.value]
            - totals[TransactionType.SAVING.value]
        )
        result[window] = {
            "period": label,
            "income": totals[TransactionType.INCOME.value],
            "expense": totals[TransactionType.EXPENSE.value],
            "withdrawal": totals[TransactionType.WITHDRAWAL.value],
            "saving": totals[TransactionType.SAVING.value],
            "net": net,
            "net_after_tax": net * tax_multiplier,
        }
    return result  # type: ignore[return-value]


def goal_progress(summary: PeriodSummary, settings: utils.SettingsLike) -> GoalProgress:
    """Progress of a period towards the monthly goal.

    ``ratio`` is the raw percentage and may exceed 100; ``percent`` is clamped
    to [0, 100] for progress bars.
    """

    scenario = utils.ensure_settings(settings)
    if scenario.goal_type is GoalType.SAVINGS:
        achieved = summary["saving"]
    else:
        achieved = summary["income"]

    target = scenario.monthly_revenue_goal
    ratio = 100 * achieved / target if target else 0.0
    return {
        "goal_type": scenario.goal_type.value,
        "target": float(target),
        "achieved": float(achieved),
        "ratio": float(ratio),
        "percent": float(min(100.0, max(0.0, ratio))),
    }
