"""Tests for the metrics, monthly series and category breakdown builders."""

from __future__ import annotations

import itertools
import random

import pandas as pd
import pytest
from realty_ledger import insights
from realty_ledger.models import GlobalSettings, Transaction

SETTINGS = GlobalSettings(tax_rate=25, inflation_rate=0)


def _txn(txn_id: str, day: str, amount: float, kind: str = "expense", status: str = "completed", category: str = "Office") -> Transaction:
    return Transaction(id=txn_id, date=day, amount=amount, type=kind, status=status, category=category)


def _closing_and_staging() -> list[Transaction]:
    return [
        _txn("a", "2024-05-01", 10_000, "income", category="Commission"),
        _txn("b", "2024-05-15", 4_000, "expense", category="Staging"),
    ]


def test_compute_metrics_concrete_scenario() -> None:
    metrics = insights.compute_metrics(_closing_and_staging(), SETTINGS)

    assert metrics["gross_income"] == 6_000
    assert metrics["net_income"] == 4_500
    assert metrics["projected_next_year_expense"] == 4_000
    assert metrics["months_span"] == 1
    assert metrics["net_cash_flow"] == 6_000


def test_pending_commissions_are_taxed() -> None:
    ledger = [*_closing_and_staging(), _txn("c", "2024-06-01", 2_000, "income", "pending")]
    metrics = insights.compute_metrics(ledger, SETTINGS)

    assert metrics["pending_amount"] == 2_000
    assert metrics["pending_commissions"] == 1_500
    assert metrics["total_income"] == 12_000


def test_compute_metrics_empty_ledger_is_all_zero() -> None:
    metrics = insights.compute_metrics([], SETTINGS)

    assert metrics["months_span"] == 1
    for key, value in metrics.items():
        if key != "months_span":
            assert value == 0, key


def test_net_income_matches_tax_formula_exactly() -> None:
    settings = GlobalSettings(tax_rate=37, inflation_rate=4.2)
    ledger = [
        _txn("1", "2024-01-03", 1234.56, "income"),
        _txn("2", "2024-02-11", 789.1, "expense"),
        _txn("3", "2024-02-12", 55.55, "withdrawal"),
        _txn("4", "2024-04-30", 3210.99, "income", "pending"),
    ]
    metrics = insights.compute_metrics(ledger, settings)

    expected = (metrics["total_income"] - metrics["total_expense"]) * (1 - 37 / 100)
    assert metrics["net_income"] == expected


def test_negative_results_are_not_clamped() -> None:
    ledger = [
        _txn("1", "2024-03-01", 500, "income"),
        _txn("2", "2024-03-02", 900, "expense"),
        _txn("3", "2024-03-03", 250, "withdrawal"),
        _txn("4", "2024-03-04", 100, "saving"),
    ]
    metrics = insights.compute_metrics(ledger, SETTINGS)

    assert metrics["gross_income"] == -400
    assert metrics["net_income"] == -300
    assert metrics["net_cash_flow"] == -750


def test_annualisation_uses_thirty_day_months() -> None:
    ledger = [
        _txn("1", "2024-01-01", 6_000, "income"),
        _txn("2", "2024-03-01", 1_200, "expense"),
    ]
    settings = GlobalSettings(tax_rate=0, inflation_rate=10)
    metrics = insights.compute_metrics(ledger, settings)

    # 60 days -> 2 months
    assert metrics["months_span"] == 2
    assert metrics["annualized_income"] == pytest.approx(36_000)
    assert metrics["annualized_expense"] == pytest.approx(7_200)
    assert metrics["projected_scenario_net"] == pytest.approx(36_000 - 7_200 * 1.1)


def test_unknown_and_missing_types_count_as_expense() -> None:
    ledger = [
        {"id": "1", "date": "2024-05-01", "amount": 300, "type": "fee"},
        {"id": "2", "date": "2024-05-02", "amount": 200},
        {"id": "3", "date": "2024-05-03", "amount": 1_000, "type": "income"},
    ]
    metrics = insights.compute_metrics(ledger, SETTINGS)

    assert metrics["total_expense"] == 500
    assert metrics["total_income"] == 1_000


def test_malformed_dates_are_skipped_everywhere() -> None:
    ledger = [
        {"id": "1", "date": "2024-05-01", "amount": 1_000, "type": "income"},
        {"id": "2", "date": "not a date", "amount": 5_000, "type": "income"},
        {"id": "3", "date": None, "amount": 70, "type": "expense", "category": "Office"},
    ]
    metrics = insights.compute_metrics(ledger, SETTINGS)
    series = insights.build_monthly_series(ledger, SETTINGS)

    assert metrics["total_income"] == 1_000
    assert metrics["total_expense"] == 0
    assert [point["month"] for point in series] == ["2024-05"]
    assert insights.build_category_breakdown(ledger) == []


def test_aggregates_do_not_depend_on_order() -> None:
    ledger = [
        _txn("1", "2024-01-05", 4_000, "income", category="Commission"),
        _txn("2", "2024-02-10", 350, "expense", category="Marketing"),
        _txn("3", "2024-02-11", 125, "expense", category="Office"),
        _txn("4", "2024-03-20", 900, "saving"),
        _txn("5", "2024-04-01", 2_500, "income", "pending"),
    ]
    baseline = insights.compute_metrics(ledger, SETTINGS)
    baseline_categories = {e["category"]: e["total"] for e in insights.build_category_breakdown(ledger)}

    for permutation in itertools.permutations(ledger):
        assert insights.compute_metrics(list(permutation), SETTINGS) == pytest.approx(baseline)
        categories = {e["category"]: e["total"] for e in insights.build_category_breakdown(permutation)}
        assert categories == baseline_categories


def test_monthly_series_is_chronological_and_sparse() -> None:
    ledger = [
        _txn("1", "2024-03-02", 100, "expense"),
        _txn("2", "2023-12-30", 2_000, "income"),
        _txn("3", "2024-03-15", 1_000, "income"),
        _txn("4", "2024-01-10", 40, "withdrawal"),
        _txn("5", "2024-03-20", 60, "saving"),
    ]
    random.Random(3).shuffle(ledger)
    series = insights.build_monthly_series(ledger, SETTINGS)

    assert [point["month"] for point in series] == ["2023-12", "2024-01", "2024-03"]
    march = series[-1]
    assert march["income"] == 1_000
    assert march["expense"] == 100
    assert march["saving"] == 60
    assert march["gross_profit"] == 900
    assert march["net_profit"] == pytest.approx(675)
    assert series[1]["withdrawal"] == 40


def test_monthly_income_sums_to_total_income() -> None:
    ledger = [
        _txn("1", "2024-01-05", 4_000.25, "income"),
        _txn("2", "2024-02-10", 1_999.75, "income", "pending"),
        _txn("3", "2024-02-11", 125, "expense"),
        _txn("4", "2024-06-01", 3_300, "income"),
    ]
    series = insights.build_monthly_series(ledger, SETTINGS)
    metrics = insights.compute_metrics(ledger, SETTINGS)

    assert sum(point["income"] for point in series) == pytest.approx(metrics["total_income"])


def test_monthly_series_empty() -> None:
    assert insights.build_monthly_series([], SETTINGS) == []


def test_category_breakdown_concrete_scenario() -> None:
    ledger = [
        _txn("1", "2024-05-01", 100, category="Marketing"),
        _txn("2", "2024-05-02", 75, category="Office"),
        _txn("3", "2024-05-03", 50, category="Marketing"),
        _txn("4", "2024-05-04", 9_000, "income", category="Commission"),
    ]
    breakdown = insights.build_category_breakdown(ledger)

    assert [(e["category"], e["total"]) for e in breakdown] == [("Marketing", 150), ("Office", 75)]
    assert breakdown[0]["share"] == pytest.approx(150 / 225)


def test_category_breakdown_ties_keep_first_seen_order() -> None:
    ledger = [
        _txn("1", "2024-05-01", 80, category="Travel"),
        _txn("2", "2024-05-02", 80, category="Education"),
        _txn("3", "2024-05-03", 30, category=""),
    ]
    breakdown = insights.build_category_breakdown(ledger)

    assert [e["category"] for e in breakdown] == ["Travel", "Education", "Uncategorized"]


def test_category_breakdown_ignores_non_expenses() -> None:
    ledger = [
        _txn("1", "2024-05-01", 80, "withdrawal", category="Owner"),
        _txn("2", "2024-05-02", 80, "saving", category="Reserve"),
    ]
    assert insights.build_category_breakdown(ledger) == []


def test_calculate_dashboard_bundles_every_view() -> None:
    ledger = _closing_and_staging()
    payload = insights.calculate_dashboard(iter(ledger), SETTINGS, "2024-05-15")

    assert set(payload) == {
        "metrics",
        "monthly_series",
        "category_breakdown",
        "forecast",
        "periods",
        "goal",
        "wealth",
    }
    assert payload["metrics"]["net_income"] == 4_500
    assert len(payload["forecast"]) == 12
    assert payload["periods"]["month"]["income"] == 10_000
    assert payload["goal"]["achieved"] == 10_000
    assert len(payload["wealth"]) == 10


def test_dashboard_with_timezone_aware_now_counts_today() -> None:
    ledger = [_txn("1", "2024-05-15", 1_000, kind="income")]

    naive = insights.calculate_dashboard(ledger, SETTINGS, pd.Timestamp("2024-05-15T12:00"))
    aware = insights.calculate_dashboard(ledger, SETTINGS, pd.Timestamp("2024-05-15T12:00", tz="UTC"))

    assert aware["periods"]["day"]["income"] == 1_000
    assert aware == naive
