"""Smoke tests for the plotly chart builders."""

from __future__ import annotations

from datetime import date

import plotly.graph_objects as go
from realty_ledger import insights, viz
from realty_ledger.storage import seed_user_data


def _payload() -> insights.DashboardPayload:
    reference = date(2024, 3, 12)
    data = seed_user_data(reference)
    return insights.calculate_dashboard(data.transactions, data.settings, reference)


def test_dashboard_charts_return_figures() -> None:
    payload = _payload()

    cash_flow = viz.plot_cash_flow(payload["monthly_series"], tax_rate=25)
    assert isinstance(cash_flow, go.Figure)
    assert len(cash_flow.data) == 3

    assert isinstance(viz.plot_category_donut(payload["category_breakdown"]), go.Figure)
    assert isinstance(viz.plot_wealth(payload["wealth"]), go.Figure)

    forecast_fig = viz.plot_forecast(payload["forecast"])
    # seed ledger has one pending deal in the reference month
    assert [trace.name for trace in forecast_fig.data] == [
        "Forecast income",
        "Projected expense",
        "Pending deals",
    ]


def test_empty_inputs_render_placeholder_figures() -> None:
    for figure in (
        viz.plot_cash_flow([]),
        viz.plot_category_donut([]),
        viz.plot_forecast([]),
        viz.plot_wealth([]),
    ):
        assert isinstance(figure, go.Figure)
        assert not figure.data
        assert figure.layout.annotations


def test_fold_categories_groups_the_tail() -> None:
    breakdown = [
        {"category": name, "total": total, "share": total / 100}
        for name, total in [("A", 40), ("B", 30), ("C", 20), ("D", 6), ("E", 4)]
    ]
    folded = viz.fold_categories(breakdown, top_n=3)

    assert [entry["category"] for entry in folded] == ["A", "B", "C", "Other"]
    assert folded[-1]["total"] == 10
    assert viz.fold_categories(breakdown, top_n=5) == breakdown
