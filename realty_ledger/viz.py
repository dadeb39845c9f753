"""Visualization utilities for Realty Ledger."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

OTHER_CATEGORY = "Other"
PALETTE = ["#6366f1", "#10b981", "#f59e0b", "#ef4444", "#ec4899", "#8b5cf6", "#06b6d4"]


def _empty_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        showarrow=False,
        x=0.5,
        y=0.5,
        xref="paper",
        yref="paper",
        font=dict(size=14, color="#6c757d"),
    )
    fig.update_layout(margin=dict(l=0, r=0, t=20, b=20))
    return fig


def fold_categories(
    breakdown: Iterable[Mapping[str, object]],
    top_n: int = 6,
) -> list[dict[str, object]]:
    """Keep the ``top_n`` largest categories and fold the rest into "Other"."""

    entries = [dict(entry) for entry in breakdown]
    if len(entries) <= top_n:
        return entries

    head, tail = entries[:top_n], entries[top_n:]
    head.append(
        {
            "category": OTHER_CATEGORY,
            "total": float(sum(float(entry["total"]) for entry in tail)),
            "share": float(sum(float(entry.get("share", 0.0)) for entry in tail)),
        }
    )
    return head


def plot_cash_flow(series: Iterable[Mapping[str, object]], tax_rate: float | None = None) -> go.Figure:
    """Monthly income and expense bars with the post-tax net profit line."""

    data = list(series)
    if not data:
        return _empty_figure("No transactions recorded yet.")

    df = pd.DataFrame(data)
    df["month"] = pd.to_datetime(df["month"], format="%Y-%m")

    net_label = "Net profit" if tax_rate is None else f"Net profit (tax {tax_rate:g}%)"

    fig = go.Figure()
    fig.add_bar(name="Income", x=df["month"], y=df["income"], marker_color="#10b981")
    fig.add_bar(name="Expense", x=df["month"], y=df["expense"], marker_color="#ef4444")
    fig.add_trace(
        go.Scatter(
            name=net_label,
            x=df["month"],
            y=df["net_profit"],
            mode="lines+markers",
            line=dict(color="#6366f1", width=2),
        )
    )
    fig.update_layout(
        barmode="group",
        title="Monthly cash flow",
        yaxis_title="Amount",
        xaxis_title="Month",
        margin=dict(l=0, r=0, t=45, b=0),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    return fig


def plot_category_donut(breakdown: Iterable[Mapping[str, object]], top_n: int = 6) -> go.Figure:
    data = fold_categories(breakdown, top_n=top_n)
    if not data:
        return _empty_figure("No expenses to display.")

    df = pd.DataFrame(data)
    fig = px.pie(
        df,
        names="category",
        values="total",
        hole=0.55,
        title="Expense allocation",
        color_discrete_sequence=PALETTE,
    )
    fig.update_traces(textinfo="label+percent", pull=[0.03] * len(df))
    fig.update_layout(margin=dict(l=0, r=0, t=40, b=0))
    return fig


def plot_forecast(points: Iterable[Mapping[str, object]]) -> go.Figure:
    """12-month outlook: forecast income vs inflation-adjusted expenses."""

    data = list(points)
    if not data:
        return _empty_figure("No forecast available.")

    df = pd.DataFrame(data)
    has_pending = df["pending"] > 0

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            name="Forecast income",
            x=df["label"],
            y=df["forecast_income"],
            mode="lines",
            fill="tozeroy",
            line=dict(color="#10b981", width=2),
        )
    )
    fig.add_trace(
        go.Scatter(
            name="Projected expense",
            x=df["label"],
            y=df["projected_expense"],
            mode="lines",
            line=dict(color="#ef4444", dash="dash", width=2),
        )
    )
    if has_pending.any():
        fig.add_trace(
            go.Scatter(
                name="Pending deals",
                x=df.loc[has_pending, "label"],
                y=df.loc[has_pending, "pending"],
                mode="markers",
                marker=dict(
                    color="#f59e0b",
                    size=np.clip(df.loc[has_pending, "pending"] / df["pending"].max() * 18, 8, 18),
                ),
            )
        )
    fig.update_layout(
        title="12-month income forecast",
        xaxis_title="Month",
        yaxis_title="Amount",
        margin=dict(l=0, r=0, t=45, b=0),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    return fig


def plot_wealth(points: Iterable[Mapping[str, object]]) -> go.Figure:
    data = list(points)
    if not data:
        return _empty_figure("No wealth projection available.")

    df = pd.DataFrame(data)
    fig = px.bar(
        df,
        x="year",
        y="wealth",
        labels={"year": "Year", "wealth": "Projected wealth"},
        title="Projected wealth",
    )
    fig.update_traces(marker_color=np.where(df["wealth"] >= 0, "#6366f1", "#ef4444").tolist())
    fig.update_layout(margin=dict(l=0, r=0, t=40, b=0))
    return fig
