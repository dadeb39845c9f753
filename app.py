"""Streamlit entry point for the Realty Ledger dashboard."""

from __future__ import annotations

from datetime import date

import pandas as pd
import streamlit as st
from pydantic import ValidationError

from realty_ledger import insights, ledger, seed, summarize, utils, viz
from realty_ledger.config import get_settings
from realty_ledger.logs import configure_logging
from realty_ledger.models import GlobalSettings, GoalType, Transaction
from realty_ledger.storage import FallbackStore, InMemoryStore, JsonFileStore, UserData

GRID_COLUMNS = ["id", "date", "description", "category", "amount", "type", "status"]


@st.cache_resource(show_spinner=False)
def _store() -> FallbackStore:
    app_settings = get_settings().app
    return FallbackStore(primary=JsonFileStore(app_settings.store_path), fallback=InMemoryStore())


@st.cache_data(show_spinner=False, ttl=300)
def _commentary(payload: dict, metrics: dict) -> str:
    data = UserData.from_payload(payload)
    return summarize.analyze_portfolio(data.transactions, metrics)


def _load_user(user_key: str) -> None:
    if st.session_state.get("user_key") == user_key:
        return
    data = _store().load(user_key)
    st.session_state["user_key"] = user_key
    st.session_state["transactions"] = list(data.transactions)
    st.session_state["settings"] = data.settings


def _persist() -> None:
    data = UserData(
        transactions=st.session_state["transactions"],
        settings=st.session_state["settings"],
    )
    _store().save(st.session_state["user_key"], data)


def _metric_card(label: str, value: str, meta: str = "", tone: str = "neutral") -> str:
    return f"""
    <div class="hero-card">
        <div class="hero-card__label">{label}</div>
        <div class="hero-card__value hero-card__value--{tone}">{value}</div>
        <div class="hero-card__meta">{meta}</div>
    </div>
    """


def _scenario_controls(settings: GlobalSettings) -> GlobalSettings:
    sidebar = st.sidebar
    sidebar.header("Scenarios")
    changes = {
        "reinvestment_rate": sidebar.slider(
            "Savings rate (%)", 0.0, 100.0, float(settings.reinvestment_rate), step=5.0,
            help="Share of post-tax net income reinvested for growth.",
        ),
        "inflation_rate": sidebar.slider(
            "Inflation rate (%)", 0.0, 10.0, float(settings.inflation_rate), step=0.1,
            help="Annual rate applied to forward expense projections.",
        ),
        "tax_rate": sidebar.slider(
            "Effective tax rate (%)", 0.0, 50.0, float(settings.tax_rate), step=0.5,
            help="Share of gross profit reserved for taxes.",
        ),
        "annual_withdrawal": sidebar.number_input(
            "Annual owner's draw", min_value=0.0, value=float(settings.annual_withdrawal), step=1000.0,
        ),
        "monthly_revenue_goal": sidebar.number_input(
            "Monthly goal", min_value=0.0, value=float(settings.monthly_revenue_goal), step=1000.0,
        ),
        "goal_type": sidebar.radio(
            "Goal measures",
            [GoalType.REVENUE.value, GoalType.SAVINGS.value],
            index=0 if settings.goal_type is GoalType.REVENUE else 1,
            horizontal=True,
        ),
    }
    updated = ledger.update_settings(settings, **changes)
    if updated != settings:
        st.session_state["settings"] = updated
        _persist()
    return updated


def _period_card(summary: dict, currency: str, goal: dict | None = None) -> None:
    st.markdown(f"**{summary['period']}**")
    st.caption(
        f"Income {utils.format_currency(summary['income'], currency)} · "
        f"Spending {utils.format_currency(summary['expense'], currency)}"
        + (
            f" · Withdrawn {utils.format_currency(summary['withdrawal'], currency)}"
            if summary["withdrawal"] > 0
            else ""
        )
    )
    st.markdown(
        f"Net flow **{utils.format_currency(summary['net'], currency)}** "
        f"(after tax {utils.format_currency(summary['net_after_tax'], currency)})"
    )
    if goal is not None:
        st.progress(goal["percent"] / 100, text=f"{goal['ratio']:.0f}% of {utils.format_currency(goal['target'], currency)} {goal['goal_type']} goal")


def _grid_column_config() -> dict:
    # categories are free text; the seed vocabulary is only a hint
    known = ", ".join([*seed.INCOME_CATEGORIES, *seed.EXPENSE_CATEGORIES])
    return {
        "amount": st.column_config.NumberColumn("Amount", min_value=0.0, format="%.2f"),
        "type": st.column_config.SelectboxColumn(
            "Type", options=["income", "expense", "withdrawal", "saving"]
        ),
        "status": st.column_config.SelectboxColumn("Status", options=["pending", "completed"]),
        "category": st.column_config.TextColumn("Category", help=f"Any label, e.g. {known}"),
    }


def _transaction_grid(transactions: list[Transaction]) -> None:
    st.markdown("### Transactions")
    frame = pd.DataFrame(
        [txn.model_dump(mode="json") for txn in transactions],
        columns=GRID_COLUMNS,
    ).sort_values("date", ascending=False)

    edited = st.data_editor(
        frame,
        hide_index=True,
        use_container_width=True,
        disabled=["id"],
        column_config=_grid_column_config(),
        key="ledger_grid",
    )

    if not edited.equals(frame):
        try:
            updated = [Transaction.model_validate(row) for row in edited.to_dict("records")]
        except ValidationError as e:
            st.error(f"Could not apply edit: {e.errors()[0]['msg']}")
        else:
            order = {txn.id: index for index, txn in enumerate(transactions)}
            st.session_state["transactions"] = sorted(updated, key=lambda txn: order.get(txn.id, len(order)))
            _persist()
            st.rerun()

    add_col, toggle_col, delete_col = st.columns(3)
    with add_col:
        if st.button("Add entry", use_container_width=True):
            st.session_state["transactions"] = ledger.add_transaction(transactions, ledger.new_transaction())
            _persist()
            st.rerun()

    ids = [txn.id for txn in transactions]
    labels = {txn.id: f"{txn.date} · {txn.description}" for txn in transactions}
    selected = st.selectbox("Entry", ids, format_func=labels.get) if ids else None
    with toggle_col:
        if st.button("Toggle pending/completed", use_container_width=True, disabled=selected is None):
            st.session_state["transactions"] = ledger.toggle_status(transactions, selected)
            _persist()
            st.rerun()
    with delete_col:
        if st.button("Delete entry", use_container_width=True, disabled=selected is None):
            st.session_state["transactions"] = ledger.delete_transaction(transactions, selected)
            _persist()
            st.rerun()


def main() -> None:
    """Render the Realty Ledger Streamlit application."""

    app_settings = get_settings().app
    configure_logging(app_settings.log_level, json=app_settings.log_json)
    currency = app_settings.currency_symbol

    st.set_page_config(page_title="Realty Ledger", page_icon="🏡", layout="wide")
    st.markdown(
        """
        <style>
        .hero-card {
            background: #ffffff;
            border-radius: 18px;
            border: 1px solid rgba(226, 232, 240, 0.9);
            padding: 1.1rem 1.25rem;
            box-shadow: 0 24px 48px -40px rgba(15, 23, 42, 0.55);
        }
        .hero-card__label {
            font-size: 0.78rem;
            font-weight: 600;
            text-transform: uppercase;
            letter-spacing: 0.08em;
            color: #64748b;
            margin-bottom: 0.4rem;
        }
        .hero-card__value {
            font-size: 1.8rem;
            font-weight: 700;
            line-height: 1.1;
            color: #0f172a;
        }
        .hero-card__value--positive { color: #15803d; }
        .hero-card__value--negative { color: #dc2626; }
        .hero-card__meta {
            font-size: 0.8rem;
            color: #64748b;
            margin-top: 0.35rem;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )

    user_key = st.sidebar.text_input("Workspace", value=app_settings.default_user).strip()
    if not user_key:
        st.info("Enter a workspace name to load a ledger.")
        return
    _load_user(user_key)

    settings = _scenario_controls(st.session_state["settings"])
    transactions: list[Transaction] = st.session_state["transactions"]
    today = date.today()

    payload = insights.calculate_dashboard(transactions, settings, today)
    metrics = payload["metrics"]

    st.title("Realty Ledger")
    st.caption(f"{len(transactions):,} transactions · tax {settings.tax_rate:g}% · inflation {settings.inflation_rate:g}%")

    cards = st.columns(4, gap="medium")
    cards[0].markdown(
        _metric_card(
            "Net income (post-tax)",
            utils.format_currency(metrics["net_income"], currency),
            f"Gross {utils.format_currency(metrics['gross_income'], currency)}",
            "positive" if metrics["net_income"] >= 0 else "negative",
        ),
        unsafe_allow_html=True,
    )
    cards[1].markdown(
        _metric_card(
            "Net cash flow",
            utils.format_currency(metrics["net_cash_flow"], currency),
            f"Withdrawn {utils.format_currency(metrics['total_withdrawal'], currency)} · "
            f"Saved {utils.format_currency(metrics['total_saving'], currency)}",
            "positive" if metrics["net_cash_flow"] >= 0 else "negative",
        ),
        unsafe_allow_html=True,
    )
    cards[2].markdown(
        _metric_card(
            "Pending commissions",
            utils.format_currency(metrics["pending_commissions"], currency),
            f"{utils.format_currency(metrics['pending_amount'], currency)} before tax",
        ),
        unsafe_allow_html=True,
    )
    cards[3].markdown(
        _metric_card(
            "Scenario net (annualised)",
            utils.format_currency(metrics["projected_scenario_net"], currency),
            f"Next-year expenses {utils.format_currency(metrics['projected_next_year_expense'], currency)}",
            "positive" if metrics["projected_scenario_net"] >= 0 else "negative",
        ),
        unsafe_allow_html=True,
    )

    main_col, insight_col = st.columns([2.2, 1], gap="large")
    with main_col:
        st.plotly_chart(
            viz.plot_cash_flow(payload["monthly_series"], tax_rate=settings.tax_rate),
            use_container_width=True,
            config={"displayModeBar": False},
        )
        donut_col, table_col = st.columns(2, gap="large")
        with donut_col:
            st.plotly_chart(
                viz.plot_category_donut(payload["category_breakdown"]),
                use_container_width=True,
                config={"displayModeBar": False},
            )
        with table_col:
            st.markdown("### Expense ranking")
            if payload["category_breakdown"]:
                table = pd.DataFrame(payload["category_breakdown"]).rename(
                    columns={"category": "Category", "total": "Amount", "share": "Share"}
                )
                table["Amount"] = table["Amount"].apply(lambda value: utils.format_currency(value, currency))
                table["Share"] = table["Share"].apply(lambda value: f"{value * 100:.1f}%")
                st.table(table.set_index("Category"))
            else:
                st.caption("No expenses recorded.")

        st.plotly_chart(
            viz.plot_forecast(payload["forecast"]),
            use_container_width=True,
            config={"displayModeBar": False},
        )
        _transaction_grid(transactions)

    with insight_col:
        st.markdown("### Live breakdown")
        periods = payload["periods"]
        _period_card(periods["day"], currency)
        _period_card(periods["week"], currency)
        _period_card(periods["month"], currency, goal=payload["goal"])

        st.markdown("### Wealth calculator")
        wealth = payload["wealth"]
        st.metric(
            f"Projected wealth in {len(wealth)} years",
            utils.format_currency(wealth[-1]["wealth"] if wealth else 0.0, currency),
        )
        st.caption(
            "Invested savings compounded annually at a 7% market return on the reinvested share, "
            "after tax, inflation and the owner's draw."
        )
        st.plotly_chart(viz.plot_wealth(wealth), use_container_width=True, config={"displayModeBar": False})

        st.markdown("### Advisor notes")
        data = UserData(transactions=transactions, settings=settings)
        with st.spinner("Generating portfolio commentary…"):
            st.write(_commentary(data.to_payload(), dict(metrics)))


if __name__ == "__main__":
    main()
