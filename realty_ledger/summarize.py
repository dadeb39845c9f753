"""LLM-powered portfolio commentary for Realty Ledger.

When no API key is configured or the call fails, a deterministic summary
built from the dashboard metrics is returned instead.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from openai import OpenAI

from . import insights, utils
from .config import get_settings
from .logs import get_logger
from .models import Transaction

log = get_logger(__name__)

RECENT_ACTIVITY = 5


def _build_snapshot(
    transactions: Sequence[Transaction],
    metrics: insights.DashboardMetrics,
) -> Dict[str, Any]:
    """Select the figures worth prompting with."""
    recent = sorted(transactions, key=lambda txn: txn.date, reverse=True)[:RECENT_ACTIVITY]
    return {
        "net_income": round(metrics["net_income"], 2),
        "total_revenue": round(metrics["total_income"], 2),
        "total_expenses": round(metrics["total_expense"], 2),
        "pending_commissions": round(metrics["pending_commissions"], 2),
        "net_cash_flow": round(metrics["net_cash_flow"], 2),
        "transaction_count": len(transactions),
        "recent_activity": [
            f"{txn.date}: {txn.description} ({utils.format_currency(txn.amount)})"
            for txn in recent
        ],
    }


def _build_prompt_from_snapshot(snapshot: Dict[str, Any]) -> str:
    return f"""
Act as a senior financial advisor for a real estate agent.
Analyse the financial data below and give a concise, professional summary
(max 150 words) followed by 3 bullet points on risks or opportunities.
Focus on cash flow, expense ratios and pipeline health. Currency USD.

DATA (JSON-like):
{snapshot}
"""


def _fallback_summary(
    transactions: Sequence[Transaction],
    metrics: insights.DashboardMetrics,
    breakdown: list[insights.CategoryEntry],
) -> str:
    """Return a compact human-friendly summary without calling an LLM."""

    revenue = utils.format_currency(metrics["total_income"])
    expenses = utils.format_currency(metrics["total_expense"])
    net_income = utils.format_currency(metrics["net_income"])
    pending = utils.format_currency(metrics["pending_commissions"])

    expense_ratio = ""
    if metrics["total_income"] > 0:
        ratio = metrics["total_expense"] / metrics["total_income"] * 100.0
        expense_ratio = f" Expenses run at {ratio:.1f}% of revenue."

    top_category = ""
    if breakdown:
        top = breakdown[0]
        top_category = (
            f" Largest cost: {top['category']} "
            f"({utils.format_currency(top['total'])}, {top['share'] * 100:.1f}%)."
        )

    return (
        f"Highlights: across {len(transactions):,} transactions you earned {revenue} "
        f"against {expenses} of expenses, for {net_income} net after tax."
        f"{expense_ratio}{top_category} Pipeline: {pending} in pending commissions after tax."
    )


def analyze_portfolio(
    transactions: Sequence[Transaction],
    metrics: insights.DashboardMetrics,
    *,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
) -> str:
    """Summarise the portfolio with an LLM, falling back to a local summary."""

    config = get_settings().openai
    api_key = api_key or config.api_key
    model = model or config.model

    def _fallback(reason: str) -> str:
        log.info("summary_fallback", reason=reason, model=model)
        return _fallback_summary(transactions, metrics, insights.build_category_breakdown(transactions))

    if not api_key:
        return _fallback("OPENAI_API_KEY not configured")

    prompt = _build_prompt_from_snapshot(_build_snapshot(transactions, metrics))
    try:
        client = OpenAI(api_key=api_key)
        resp = client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )
        text = (resp.choices[0].message.content or "").strip()
    except Exception as e:
        log.warning("summary_llm_failed", error=f"{type(e).__name__}: {e}")
        return _fallback(f"LLM call failed: {type(e).__name__}")

    if not text:
        return _fallback("Empty LLM response")
    return text
