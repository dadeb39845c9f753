"""Tests for the portfolio commentary fallback path."""

from __future__ import annotations

from datetime import date

import pytest
from realty_ledger import insights, summarize
from realty_ledger.config import get_settings
from realty_ledger.storage import seed_user_data


@pytest.fixture
def seeded():
    data = seed_user_data(date(2024, 3, 12))
    return data.transactions, insights.compute_metrics(data.transactions, data.settings)


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_summary_without_api_key_uses_fallback(seeded) -> None:
    transactions, metrics = seeded
    text = summarize.analyze_portfolio(transactions, metrics)

    assert text.startswith("Highlights")
    assert "$30,450.00" in text
    assert "Staging" in text


def test_summary_falls_back_when_client_fails(seeded, monkeypatch) -> None:
    transactions, metrics = seeded

    class ExplodingClient:
        def __init__(self, api_key: str) -> None:
            raise RuntimeError("network down")

    monkeypatch.setattr(summarize, "OpenAI", ExplodingClient)
    text = summarize.analyze_portfolio(transactions, metrics, api_key="sk-test")

    assert text.startswith("Highlights")


def test_summary_returns_model_text(seeded, monkeypatch) -> None:
    transactions, metrics = seeded
    captured = {}

    class FakeCompletions:
        def create(self, **kwargs):
            captured.update(kwargs)
            message = type("Message", (), {"content": "  Strong pipeline.  "})()
            choice = type("Choice", (), {"message": message})()
            return type("Response", (), {"choices": [choice]})()

    class FakeClient:
        def __init__(self, api_key: str) -> None:
            self.chat = type("Chat", (), {"completions": FakeCompletions()})()

    monkeypatch.setattr(summarize, "OpenAI", FakeClient)
    text = summarize.analyze_portfolio(transactions, metrics, api_key="sk-test", model="gpt-test")

    assert text == "Strong pipeline."
    assert captured["model"] == "gpt-test"
    assert "real estate agent" in captured["messages"][0]["content"]
