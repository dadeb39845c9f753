"""Tests for the dashboard's sidebar and grid wiring."""

from __future__ import annotations

import app
from realty_ledger.models import GlobalSettings, GoalType


class _EchoSidebar:
    """Sidebar stand-in whose widgets return their initial value untouched."""

    def header(self, *args, **kwargs) -> None:
        return None

    def slider(self, label, min_value, max_value, value, **kwargs):
        # Streamlit rejects sliders whose bounds, value and step mix ints and floats
        assert type(min_value) is type(max_value) is type(value) is type(kwargs["step"])
        assert min_value <= value <= max_value
        return value

    def number_input(self, label, min_value=None, value=None, **kwargs):
        return value

    def radio(self, label, options, index=0, **kwargs):
        return options[index]


def test_opening_the_sidebar_keeps_fractional_rates(monkeypatch) -> None:
    persisted: list[bool] = []
    monkeypatch.setattr(app.st, "sidebar", _EchoSidebar())
    monkeypatch.setattr(app, "_persist", lambda: persisted.append(True))
    stored = GlobalSettings(
        tax_rate=22.5,
        reinvestment_rate=37.5,
        inflation_rate=2.7,
        goal_type=GoalType.SAVINGS,
    )

    result = app._scenario_controls(stored)

    assert result == stored
    assert persisted == []


def test_category_column_accepts_free_text() -> None:
    config = app._grid_column_config()

    assert config["category"]["type_config"]["type"] == "text"
    assert config["type"]["type_config"]["type"] == "selectbox"
