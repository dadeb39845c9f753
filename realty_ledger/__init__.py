"""Core modules for the Realty Ledger dashboard."""

from . import (
    config,
    forecast,
    insights,
    ledger,
    logs,
    models,
    periods,
    seed,
    storage,
    summarize,
    summary,
    utils,
    viz,
)

__all__ = [
    "config",
    "forecast",
    "insights",
    "ledger",
    "logs",
    "models",
    "periods",
    "seed",
    "storage",
    "summarize",
    "summary",
    "utils",
    "viz",
]
