"""
Data models for Realty Ledger.

Transactions and scenario settings are validated here, at the edge of the
system. The derivation engine only ever sees instances (or plain mappings
with the same shape) of these models.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TransactionType(str, Enum):
    """Direction of a ledger entry.

    Older stored records predate ``withdrawal`` and ``saving`` and may carry
    no type at all; anything unrecognised is read as an expense.
    """

    INCOME = "income"
    EXPENSE = "expense"
    WITHDRAWAL = "withdrawal"
    SAVING = "saving"

    @classmethod
    def _missing_(cls, value: object) -> "TransactionType":
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return cls.EXPENSE


class TransactionStatus(str, Enum):
    """Closing state of a ledger entry. Income uses ``pending`` for open deals."""

    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def _missing_(cls, value: object) -> "TransactionStatus":
        if isinstance(value, str) and value.strip().lower() == cls.PENDING.value:
            return cls.PENDING
        return cls.COMPLETED

    def toggled(self) -> "TransactionStatus":
        if self is TransactionStatus.PENDING:
            return TransactionStatus.COMPLETED
        return TransactionStatus.PENDING


class GoalType(str, Enum):
    """Which period figure the monthly goal is measured against."""

    REVENUE = "revenue"
    SAVINGS = "savings"

    @classmethod
    def _missing_(cls, value: object) -> "GoalType":
        return cls.REVENUE


def new_transaction_id() -> str:
    return uuid4().hex


class Transaction(BaseModel):
    """A single ledger entry. Edits produce a new instance."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(default_factory=new_transaction_id)
    date: str
    description: str = ""
    category: str = ""
    amount: float = Field(default=0.0, ge=0)
    type: TransactionType = TransactionType.EXPENSE
    status: TransactionStatus = TransactionStatus.COMPLETED

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        if v is None or v == "":
            return new_transaction_id()
        return str(v)

    @field_validator("date", mode="before")
    @classmethod
    def normalise_date(cls, v: Any) -> Any:
        if isinstance(v, datetime):
            return v.date().isoformat()
        if isinstance(v, date):
            return v.isoformat()
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("description", "category", mode="before")
    @classmethod
    def blank_text(cls, v: Any) -> Any:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> TransactionType:
        return TransactionType(v)

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, v: Any) -> TransactionStatus:
        return TransactionStatus(v)


class GlobalSettings(BaseModel):
    """
    Scenario settings applied uniformly to every derivation.

    Attribute names are snake_case; payloads persisted by earlier revisions
    use camelCase (``taxRate``, ``goalType``) and load through the aliases.
    Fields missing from an older payload take the defaults below.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    tax_rate: float = Field(default=25.0, ge=0, le=50)
    inflation_rate: float = Field(default=3.0, ge=0, le=10)
    reinvestment_rate: float = Field(default=50.0, ge=0, le=100)
    annual_withdrawal: float = Field(default=0.0, ge=0)
    rmd_start_year: int = Field(default=10, ge=0)
    monthly_revenue_goal: float = Field(default=35_000.0, ge=0)
    goal_type: GoalType = GoalType.REVENUE

    @field_validator("goal_type", mode="before")
    @classmethod
    def coerce_goal_type(cls, v: Any) -> GoalType:
        return GoalType(v)

    @property
    def tax_multiplier(self) -> float:
        return 1 - self.tax_rate / 100

    @property
    def inflation_multiplier(self) -> float:
        return 1 + self.inflation_rate / 100
