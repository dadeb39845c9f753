"""Create, edit and delete operations on the transaction collection.

Every operation returns a new list (or settings object); inputs are never
modified in place.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Sequence

from .logs import get_logger
from .models import GlobalSettings, Transaction, TransactionStatus, TransactionType

log = get_logger(__name__)


class TransactionNotFoundError(KeyError):
    """Raised when an edit targets an id that is not in the ledger."""


def new_transaction(today: date | None = None, **fields: Any) -> Transaction:
    """Build a fresh ledger entry with a new id, dated today and pending."""

    values: dict[str, Any] = {
        "date": today or date.today(),
        "description": "New Entry",
        "category": "Marketing",
        "amount": 0.0,
        "type": TransactionType.EXPENSE,
        "status": TransactionStatus.PENDING,
    }
    values.update(fields)
    return Transaction(**values)


def _index_of(transactions: Sequence[Transaction], txn_id: str) -> int:
    for index, txn in enumerate(transactions):
        if txn.id == txn_id:
            return index
    raise TransactionNotFoundError(txn_id)


def add_transaction(transactions: Sequence[Transaction], txn: Transaction) -> list[Transaction]:
    log.debug("transaction_added", id=txn.id, type=txn.type.value)
    return [*transactions, txn]


def update_transaction(
    transactions: Sequence[Transaction],
    txn_id: str,
    **changes: Any,
) -> list[Transaction]:
    """Replace the entry ``txn_id`` with a re-validated copy carrying ``changes``."""

    index = _index_of(transactions, txn_id)
    current = transactions[index]
    merged = {**current.model_dump(), **changes, "id": current.id}
    updated = Transaction.model_validate(merged)
    log.debug("transaction_updated", id=txn_id, fields=sorted(changes))
    return [*transactions[:index], updated, *transactions[index + 1 :]]


def delete_transaction(transactions: Sequence[Transaction], txn_id: str) -> list[Transaction]:
    index = _index_of(transactions, txn_id)
    log.debug("transaction_deleted", id=txn_id)
    return [*transactions[:index], *transactions[index + 1 :]]


def toggle_status(transactions: Sequence[Transaction], txn_id: str) -> list[Transaction]:
    """Flip an entry between pending and completed."""

    index = _index_of(transactions, txn_id)
    return update_transaction(transactions, txn_id, status=transactions[index].status.toggled())


def update_settings(settings: GlobalSettings, **changes: Any) -> GlobalSettings:
    """Return a new, validated settings object with ``changes`` applied."""

    merged = {**settings.model_dump(), **changes}
    return GlobalSettings.model_validate(merged)
