"""
Persistence boundary for Realty Ledger.

Stores keep one ``{transactions, settings}`` document per user key. The
document is validated on the way in by :class:`UserData`, which also upgrades
payloads written by older revisions of the app (missing ``status``,
``withdrawal``/``saving`` types, ``goalType``).
"""

from __future__ import annotations

import json
import math
from abc import ABC, abstractmethod
from datetime import date
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .logs import get_logger
from .models import GlobalSettings, Transaction
from .seed import DEFAULT_SETTINGS, seed_transactions

log = get_logger(__name__)


class StorageError(Exception):
    """Base exception for storage failures."""


class UserData(BaseModel):
    """Everything persisted for one user."""

    model_config = ConfigDict(frozen=True)

    transactions: list[Transaction] = Field(default_factory=list)
    settings: GlobalSettings = Field(default_factory=lambda: DEFAULT_SETTINGS)

    @classmethod
    def from_payload(cls, payload: Any) -> "UserData":
        """Build from a raw stored document, skipping records that fail validation."""

        if not isinstance(payload, dict):
            raise StorageError(f"Expected a mapping, got {type(payload).__name__}")

        transactions: list[Transaction] = []
        for index, record in enumerate(payload.get("transactions") or []):
            try:
                transactions.append(Transaction.model_validate(record))
            except ValidationError as e:
                log.warning(
                    "transaction_record_skipped",
                    index=index,
                    errors=e.error_count(),
                    detail=str(e).splitlines()[0],
                )

        raw_settings = payload.get("settings") or {}
        try:
            settings = GlobalSettings.model_validate(raw_settings)
        except ValidationError as e:
            log.warning("settings_reset_to_defaults", errors=e.error_count())
            settings = DEFAULT_SETTINGS

        return cls(transactions=transactions, settings=settings)

    def to_payload(self) -> dict[str, Any]:
        return {
            "transactions": [txn.model_dump(mode="json") for txn in self.transactions],
            "settings": self.settings.model_dump(mode="json", by_alias=True),
        }


def seed_user_data(reference: date | None = None) -> UserData:
    return UserData(transactions=seed_transactions(reference), settings=DEFAULT_SETTINGS)


class LedgerStore(ABC):
    """
    Abstract interface for per-user ledger storage.

    Implementations raise :class:`StorageError` when the backend is unusable.
    """

    @abstractmethod
    def load(self, user_key: str) -> Optional[UserData]:
        """Return the stored data for ``user_key``, or None if there is none."""

    @abstractmethod
    def save(self, user_key: str, data: UserData) -> None:
        """Persist ``data`` for ``user_key``."""


class InMemoryStore(LedgerStore):
    """Dictionary-backed store for tests and throwaway sessions."""

    def __init__(self) -> None:
        self._documents: dict[str, dict[str, Any]] = {}

    def load(self, user_key: str) -> Optional[UserData]:
        document = self._documents.get(user_key)
        if document is None:
            return None
        return UserData.from_payload(document)

    def save(self, user_key: str, data: UserData) -> None:
        self._documents[user_key] = data.to_payload()


def _sanitize_json_compat(value: Any) -> Any:
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return value
    if isinstance(value, dict):
        return {key: _sanitize_json_compat(val) for key, val in value.items()}
    if isinstance(value, list):
        return [_sanitize_json_compat(item) for item in value]
    return value


class JsonFileStore(LedgerStore):
    """All users in a single JSON document on local disk, keyed by user."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            raw_text = self.path.read_text(encoding="utf-8").strip()
            if not raw_text:
                return {}
            raw = json.loads(raw_text)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            log.warning("store_file_unreadable", path=str(self.path), error=str(e))
            return {}
        except OSError as e:
            raise StorageError(f"Failed to read {self.path}: {e}") from e
        return raw if isinstance(raw, dict) else {}

    def load(self, user_key: str) -> Optional[UserData]:
        document = self._read_all().get(user_key)
        if document is None:
            return None
        return UserData.from_payload(document)

    def save(self, user_key: str, data: UserData) -> None:
        documents = self._read_all()
        documents[user_key] = _sanitize_json_compat(data.to_payload())
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as handle:
                json.dump(documents, handle, indent=2)
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}") from e


class FallbackStore(LedgerStore):
    """
    Primary store with a local fallback.

    Reads and writes go to the primary; when it raises :class:`StorageError`
    the fallback is used instead. Users found in neither get seed data.
    """

    def __init__(
        self,
        primary: LedgerStore,
        fallback: LedgerStore,
        seed_factory: Callable[[], UserData] = seed_user_data,
    ) -> None:
        self.primary = primary
        self.fallback = fallback
        self.seed_factory = seed_factory

    def load(self, user_key: str) -> UserData:
        data: Optional[UserData] = None
        try:
            data = self.primary.load(user_key)
        except StorageError as e:
            log.warning("store_load_failed", store="primary", user=user_key, error=str(e))

        if data is None:
            try:
                data = self.fallback.load(user_key)
            except StorageError as e:
                log.warning("store_load_failed", store="fallback", user=user_key, error=str(e))

        if data is None:
            log.info("store_seeded", user=user_key)
            data = self.seed_factory()
        return data

    def save(self, user_key: str, data: UserData) -> None:
        try:
            self.primary.save(user_key, data)
        except StorageError as e:
            log.warning("store_save_failed", store="primary", user=user_key, error=str(e))
            self.fallback.save(user_key, data)
