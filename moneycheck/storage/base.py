"""Mini README: Abstract document store shared by every ledger collection.

Structure:
    * DocumentStore - abstract key-value interface holding JSON-compatible payloads.
    * InMemoryDocumentStore - serialising in-process implementation.

Stores never interpret payloads. Loaders in the ledger, settlement and profit
modules coerce whatever comes back, so a store only has to return ``None``
when a document is missing or cannot be decoded.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

ENTRIES_DOCUMENT = "entries"
SETTLEMENT_DOCUMENT = "settlement_reports"
PROFIT_DOCUMENT = "profit_state"


class DocumentStore(ABC):
    """Base interface for named JSON document persistence."""

    @abstractmethod
    def load(self, name: str) -> Optional[Any]:
        """Return the decoded document, or ``None`` when missing or unreadable."""

    @abstractmethod
    def save(self, name: str, payload: Any) -> None:
        """Replace the named document with ``payload`` as a single write."""

    @abstractmethod
    def delete(self, name: str) -> None:
        """Remove the named document if present."""


class InMemoryDocumentStore(DocumentStore):
    """Keep documents as encoded JSON strings so callers never share state."""

    def __init__(self, documents: Optional[Dict[str, str]] = None) -> None:
        self._documents: Dict[str, str] = dict(documents or {})

    def load(self, name: str) -> Optional[Any]:
        raw = self._documents.get(name)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            LOGGER.warning("Document %s is not valid JSON; treating as empty", name)
            return None

    def save(self, name: str, payload: Any) -> None:
        self._documents[name] = json.dumps(payload, ensure_ascii=False)

    def delete(self, name: str) -> None:
        self._documents.pop(name, None)

    def raw(self, name: str) -> Optional[str]:
        """Return the encoded document text, mainly for inspection in tests."""

        return self._documents.get(name)
