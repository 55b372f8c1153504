"""Mini README: Document persistence for Money Check.

The ledger keeps three independent documents (entries, settlement reports,
profit state). Each is written as one unit after a mutation; there is no
transaction spanning documents. ``JsonFileDocumentStore`` is the on-disk
backend and ``InMemoryDocumentStore`` backs tests and throwaway sessions.
"""

from .base import (
    ENTRIES_DOCUMENT,
    PROFIT_DOCUMENT,
    SETTLEMENT_DOCUMENT,
    DocumentStore,
    InMemoryDocumentStore,
)
from .json_store import JsonFileDocumentStore

__all__ = [
    "DocumentStore",
    "ENTRIES_DOCUMENT",
    "InMemoryDocumentStore",
    "JsonFileDocumentStore",
    "PROFIT_DOCUMENT",
    "SETTLEMENT_DOCUMENT",
]
