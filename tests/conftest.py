"""Mini README: Shared fixtures for the Money Check test-suite.

Structure:
    * clock / id_factory - deterministic replacements for wall time and uuids.
    * store - fresh in-memory document store per test.
    * workspace - ledger workspace wired to the fixtures above.
    * make_draft - builds entry form payloads with zeroed amounts.
"""

from __future__ import annotations

import itertools
from typing import Callable, Dict

import pytest

from moneycheck.storage import InMemoryDocumentStore
from moneycheck.workspace import LedgerWorkspace


@pytest.fixture
def clock() -> Callable[[], int]:
    ticks = itertools.count(1_000)
    return lambda: next(ticks)


@pytest.fixture
def id_factory() -> Callable[[], str]:
    sequence = itertools.count(1)
    return lambda: f"id_{next(sequence):04d}"


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def workspace(store, clock, id_factory) -> LedgerWorkspace:
    return LedgerWorkspace(store, clock=clock, id_factory=id_factory)


@pytest.fixture
def make_draft() -> Callable[..., Dict[str, object]]:
    def _make(date: str, **overrides: object) -> Dict[str, object]:
        draft: Dict[str, object] = {
            "date": date,
            "client": "",
            "event_name": "",
            "event_detail": "",
            "memo": "",
        }
        for currency in ("krw", "bb", "kb", "usd"):
            draft[f"{currency}_income"] = 0
            draft[f"{currency}_expense"] = 0
        draft.update(overrides)
        return draft

    return _make
