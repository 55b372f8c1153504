"""Mini README: Tests for running balances across the whole ledger.

Structure:
    * a worked three-entry example in one currency.
    * replay check against a plain loop over randomised entries.
    * month filtering keeps ledger-wide balances.
"""

from __future__ import annotations

import random

import pytest

from moneycheck.ledger import Currency, compute_balances, ledger_rows, running_balance


def test_running_balance_follows_date_then_creation(workspace, make_draft) -> None:
    """Balances accumulate oldest first regardless of insertion order."""

    late = workspace.add_entry(make_draft("2025-01-03", krw_income=1000))
    early = workspace.add_entry(make_draft("2025-01-01", krw_income=500))
    middle = workspace.add_entry(make_draft("2025-01-02", krw_expense=200))

    balances = running_balance(workspace.entries.list(), Currency.KRW)

    assert balances[early.id] == pytest.approx(500)
    assert balances[middle.id] == pytest.approx(300)
    assert balances[late.id] == pytest.approx(1300)


def test_balances_match_a_plain_replay(workspace, make_draft) -> None:
    """Each balance equals the sum of nets of every entry at or before it."""

    generator = random.Random(7)
    for _ in range(40):
        workspace.add_entry(
            make_draft(
                f"2025-0{generator.randint(1, 3)}-1{generator.randint(0, 9)}",
                krw_income=generator.randint(0, 5000),
                krw_expense=generator.randint(0, 5000),
                usd_income=round(generator.uniform(0, 50), 2),
                usd_expense=round(generator.uniform(0, 50), 2),
            )
        )
    entries = workspace.entries.list()
    balances = compute_balances(entries)

    ordered = sorted(entries, key=lambda entry: (entry.date, entry.created_at))
    totals = {currency: 0.0 for currency in Currency}
    for entry in ordered:
        for currency in Currency:
            totals[currency] += entry.amounts(currency).net
            assert balances[entry.id].of(currency) == pytest.approx(totals[currency])


def test_month_filter_keeps_ledger_wide_balances(workspace, make_draft) -> None:
    """Filtering a month does not restart the running balance."""

    workspace.add_entry(make_draft("2025-01-15", bb_income=100))
    february = workspace.add_entry(make_draft("2025-02-01", bb_income=50))
    workspace.add_entry(make_draft("2025-03-01", bb_expense=30))

    rows = ledger_rows(workspace.entries.list(), "2025-02")

    assert [row.entry.id for row in rows] == [february.id]
    assert rows[0].balance.of(Currency.BB) == pytest.approx(150)
    assert workspace.ledger()[0].balance.of(Currency.BB) == pytest.approx(120)


def test_empty_ledger_has_no_rows(workspace) -> None:
    assert workspace.ledger() == []
    assert compute_balances([]) == {}
