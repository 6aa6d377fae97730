from decimal import Decimal

import pytest

from app.client import FinanceClient
from app.dashboard import Dashboard, DashboardFilters, compute_totals, filter_transactions
from app.session import SessionState

TRANSACTIONS = [
    {"id": "1", "amount": 50, "type": "expense", "category": "Food", "note": "lunch"},
    {"id": "2", "amount": 3000, "type": "income", "category": "Pay", "note": "salary"},
    {"id": "3", "amount": 20.25, "type": "expense", "category": "Fast food", "note": None},
]


@pytest.mark.parametrize(
    "filters,expected",
    [
        (DashboardFilters(), ["1", "2", "3"]),
        (DashboardFilters(type="expense"), ["1", "3"]),
        (DashboardFilters(category="FOOD"), ["1", "3"]),
        (DashboardFilters(search="sal"), ["2"]),
        (DashboardFilters(search="pay", type="income"), ["2"]),
        (DashboardFilters(search="pay", type="expense"), []),
    ],
)
def test_filter_transactions(filters, expected):
    assert [t["id"] for t in filter_transactions(TRANSACTIONS, filters)] == expected


def test_compute_totals():
    totals = compute_totals(TRANSACTIONS)
    assert totals.income == Decimal("3000")
    assert totals.expense == Decimal("70.25")
    assert totals.net == Decimal("2929.75")


@pytest.fixture()
def dashboard(client, tmp_path):
    api = FinanceClient(client, SessionState(tmp_path / "session.json"))
    api.register("Ana", "ana@example.com", "s3cret")
    return Dashboard(api)


def test_add_edit_delete_flow(dashboard):
    dashboard.load()
    assert dashboard.transactions == []
    assert not dashboard.loading

    assert dashboard.submit(
        {"amount": "100", "type": "income", "category": "Gift", "date": "2026-03-01"}
    )
    assert dashboard.submit(
        {"amount": "40", "type": "expense", "category": "Food", "date": "2026-03-02", "note": "dinner"}
    )
    assert [t["category"] for t in dashboard.transactions] == ["Food", "Gift"]
    assert dashboard.form["amount"] == ""

    food = dashboard.transactions[0]
    dashboard.start_edit(food)
    assert dashboard.form["date"] == "2026-03-02"
    assert dashboard.submit({"amount": "45"})
    assert dashboard.editing_id is None
    assert dashboard.transactions[0]["amount"] == 45

    dashboard.filters.type = "income"
    assert [t["category"] for t in dashboard.visible] == ["Gift"]
    assert dashboard.totals.net == Decimal("55")

    assert dashboard.delete(food["id"])
    assert [t["category"] for t in dashboard.transactions] == ["Gift"]


def test_failed_save_records_server_message(dashboard):
    assert not dashboard.submit({"amount": "abc", "category": "x", "date": "2026-03-01"})
    assert "amount" in dashboard.error


def test_delete_of_foreign_transaction_is_forbidden(dashboard):
    assert not dashboard.delete("not-mine")
    assert dashboard.error == "Forbidden."


def test_load_without_session_reports_error(client, tmp_path):
    view = Dashboard(FinanceClient(client, SessionState(tmp_path / "s.json")))
    view.load()
    assert view.error == "Access denied. No token provided."
    assert not view.loading


def test_render_shows_totals_and_escapes_notes(dashboard):
    dashboard.load()
    dashboard.submit(
        {"amount": "12.5", "type": "expense", "category": "Food", "date": "2026-03-02",
         "note": "<script>alert(1)</script>"}
    )
    html = dashboard.render()

    assert "Welcome, <strong>Ana</strong>" in html
    assert "Total Expense" in html
    assert "12.50" in html
    assert "-&#8377;12.50" in html
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_render_empty_state(dashboard):
    dashboard.load()
    assert "No transactions yet." in dashboard.render()


def test_logout_clears_session(dashboard):
    dashboard.load()
    dashboard.logout()
    assert not dashboard.client.session.is_authenticated
    assert dashboard.transactions == []
