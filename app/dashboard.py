from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .client import ApiError, FinanceClient
from .logic import contains_casefold

TEMPLATES_DIR = Path(__file__).parent / "templates"
EMPTY_FORM = {"amount": "", "type": "income", "category": "", "date": "", "note": ""}


@dataclass
class DashboardFilters:
    type: str = "all"
    category: str = ""
    search: str = ""


@dataclass(frozen=True)
class Totals:
    income: Decimal
    expense: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


def _amount(txn: dict) -> Decimal:
    return Decimal(str(txn.get("amount", 0)))


def filter_transactions(transactions: list[dict], filters: DashboardFilters) -> list[dict]:
    visible = []
    for txn in transactions:
        if filters.type != "all" and txn.get("type") != filters.type:
            continue
        if filters.category and not contains_casefold(
            txn.get("category") or "", filters.category
        ):
            continue
        if filters.search and not (
            contains_casefold(txn.get("note") or "", filters.search)
            or contains_casefold(txn.get("category") or "", filters.search)
        ):
            continue
        visible.append(txn)
    return visible


def compute_totals(transactions: list[dict]) -> Totals:
    income = sum((_amount(t) for t in transactions if t.get("type") == "income"), Decimal(0))
    expense = sum((_amount(t) for t in transactions if t.get("type") == "expense"), Decimal(0))
    return Totals(income=income, expense=expense)


def _money(value) -> str:
    return f"{Decimal(str(value)):.2f}"


_environment = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
)
_environment.filters["money"] = _money


class Dashboard:
    """State behind the dashboard page: loaded records, filters and edit form."""

    def __init__(self, client: FinanceClient):
        self.client = client
        self.transactions: list[dict] = []
        self.loading = True
        self.error = ""
        self.editing_id: str | None = None
        self.form = dict(EMPTY_FORM)
        self.filters = DashboardFilters()

    @property
    def visible(self) -> list[dict]:
        return filter_transactions(self.transactions, self.filters)

    @property
    def totals(self) -> Totals:
        # totals cover everything loaded, not just what the filters show
        return compute_totals(self.transactions)

    def load(self) -> None:
        try:
            self.transactions = self.client.list_transactions()
        except ApiError as exc:
            self.error = exc.message
        finally:
            self.loading = False

    def start_edit(self, txn: dict) -> None:
        self.editing_id = txn["id"]
        self.form = {
            "amount": str(txn["amount"]),
            "type": txn["type"],
            "category": txn["category"],
            "date": (txn.get("date") or "")[:10],
            "note": txn.get("note") or "",
        }

    def cancel_edit(self) -> None:
        self.editing_id = None
        self.form = dict(EMPTY_FORM)

    def submit(self, form: dict | None = None) -> bool:
        if form is not None:
            self.form = {**self.form, **form}
        try:
            if self.editing_id:
                saved = self.client.update_transaction(self.editing_id, self.form)
                self.transactions = [
                    saved if t["id"] == self.editing_id else t for t in self.transactions
                ]
            else:
                saved = self.client.create_transaction(self.form)
                self.transactions = [saved, *self.transactions]
        except ApiError as exc:
            self.error = exc.message
            return False
        self.cancel_edit()
        return True

    def delete(self, txn_id: str) -> bool:
        try:
            self.client.delete_transaction(txn_id)
        except ApiError as exc:
            self.error = exc.message
            return False
        self.transactions = [t for t in self.transactions if t["id"] != txn_id]
        return True

    def logout(self) -> None:
        self.client.logout()
        self.transactions = []
        self.cancel_edit()

    def render(self) -> str:
        return _environment.get_template("dashboard.html").render(
            user=self.client.session.user,
            loading=self.loading,
            error=self.error,
            totals=self.totals,
            transactions=self.visible,
            filters=self.filters,
            form=self.form,
            editing_id=self.editing_id,
        )
