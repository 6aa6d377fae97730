import datetime as dt
import logging

from . import repo
from .errors import ForbiddenError, ValidationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("amount", "type", "category", "date")


def _to_column(field: str, value):
    if value is None:
        return None
    if field == "date" and isinstance(value, dt.date):
        return value.isoformat()
    if field == "amount":
        return str(value)
    return value


def _owned_txn(db_path, caller_id: str, txn_id: str):
    # missing and not-owned are reported the same way
    txn = repo.get_txn(db_path, txn_id)
    if txn is None or txn["user_id"] != caller_id:
        logger.warning("user %s denied access to transaction %s", caller_id, txn_id)
        raise ForbiddenError()
    return txn


def create_transaction(db_path, caller_id: str, data: dict) -> dict:
    txn_id = repo.create_txn(
        db_path,
        user_id=caller_id,
        amount=_to_column("amount", data["amount"]),
        txn_type=data["type"],
        category=data["category"],
        date_str=_to_column("date", data["date"]),
        note=data.get("note"),
    )
    return dict(repo.get_txn(db_path, txn_id))


def list_transactions(
    db_path,
    caller_id: str,
    *,
    category: str | None = None,
    txn_type: str | None = None,
    start: dt.date | None = None,
    end: dt.date | None = None,
    search: str | None = None,
) -> list[dict]:
    rows = repo.list_txns(
        db_path,
        user_id=caller_id,
        category=category,
        txn_type=txn_type,
        start=_to_column("date", start),
        end=_to_column("date", end),
        search=search,
    )
    return [dict(row) for row in rows]


def update_transaction(db_path, caller_id: str, txn_id: str, changes: dict) -> dict:
    _owned_txn(db_path, caller_id, txn_id)

    columns = {}
    for field in repo.TXN_FIELDS:
        if field not in changes:
            continue
        if changes[field] is None and field in REQUIRED_FIELDS:
            raise ValidationError(f"{field} cannot be null.")
        columns[field] = _to_column(field, changes[field])

    txn = repo.update_txn(db_path, txn_id, columns)
    if txn is None:
        raise ForbiddenError()
    return dict(txn)


def delete_transaction(db_path, caller_id: str, txn_id: str) -> dict:
    _owned_txn(db_path, caller_id, txn_id)
    repo.delete_txn(db_path, txn_id)
    logger.info("user %s deleted transaction %s", caller_id, txn_id)
    return {"message": "Transaction deleted."}
