import sqlite3
from uuid import uuid4

from .db import connect

USER_PROFILE_FIELDS = ("name", "dob", "phone")
TXN_FIELDS = ("amount", "type", "category", "date", "note")


def _new_id() -> str:
    return uuid4().hex


def create_user(
    db_path,
    *,
    name: str,
    email: str,
    password_hash: str,
    dob: str | None,
    phone: str | None,
) -> str:
    user_id = _new_id()
    with connect(db_path) as conn:
        try:
            conn.execute(
                """
                INSERT INTO users(id, name, email, password, dob, phone)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (user_id, name, email, password_hash, dob, phone),
            )
        except sqlite3.IntegrityError as exc:
            raise ValueError("email already exists") from exc
    return user_id


def get_user(db_path, user_id: str):
    with connect(db_path) as conn:
        return conn.execute(
            "SELECT * FROM users WHERE id = ?",
            (user_id,),
        ).fetchone()


def get_user_by_email(db_path, email: str):
    with connect(db_path) as conn:
        return conn.execute(
            "SELECT * FROM users WHERE email = ?",
            (email,),
        ).fetchone()


def update_user(db_path, user_id: str, fields: dict):
    changes = {k: v for k, v in fields.items() if k in USER_PROFILE_FIELDS}
    with connect(db_path) as conn:
        if changes:
            assignments = ", ".join(f"{column} = ?" for column in changes)
            conn.execute(
                f"UPDATE users SET {assignments} WHERE id = ?",
                (*changes.values(), user_id),
            )
        return conn.execute(
            "SELECT * FROM users WHERE id = ?",
            (user_id,),
        ).fetchone()


def create_txn(
    db_path,
    *,
    user_id: str,
    amount: str,
    txn_type: str,
    category: str,
    date_str: str,
    note: str | None,
) -> str:
    txn_id = _new_id()
    with connect(db_path) as conn:
        conn.execute(
            """
            INSERT INTO transactions(id, user_id, amount, type, category, date, note)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (txn_id, user_id, amount, txn_type, category, date_str, note),
        )
    return txn_id


def get_txn(db_path, txn_id: str):
    with connect(db_path) as conn:
        return conn.execute(
            "SELECT * FROM transactions WHERE id = ?",
            (txn_id,),
        ).fetchone()


def list_txns(
    db_path,
    *,
    user_id: str,
    category: str | None = None,
    txn_type: str | None = None,
    start: str | None = None,
    end: str | None = None,
    search: str | None = None,
):
    clauses = ["user_id = ?"]
    params: list = [user_id]
    if category:
        clauses.append("category = ?")
        params.append(category)
    if txn_type:
        clauses.append("type = ?")
        params.append(txn_type)
    if start:
        clauses.append("date >= ?")
        params.append(start)
    if end:
        clauses.append("date <= ?")
        params.append(end)
    if search:
        clauses.append("(contains_ci(note, ?) OR contains_ci(category, ?))")
        params.extend([search, search])

    with connect(db_path) as conn:
        cur = conn.execute(
            f"""
            SELECT * FROM transactions
            WHERE {" AND ".join(clauses)}
            ORDER BY date DESC, rowid DESC
            """,
            params,
        )
        return cur.fetchall()


def update_txn(db_path, txn_id: str, fields: dict):
    changes = {k: v for k, v in fields.items() if k in TXN_FIELDS}
    with connect(db_path) as conn:
        if changes:
            assignments = ", ".join(f"{column} = ?" for column in changes)
            conn.execute(
                f"UPDATE transactions SET {assignments} WHERE id = ?",
                (*changes.values(), txn_id),
            )
        return conn.execute(
            "SELECT * FROM transactions WHERE id = ?",
            (txn_id,),
        ).fetchone()


def delete_txn(db_path, txn_id: str) -> None:
    with connect(db_path) as conn:
        conn.execute("DELETE FROM transactions WHERE id = ?", (txn_id,))
