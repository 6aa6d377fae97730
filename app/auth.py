import datetime as dt
import logging

from . import repo
from .errors import ConflictError, InvalidCredentialsError, NotFoundError, ValidationError
from .security import TokenIssuer, hash_password, verify_password

logger = logging.getLogger(__name__)


def public_profile(row) -> dict:
    return {
        "name": row["name"],
        "email": row["email"],
        "dob": row["dob"],
        "phone": row["phone"],
    }


def _iso(value: dt.date | str | None) -> str | None:
    if isinstance(value, dt.date):
        return value.isoformat()
    return value or None


def _require_name(name: str | None) -> None:
    if not name or not name.strip():
        raise ValidationError("Name cannot be empty.")


def register(
    db_path,
    tokens: TokenIssuer,
    *,
    name: str,
    email: str,
    password: str,
    dob: dt.date | None = None,
    phone: str | None = None,
) -> dict:
    _require_name(name)
    if repo.get_user_by_email(db_path, email) is not None:
        logger.info("signup rejected: email already registered")
        raise ConflictError()

    password_hash = hash_password(password)
    try:
        user_id = repo.create_user(
            db_path,
            name=name,
            email=email,
            password_hash=password_hash,
            dob=_iso(dob),
            phone=phone or "",
        )
    except ValueError as exc:
        raise ConflictError() from exc

    logger.info("user %s registered", user_id)
    user = repo.get_user(db_path, user_id)
    return {"token": tokens.issue(user_id), "user": public_profile(user)}


def login(db_path, tokens: TokenIssuer, *, email: str, password: str) -> dict:
    user = repo.get_user_by_email(db_path, email)
    if user is None or not verify_password(password, user["password"]):
        logger.info("login rejected")
        raise InvalidCredentialsError()

    logger.info("user %s logged in", user["id"])
    return {"token": tokens.issue(user["id"]), "user": public_profile(user)}


def get_profile(db_path, user_id: str) -> dict:
    user = repo.get_user(db_path, user_id)
    if user is None:
        raise NotFoundError()
    return public_profile(user)


def update_profile(db_path, user_id: str, updates: dict) -> dict:
    """Apply only the fields present in ``updates``; absent ones stay as stored."""
    if "name" in updates:
        _require_name(updates["name"])

    changes = {}
    for field in repo.USER_PROFILE_FIELDS:
        if field not in updates:
            continue
        value = updates[field]
        changes[field] = _iso(value) if field == "dob" else value

    user = repo.update_user(db_path, user_id, changes)
    if user is None:
        raise NotFoundError()
    return public_profile(user)
