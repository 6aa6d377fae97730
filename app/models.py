import datetime as dt
import math
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, PlainSerializer


def _json_safe_amount(value: Decimal) -> Decimal:
    # amounts leave the API as JSON numbers; reject what a float cannot hold exactly
    as_float = float(value)
    if not math.isfinite(as_float) or value not in (Decimal(repr(as_float)), Decimal(as_float)):
        raise ValueError("amount must be a finite number with at most 15 significant digits")
    return value


Amount = Annotated[
    Decimal,
    AfterValidator(_json_safe_amount),
    PlainSerializer(float, return_type=float, when_used="json"),
]
TxnType = Literal["income", "expense"]


class SignupIn(BaseModel):
    name: str
    email: str
    password: str
    dob: dt.date | None = None
    phone: str | None = None


class LoginIn(BaseModel):
    email: str
    password: str


class ProfileUpdate(BaseModel):
    name: str | None = None
    dob: dt.date | None = None
    phone: str | None = None


class Profile(BaseModel):
    name: str
    email: str
    dob: dt.date | None = None
    phone: str | None = None


class AuthOut(BaseModel):
    token: str
    user: Profile


class TransactionIn(BaseModel):
    amount: Amount
    type: TxnType
    category: str
    date: dt.date
    note: str | None = None


class TransactionPatch(BaseModel):
    amount: Amount | None = None
    type: TxnType | None = None
    category: str | None = None
    date: dt.date | None = None
    note: str | None = None


class Transaction(BaseModel):
    id: str
    user_id: str
    amount: Amount
    type: str
    category: str
    date: dt.date
    note: str | None = None
    created_at: str
    updated_at: str


class Message(BaseModel):
    message: str
