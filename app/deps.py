from dataclasses import dataclass

from fastapi import Depends, Request

from .errors import UnauthenticatedError
from .logic import extract_bearer_token
from .security import TokenIssuer
from .settings import Settings


@dataclass(frozen=True)
class Identity:
    user_id: str


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_tokens(request: Request) -> TokenIssuer:
    return request.app.state.tokens


def require_identity(
    request: Request, tokens: TokenIssuer = Depends(get_tokens)
) -> Identity:
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        raise UnauthenticatedError()
    return Identity(user_id=tokens.validate(token))
