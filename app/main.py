import datetime as dt
import logging
import sqlite3
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import auth, transactions
from .db import init_db
from .deps import Identity, get_app_settings, get_tokens, require_identity
from .errors import FinanceError
from .logging_utils import configure_logging
from .models import (
    AuthOut,
    LoginIn,
    Message,
    Profile,
    ProfileUpdate,
    SignupIn,
    Transaction,
    TransactionIn,
    TransactionPatch,
)
from .security import TokenIssuer
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/api/auth", tags=["auth"])
txn_router = APIRouter(
    prefix="/api/transactions",
    tags=["transactions"],
    dependencies=[Depends(require_identity)],
)


@auth_router.post("/signup", response_model=AuthOut)
def signup(
    payload: SignupIn,
    settings: Settings = Depends(get_app_settings),
    tokens: TokenIssuer = Depends(get_tokens),
):
    return auth.register(settings.db_path, tokens, **payload.model_dump())


@auth_router.post("/login", response_model=AuthOut)
def login(
    payload: LoginIn,
    settings: Settings = Depends(get_app_settings),
    tokens: TokenIssuer = Depends(get_tokens),
):
    return auth.login(
        settings.db_path, tokens, email=payload.email, password=payload.password
    )


@auth_router.get("/me", response_model=Profile)
def read_me(
    identity: Identity = Depends(require_identity),
    settings: Settings = Depends(get_app_settings),
):
    return auth.get_profile(settings.db_path, identity.user_id)


@auth_router.patch("/me", response_model=Profile)
def update_me(
    payload: ProfileUpdate,
    identity: Identity = Depends(require_identity),
    settings: Settings = Depends(get_app_settings),
):
    return auth.update_profile(
        settings.db_path, identity.user_id, payload.model_dump(exclude_unset=True)
    )


@txn_router.post("", response_model=Transaction, status_code=status.HTTP_201_CREATED)
def create_transaction(
    payload: TransactionIn,
    identity: Identity = Depends(require_identity),
    settings: Settings = Depends(get_app_settings),
):
    return transactions.create_transaction(
        settings.db_path, identity.user_id, payload.model_dump()
    )


@txn_router.get("", response_model=list[Transaction])
def list_transactions(
    category: str | None = None,
    txn_type: str | None = Query(default=None, alias="type"),
    start: dt.date | None = Query(default=None, alias="from"),
    end: dt.date | None = Query(default=None, alias="to"),
    search: str | None = None,
    identity: Identity = Depends(require_identity),
    settings: Settings = Depends(get_app_settings),
):
    return transactions.list_transactions(
        settings.db_path,
        identity.user_id,
        category=category,
        txn_type=txn_type,
        start=start,
        end=end,
        search=search,
    )


@txn_router.patch("/{txn_id}", response_model=Transaction)
def update_transaction(
    txn_id: str,
    payload: TransactionPatch,
    identity: Identity = Depends(require_identity),
    settings: Settings = Depends(get_app_settings),
):
    return transactions.update_transaction(
        settings.db_path,
        identity.user_id,
        txn_id,
        payload.model_dump(exclude_unset=True),
    )


@txn_router.delete("/{txn_id}", response_model=Message)
def delete_transaction(
    txn_id: str,
    identity: Identity = Depends(require_identity),
    settings: Settings = Depends(get_app_settings),
):
    return transactions.delete_transaction(settings.db_path, identity.user_id, txn_id)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ())[1:])
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


async def _finance_error_handler(_: Request, exc: FinanceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def _validation_error_handler(
    _: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report schema failures as 400 ``{message}``.

    The original API had no schema layer, so malformed bodies surfaced as
    500 store errors; FastAPI's own default would be 422.
    """
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": _describe_validation_error(exc)},
    )


async def _http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def _store_error_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
    logger.exception("store error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": str(exc)},
    )


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": str(exc) or "Internal server error."},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        init_db(settings)
        if not settings.jwt_secret:
            logger.warning("JWT_SECRET is not set; token operations will fail")
        yield

    app = FastAPI(title="Personal Finance Tracker", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.tokens = TokenIssuer(settings.jwt_secret, settings.token_ttl_seconds)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(FinanceError, _finance_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(sqlite3.Error, _store_error_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)

    app.include_router(auth_router)
    app.include_router(txn_router)

    @app.get("/health", tags=["system"])
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
