import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_path: Path
    jwt_secret: str | None = None
    token_ttl_seconds: int = 3600
    cors_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"


def _split_origins(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ("*",)
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


def get_settings() -> Settings:
    data_dir = Path(os.environ.get("FINANCE_DATA_DIR") or Path.cwd() / ".data")
    return Settings(
        data_dir=data_dir,
        db_path=data_dir / "finance.sqlite",
        jwt_secret=os.environ.get("JWT_SECRET") or None,
        cors_origins=_split_origins(os.environ.get("FINANCE_CORS_ORIGINS")),
        log_level=os.environ.get("FINANCE_LOG_LEVEL", "INFO").upper(),
    )
