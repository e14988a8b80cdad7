import logging
import logging.handlers
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql://jobtrack:jobtrack@db:5432/jobtrack"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-haiku-4-5-20251001"
    anthropic_timeout: float = 60.0
    redis_url: str = ""

    # Sessions / auth
    secret_key: str = "change-me"
    session_max_age: int = 86400 * 7
    admin_email: str = ""
    admin_password: str = ""

    # HTTP
    cors_origins: str = "http://localhost:3000"
    cors_allow_credentials: bool = True
    trusted_hosts: str = "*"
    rate_limit_generate: str = "10/minute"
    resume_import_max_bytes: int = 8 * 1024 * 1024
    run_migrations: bool = True

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_max_bytes: int = 10_485_760  # 10 MB
    log_backup_count: int = 5

    model_config = {"env_file": ".env"}

    @property
    def effective_database_url(self) -> str:
        # Heroku-style URLs still use the legacy scheme
        if self.database_url.startswith("postgres://"):
            return self.database_url.replace("postgres://", "postgresql://", 1)
        return self.database_url

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def trusted_hosts_list(self) -> list[str]:
        return [h.strip() for h in self.trusted_hosts.split(",") if h.strip()] or ["*"]

    @property
    def ai_configured(self) -> bool:
        return bool(self.anthropic_api_key)


settings = Settings()


_BRIEF_FORMAT = logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s", datefmt="%H:%M:%S")
_DETAIL_FORMAT = logging.Formatter(
    "%(asctime)s %(levelname)-8s [%(name)s:%(funcName)s:%(lineno)d] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpcore", "httpx", "anthropic", "xhtml2pdf", "pypdf")


def _rotating_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=settings.log_max_bytes,
        backupCount=settings.log_backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(_DETAIL_FORMAT)
    return handler


def setup_logging() -> None:
    """Configure application-wide logging.

    Console gets INFO+ in a brief format; ``app.log`` gets everything and
    ``error.log`` only errors, both rotated by size under ``settings.log_dir``.
    """
    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(_BRIEF_FORMAT)
    root.addHandler(console)
    root.addHandler(_rotating_handler(log_dir / "app.log", logging.DEBUG))
    root.addHandler(_rotating_handler(log_dir / "error.log", logging.ERROR))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging configured: level=%s, dir=%s, max=%s MB x %d backups",
        settings.log_level, log_dir, settings.log_max_bytes // 1_048_576, settings.log_backup_count,
    )
