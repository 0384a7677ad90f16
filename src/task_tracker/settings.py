from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, List, Optional, TypeVar

from dotenv import find_dotenv, load_dotenv


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - STORE_CONN_STR: store connection string. 'memory://' selects the in-memory
      store, anything else is an SQLAlchemy URL. Default 'sqlite:///./data/tasks.db'
    - USE_DB_AUTH: 'true' to inject DB_USERNAME/DB_PASSWORD into the connection string
    - DB_USERNAME / DB_PASSWORD: store credentials (only read when USE_DB_AUTH=true)
    - HOST: listen address (default '0.0.0.0')
    - PORT: listen port (default 8080)
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: root log level name (default 'INFO')
    - LOG_FILE: optional path of a log file
    - TASKS_API_URL: server URL used by the console client (default 'http://localhost:8080')
    """

    store_conn_str: str
    use_db_auth: bool
    db_username: Optional[str]
    db_password: Optional[str]
    host: str
    port: int
    cors_allow_origins: List[str]
    log_level: str
    log_file: Optional[str]
    api_url: str

    @property
    def store_backend(self) -> str:
        """Short backend name for status output: 'memory' or the URL scheme."""
        if self.store_conn_str.startswith("memory://"):
            return "memory"
        return self.store_conn_str.split(":", 1)[0]


T = TypeVar("T")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env(name: str, default: T, parse: Callable[[str], T]) -> T:
    """
    Read `name` from the environment and convert it with `parse`.
    Unset or blank variables, and values `parse` rejects with ValueError,
    yield `default`.
    """
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return parse(raw)
    except ValueError:
        return default


def _to_bool(raw: str) -> bool:
    if raw.lower() in _TRUE:
        return True
    if raw.lower() in _FALSE:
        return False
    raise ValueError(raw)


def _to_port(raw: str) -> int:
    port = int(raw)
    if not (0 < port < 65536):
        raise ValueError(raw)
    return port


def _to_origins(raw: str) -> List[str]:
    # '*' is kept as a single wildcard entry; create_app maps it to allow-all
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]


# PUBLIC_INTERFACE
def get_settings(load_env_file: bool = True) -> Settings:
    """
    Return application settings loaded from environment variables.

    A '.env' file in the working directory is loaded first (without
    overriding variables already set in the process environment).
    """
    if load_env_file:
        load_dotenv(find_dotenv(usecwd=True))

    use_db_auth = _env("USE_DB_AUTH", False, _to_bool)

    return Settings(
        store_conn_str=_env("STORE_CONN_STR", "sqlite:///./data/tasks.db", str),
        use_db_auth=use_db_auth,
        db_username=os.getenv("DB_USERNAME") if use_db_auth else None,
        db_password=os.getenv("DB_PASSWORD") if use_db_auth else None,
        host=_env("HOST", "0.0.0.0", str),
        port=_env("PORT", 8080, _to_port),
        cors_allow_origins=_env("CORS_ALLOW_ORIGINS", ["*"], _to_origins),
        log_level=_env("LOG_LEVEL", "INFO", str.upper),
        log_file=_env("LOG_FILE", None, str),
        api_url=_env("TASKS_API_URL", "http://localhost:8080", lambda raw: raw.rstrip("/")),
    )
