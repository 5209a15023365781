"""Application configuration helpers."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
import os
from pathlib import Path
from typing import Mapping, Optional
from urllib.parse import quote_plus


ENV_PREFIX = "DEALINGS_INGEST_"

DEFAULT_TARGET_URL = "https://www.moneyweb.co.za/tools-and-data/click-a-company/SSW/"
DEFAULT_ALLOWED_DOMAINS: tuple[str, ...] = ("moneyweb.co.za", "www.moneyweb.co.za")
DEFAULT_STOCK_CODE = "SSW"

_TRUE_VALUES = {"1", "true", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "no", "n", "off"}


@dataclass(frozen=True)
class Selectors:
    """CSS selectors describing the markup of the dealings panel."""

    container: str = "div#cac-page"
    row: str = ".sens-row.cac"
    cell: str = ".col-lg-2.col-md-2"
    beneficiary: str = ".col-lg-3.col-md-3"
    price: str = ".col-lg-1.col-md-1.clear-padding"


def _resolve_env_file(candidate: str) -> Path | None:
    """Return the environment file path if it exists.

    Relative names are looked up in the working directory only.
    """

    path = Path(candidate)
    if not path.is_absolute():
        path = Path.cwd() / path
    return path if path.is_file() else None


def _parse_env_file(path: Path) -> dict[str, str]:
    """Parse a dotenv-style file into a mapping."""

    variables: dict[str, str] = {}
    for raw_line in path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        variables[key.strip()] = value.strip().strip('"').strip("'")
    return variables


def _load_profile_env(env: Mapping[str, str]) -> dict[str, str]:
    """Load environment variables from the selected profile file."""

    explicit_file = env.get(f"{ENV_PREFIX}ENV_FILE")
    profile = env.get(f"{ENV_PREFIX}ENV", "local")
    candidate = explicit_file or f".env.{profile}"

    path = _resolve_env_file(candidate)
    if path is not None:
        return _parse_env_file(path)
    return {}


def _build_database_url(env: Mapping[str, str]) -> str | None:
    """Construct a SQLAlchemy URL from discrete environment variables."""

    host = env.get(f"{ENV_PREFIX}DB_HOST")
    if not host:
        return None

    username = env.get(f"{ENV_PREFIX}DB_USERNAME")
    if not username:
        raise RuntimeError(
            f"{ENV_PREFIX}DB_USERNAME must be set when using discrete database settings"
        )

    if f"{ENV_PREFIX}DB_PASSWORD" not in env:
        raise RuntimeError(
            f"{ENV_PREFIX}DB_PASSWORD must be set when using discrete database settings"
        )

    password = env.get(f"{ENV_PREFIX}DB_PASSWORD", "")
    port = env.get(f"{ENV_PREFIX}DB_PORT", "5432")
    database = env.get(f"{ENV_PREFIX}DB_NAME", "dealings")
    driver = env.get(f"{ENV_PREFIX}DB_DRIVER", "postgresql+psycopg")

    auth = f"{quote_plus(username)}:{quote_plus(password)}"
    port_part = f":{port}" if port else ""
    return f"{driver}://{auth}@{host}{port_part}/{database}"


def _get_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise RuntimeError(f"{ENV_PREFIX}{name} must be a boolean, got {raw!r}")


def _get_number(env: Mapping[str, str], name: str, default, kind=float):
    raw = env.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        value = kind(raw.strip())
    except ValueError as exc:
        raise RuntimeError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from exc
    if value < 0:
        raise RuntimeError(f"{ENV_PREFIX}{name} must not be negative, got {raw!r}")
    return value


def _load_selectors(env: Mapping[str, str]) -> Selectors:
    overrides = {}
    for name in ("container", "row", "cell", "beneficiary", "price"):
        value = env.get(f"{ENV_PREFIX}SELECTOR_{name.upper()}")
        if value and value.strip():
            overrides[name] = value.strip()
    return replace(Selectors(), **overrides)


@dataclass(frozen=True)
class Settings:
    """Runtime configuration."""

    target_url: str = DEFAULT_TARGET_URL
    allowed_domains: tuple[str, ...] = DEFAULT_ALLOWED_DOMAINS
    stock_code: str = DEFAULT_STOCK_CODE
    selectors: Selectors = field(default_factory=Selectors)
    database_url: Optional[str] = None
    console_output: bool = True
    json_output: Optional[Path] = None
    html_file: Optional[Path] = None
    continue_on_row_error: bool = True
    abort_on_sink_error: bool = False
    fetch_timeout: float = 30.0
    fetch_retries: int = 2
    fetch_backoff: float = 0.5
    sink_timeout: Optional[float] = None

    @staticmethod
    def load(env: Mapping[str, str] | None = None) -> "Settings":
        """Load settings from environment variables."""

        base_env = dict(os.environ if env is None else env)
        file_env = _load_profile_env(base_env)
        # Environment variables set in the shell take precedence over the file.
        merged_env = {**file_env, **base_env}

        database_url = merged_env.get(f"{ENV_PREFIX}DATABASE_URL") or _build_database_url(
            merged_env
        )

        domains_env = merged_env.get(f"{ENV_PREFIX}ALLOWED_DOMAINS")
        if domains_env:
            allowed_domains = tuple(
                domain.strip().lower() for domain in domains_env.split(",") if domain.strip()
            )
        else:
            allowed_domains = DEFAULT_ALLOWED_DOMAINS

        json_output = merged_env.get(f"{ENV_PREFIX}JSON_OUTPUT")
        html_file = merged_env.get(f"{ENV_PREFIX}HTML_FILE")

        return Settings(
            target_url=merged_env.get(f"{ENV_PREFIX}TARGET_URL") or DEFAULT_TARGET_URL,
            allowed_domains=allowed_domains,
            stock_code=merged_env.get(f"{ENV_PREFIX}STOCK_CODE") or DEFAULT_STOCK_CODE,
            selectors=_load_selectors(merged_env),
            database_url=database_url or None,
            console_output=_get_bool(merged_env, "CONSOLE", True),
            json_output=Path(json_output) if json_output else None,
            html_file=Path(html_file) if html_file else None,
            continue_on_row_error=_get_bool(merged_env, "CONTINUE_ON_ROW_ERROR", True),
            abort_on_sink_error=_get_bool(merged_env, "ABORT_ON_SINK_ERROR", False),
            fetch_timeout=_get_number(merged_env, "FETCH_TIMEOUT", 30.0),
            fetch_retries=_get_number(merged_env, "FETCH_RETRIES", 2, kind=int),
            fetch_backoff=_get_number(merged_env, "FETCH_BACKOFF", 0.5),
            sink_timeout=_get_number(merged_env, "SINK_TIMEOUT", None),
        )


__all__ = [
    "Settings",
    "Selectors",
    "DEFAULT_TARGET_URL",
    "DEFAULT_ALLOWED_DOMAINS",
    "DEFAULT_STOCK_CODE",
]
