"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) away from the CLI.
- Lets the transport, the rate limiter and the resolver read config the same way.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "nicoapi"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "nicoapi"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "nicoapi"
    return Path.home() / ".config" / "nicoapi"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env file.

    Keys mapped to `None` are left untouched.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# nicoapi user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central configuration.

    Values come from `NICOAPI_*` environment variables, the project `.env`
    and then the per-user `.env`.
    """

    model_config = SettingsConfigDict(
        env_prefix="NICOAPI_",
        extra="ignore",
        case_sensitive=False,
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    request_interval_ms: int = Field(
        default=1000,
        ge=0,
        description="Minimum spacing between request starts (milliseconds).",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request transport timeout (seconds).",
    )
    user_agent: str = Field(
        default="niconico-api-client/1.0.0",
        min_length=1,
        description="User-Agent sent with every request.",
    )
    frontend_id: str = Field(
        default="23",
        min_length=1,
        description="Value of the `x-frontend-id` header expected by nvapi.",
    )
    request_with: str = Field(
        default="nv-garage",
        min_length=1,
        description="Value of the `x-request-with` header.",
    )
    accept_language: str = Field(
        default="ja,en;q=0.9",
        description="Accept-Language header.",
    )
    timezone: str = Field(
        default="Asia/Tokyo",
        min_length=1,
        description="Timezone used to decide the current month for earnings.",
    )

    cookies_path: Path | None = Field(
        default=None,
        description="Browser-exported cookie JSON used by the CLI.",
    )
    user_id: str | None = Field(
        default=None,
        description="niconico user id; overrides the one stored next to the cookies.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Log level applied by the CLI to the `nicoapi` logger.",
    )
