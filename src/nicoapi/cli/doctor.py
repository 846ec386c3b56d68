"""Doctor commands: environment diagnostics and first-time setup."""

from __future__ import annotations

import asyncio
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import typer
from rich.console import Console
from rich.table import Table

from nicoapi.adapters.cookie_loader import load_credential
from nicoapi.adapters.http_client import build_async_client
from nicoapi.client import NiconicoClient
from nicoapi.core.config import AppSettings, get_user_env_file, write_user_env_vars
from nicoapi.core.domain.models import Credential
from nicoapi.core.errors import NicoApiError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

CONNECTIVITY_URL = "https://nvapi.nicovideo.jp/"


async def _check_http(settings: AppSettings, url: str) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc) or type(exc).__name__


async def _check_session(settings: AppSettings, path: Path, user_id: str | None) -> tuple[bool, str]:
    """Authenticated round trip: list mylists without sample items."""

    try:
        async with NiconicoClient.from_cookies(path, user_id=user_id, settings=settings) as client:
            mylists = await client.fetch_mylists(sample_item_count=0)
        return True, f"{len(mylists)} mylists visible"
    except NicoApiError as exc:
        return False, str(exc)


def _check_timezone(name: str) -> tuple[bool, str]:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        return False, f"unknown timezone: {exc}"
    return True, name


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="nicoapi doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("User config", "OK", str(get_user_env_file()))
    table.add_row("Request interval", "OK", f"{settings.request_interval_ms} ms")
    ok_tz, detail_tz = _check_timezone(settings.timezone)
    table.add_row("Timezone", "OK" if ok_tz else "FAIL", detail_tz)

    credential: Credential | None = None
    path = settings.cookies_path
    if path is None:
        table.add_row("Cookie file", "MISSING", "Run `nicoapi doctor setup` or set NICOAPI_COOKIES_PATH")
    else:
        try:
            credential = load_credential(path, user_id=settings.user_id)
        except NicoApiError as exc:
            table.add_row("Cookie file", "FAIL", str(exc))
        else:
            table.add_row("Cookie file", "OK", f"{len(credential.cookies)} niconico cookies in {path}")

    if credential is not None:
        if credential.user_id:
            table.add_row("User id", "OK", credential.user_id)
        else:
            table.add_row("User id", "OPTIONAL", "Needed by `lives`; pass --user-id or set NICOAPI_USER_ID")

    ok_http, detail_http = asyncio.run(_check_http(settings, CONNECTIVITY_URL))
    table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)

    ok_session = False
    if credential is not None and path is not None and ok_http:
        ok_session, detail_session = asyncio.run(_check_session(settings, path, settings.user_id))
        table.add_row("Session", "OK" if ok_session else "FAIL", detail_session)

    _console.print(table)

    if credential is not None and not ok_session:
        _console.print(
            "\n[yellow]Note:[/yellow] Expired sessions are the usual cause. "
            "Export the cookies again from a logged-in browser."
        )


@app.command()
def setup() -> None:
    """Interactive setup (stores the cookie path and user id in the user config .env)."""

    raw_path = typer.prompt("Cookie export (JSON) path").strip()
    path = Path(raw_path).expanduser().resolve()

    try:
        credential = load_credential(path)
    except NicoApiError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if not credential.cookies:
        raise typer.BadParameter(f"no niconico cookies found in {path}")

    user_id = typer.prompt(
        "niconico user id (blank to skip)",
        default=credential.user_id or "",
        show_default=bool(credential.user_id),
    ).strip()

    env_path = write_user_env_vars(
        {
            "NICOAPI_COOKIES_PATH": str(path),
            "NICOAPI_USER_ID": user_id or None,
        }
    )

    _console.print(f"[green]Saved nicoapi config to:[/green] {env_path}")
