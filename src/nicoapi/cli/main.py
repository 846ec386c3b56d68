"""`nicoapi` command.

Every resource command fetches one page and prints it as JSON, so the output
can be piped into `jq`. Errors from the library are printed in red and exit
with status 1.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable

import typer
from rich.console import Console
from rich.logging import RichHandler

from nicoapi.cli import doctor
from nicoapi.cli.ui_components import build_mylists_table, build_period_panel, print_json
from nicoapi.client import NiconicoClient
from nicoapi.core.config import AppSettings
from nicoapi.core.errors import NicoApiError

app = typer.Typer(no_args_is_help=True, help="niconico creator API client.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)

_COOKIES_HELP = "Cookie export (JSON). Defaults to NICOAPI_COOKIES_PATH."
_USER_ID_HELP = "niconico user id. Defaults to NICOAPI_USER_ID or the cookie file's userId."


def configure_logging(level: str) -> None:
    """Attach a RichHandler to the `nicoapi` logger (stderr)."""

    logger = logging.getLogger("nicoapi")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=_err_console, show_path=False))
    logger.setLevel(level.upper())


def build_client(cookies: Path | None, user_id: str | None) -> NiconicoClient:
    settings = AppSettings()
    path = cookies or settings.cookies_path
    if path is None:
        raise typer.BadParameter("no cookie file: pass --cookies or run `nicoapi doctor setup`")
    return NiconicoClient.from_cookies(path, user_id=user_id or settings.user_id, settings=settings)


def _run(
    operation: Callable[[NiconicoClient], Awaitable[Any]],
    cookies: Path | None,
    user_id: str | None = None,
) -> Any:
    client = build_client(cookies, user_id)

    async def runner() -> Any:
        async with client:
            return await operation(client)

    try:
        return asyncio.run(runner())
    except NicoApiError as exc:
        _err_console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Overrides NICOAPI_LOG_LEVEL."),
) -> None:
    configure_logging(log_level or AppSettings().log_level)


@app.command()
def period(cookies: Path | None = typer.Option(None, "--cookies", help=_COOKIES_HELP)) -> None:
    """Show which month the current-earnings commands query right now."""

    resolved = _run(lambda client: client.resolve_earnings_period(), cookies)
    _console.print(build_period_panel(resolved))


@app.command()
def videos(
    page: int = typer.Option(1, "--page", min=1),
    page_size: int = typer.Option(100, "--page-size", min=0),
    cookies: Path | None = typer.Option(None, "--cookies", help=_COOKIES_HELP),
) -> None:
    """List uploaded videos, newest first."""

    print_json(_console, _run(lambda client: client.fetch_videos(page, page_size), cookies))


@app.command()
def lives(
    offset: int = typer.Option(0, "--offset", min=0),
    limit: int = typer.Option(100, "--limit", min=0),
    user_id: str | None = typer.Option(None, "--user-id", help=_USER_ID_HELP),
    cookies: Path | None = typer.Option(None, "--cookies", help=_COOKIES_HELP),
) -> None:
    """List the live-broadcast history, non-public programs included."""

    print_json(_console, _run(lambda client: client.fetch_lives(offset, limit), cookies, user_id))


@app.command()
def earnings(
    offset: int = typer.Option(0, "--offset", min=0),
    limit: int = typer.Option(100, "--limit", min=0),
    cookies: Path | None = typer.Option(None, "--cookies", help=_COOKIES_HELP),
) -> None:
    """Current CPP earnings forecast."""

    print_json(_console, _run(lambda client: client.fetch_earnings(offset, limit), cookies))


@app.command()
def history(
    year_month: str = typer.Argument(..., help="Finalized month as YYYYMM."),
    offset: int = typer.Option(0, "--offset", min=0),
    limit: int = typer.Option(100, "--limit", min=0),
    cookies: Path | None = typer.Option(None, "--cookies", help=_COOKIES_HELP),
) -> None:
    """Finalized earnings of a month at least two months old."""

    print_json(_console, _run(lambda client: client.fetch_earnings_history(year_month, offset, limit), cookies))


@app.command()
def mylists(
    sample_item_count: int = typer.Option(3, "--sample-items", min=0),
    table: bool = typer.Option(False, "--table", help="Render a table instead of JSON."),
    cookies: Path | None = typer.Option(None, "--cookies", help=_COOKIES_HELP),
) -> None:
    """List the user's mylists."""

    result = _run(lambda client: client.fetch_mylists(sample_item_count), cookies)
    if table:
        _console.print(build_mylists_table(result))
    else:
        print_json(_console, result)


@app.command()
def mylist(
    mylist_id: int = typer.Argument(...),
    page: int = typer.Option(1, "--page", min=1),
    page_size: int = typer.Option(100, "--page-size", min=0),
    cookies: Path | None = typer.Option(None, "--cookies", help=_COOKIES_HELP),
) -> None:
    """Items of one mylist."""

    print_json(_console, _run(lambda client: client.fetch_mylist_items(mylist_id, page, page_size), cookies))


@app.command()
def analytics(
    video_id: str = typer.Argument(..., help="Video id, e.g. sm9."),
    date_from: str = typer.Option(..., "--from", help="YYYY-MM-DD"),
    date_to: str = typer.Option(..., "--to", help="YYYY-MM-DD"),
    cookies: Path | None = typer.Option(None, "--cookies", help=_COOKIES_HELP),
) -> None:
    """Daily views, comments, likes and mylist adds of one video."""

    print_json(_console, _run(lambda client: client.fetch_analytics_stats(video_id, date_from, date_to), cookies))


def run() -> None:
    # Windows consoles default to cp1252; titles are mostly Japanese.
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")
    app()
