"""Rich UI pieces shared by the CLI commands.

Kept apart from the commands so `main` and `doctor` can both use them without
importing each other.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from nicoapi.core.domain.models import EarningsPeriod
from nicoapi.core.domain.resources import Mylist


def to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


def print_json(console: Console, value: Any) -> None:
    console.print_json(json.dumps(to_jsonable(value), ensure_ascii=False))


def build_period_panel(period: EarningsPeriod) -> Panel:
    body = Text.assemble(
        ("Current earnings period: ", "bold"),
        (str(period), "bold cyan"),
    )
    return Panel(body, title="CPP earnings", border_style="cyan")


def build_mylists_table(mylists: list[Mylist]) -> Table:
    table = Table(title="Mylists")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Items", style="green", justify="right")
    table.add_column("Public", style="magenta")
    for mylist in mylists:
        table.add_row(str(mylist.id), mylist.name, str(mylist.items_count), "yes" if mylist.is_public else "no")
    return table
