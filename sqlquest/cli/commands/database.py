"""Database connection CLI commands."""

from __future__ import annotations

import asyncio
import time
from typing import Optional

import click
from rich.markup import escape
from rich.table import Table

from sqlquest.cli.utils import console
from sqlquest.config import load_config
from sqlquest.db import AdapterFactory
from sqlquest.exceptions import ConfigurationError, SQLQuestError


@click.group(name="db")
@click.pass_context
def db_group(ctx: click.Context) -> None:
    """🗄️  Database connection checks."""
    pass


@db_group.command(name="test")
@click.option("--database", "-d", help="Specific database to test (default: all)")
@click.pass_context
def test_connection_command(ctx: click.Context, database: Optional[str]) -> None:
    """Test database connections."""
    try:
        config = load_config(ctx.obj.get('config'), ctx.obj.get('url'))
    except ConfigurationError as exc:
        console.print(f"[red]Configuration Error: {escape(str(exc))}[/red]", highlight=False)
        raise SystemExit(1) from exc

    names = [database] if database else list(config.databases.keys())
    unknown = [name for name in names if name not in config.databases]
    if unknown:
        console.print(f"[red]Database '{unknown[0]}' not found in configuration[/red]")
        raise SystemExit(1)

    console.print("[bold blue]Testing Database Connections[/bold blue]\n")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Database", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Driver")
    table.add_column("Status")
    table.add_column("Time", justify="right")

    failures = 0
    for name in names:
        db_config = config.databases[name]
        start_time = time.time()
        driver = "-"
        try:
            adapter = AdapterFactory.create_adapter(db_config)
            driver = adapter.get_driver_name()
            asyncio.run(adapter.test_connection())
            status = "[green]✅ Connected[/green]"
        except SQLQuestError as exc:
            failures += 1
            status = f"[red]❌ {type(exc).__name__}[/red]"
            console.print(f"[red]{name}: {escape(str(exc))}[/red]", highlight=False)
        elapsed = round((time.time() - start_time) * 1000, 2)
        table.add_row(name, db_config.type.value, driver, status, f"{elapsed}ms")

    console.print(table)
    if failures:
        raise SystemExit(1)
