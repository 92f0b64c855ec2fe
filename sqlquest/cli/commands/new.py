"""Quest scaffolding CLI command."""

from __future__ import annotations

from pathlib import Path

import click

from rich.markup import escape

from sqlquest.cli.utils import console
from sqlquest.quest.loader import ADVENTURE_FILE

SAMPLE_SQL = """-- {name}: executed by the default adventure when no adventure.py exists.
-- Template bindings use double curly braces, e.g. sqlquest run --set table=users
SELECT 1 AS answer;
"""

SAMPLE_ADVENTURE = '''"""Adventure for the {name} quest."""


async def adventure(quest):
    result = await quest.retry(
        lambda: quest.transaction(lambda: quest.sql({{"file": "{name}.sql"}})),
        times=3,
        wait=1000,
        ok_errors=[r"deadlock", r"database is locked"],
    )
    quest.print_table(result)
'''


@click.command(name="new")
@click.argument("quest_dir", type=click.Path(file_okay=False))
@click.option("--adventure/--no-adventure", "with_adventure", default=False, help="Also create adventure.py")
@click.option("--sql-dir", default="sql", show_default=True, help="SQL subdirectory name")
def new_command(quest_dir: str, with_adventure: bool, sql_dir: str) -> None:
    """Initialize a new quest in QUEST_DIR."""
    root = Path(quest_dir)
    name = root.resolve().name
    sql_path = root / sql_dir / f"{name}.sql"

    if sql_path.exists():
        console.print(f"[yellow]Quest '{name}' already exists at {root}[/yellow]")
        raise SystemExit(1)

    sql_path.parent.mkdir(parents=True, exist_ok=True)
    sql_path.write_text(SAMPLE_SQL.format(name=name), encoding='utf-8')
    console.print(f"[green]✅ Created {escape(str(sql_path))}[/green]")

    if with_adventure:
        adventure_path = root / ADVENTURE_FILE
        adventure_path.write_text(SAMPLE_ADVENTURE.format(name=name), encoding='utf-8')
        console.print(f"[green]✅ Created {escape(str(adventure_path))}[/green]")

    console.print(f"\nRun it with: [cyan]sqlquest run {root}[/cyan]")
