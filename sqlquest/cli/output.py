"""Rich console rendering of quest progress and results."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sqlquest.db.base import QueryResult
from sqlquest.reporting import QuestReporter


def build_table(result: QueryResult, title: Optional[str] = None) -> Table:
    """Build a rich table with one column per field, in field order."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    for field in result.fields:
        table.add_column(escape(field), style="cyan")
    for row in result.rows:
        table.add_row(*["NULL" if row.get(field) is None else escape(str(row.get(field))) for field in result.fields])
    return table


class ConsoleReporter(QuestReporter):
    """Reporter printing statement progress to a rich console."""

    def __init__(self, console: Console, show_statements: bool = True) -> None:
        self.console = console
        self.show_statements = show_statements

    def statement(self, sql: str) -> None:
        if self.show_statements:
            self.console.print(f"[bold blue]▶[/bold blue] [white]{escape(sql)}[/white]", highlight=False)

    def timing(self, sql: str, elapsed_ms: float) -> None:
        self.console.print(f"  [dim]⏱  {elapsed_ms:.2f}ms[/dim]")

    def completed(self, sql: str, result: QueryResult) -> None:
        if result.fields:
            self.console.print(f"  [green]✓[/green] {result.row_count} row(s)")
        else:
            self.console.print(f"  [green]✓[/green] {result.rows_affected} row(s) affected")

    def retrying(self, error: BaseException, attempt: int, wait_ms: int) -> None:
        self.console.print(f"[yellow]⟳ Attempt {attempt} failed: {escape(str(error))}. Retrying in {wait_ms}ms[/yellow]")

    def error(self, error: BaseException, context: Optional[str] = None) -> None:
        prefix = f"{context}: " if context else ""
        self.console.print(f"[red]❌ {escape(prefix + str(error))}[/red]", highlight=False)

    def table(self, result: QueryResult) -> None:
        if not result.fields:
            self.console.print(f"[dim]{result.rows_affected} row(s) affected[/dim]")
            return
        self.console.print(build_table(result))
        self.console.print(f"[dim]{result.row_count} row(s)[/dim]")
