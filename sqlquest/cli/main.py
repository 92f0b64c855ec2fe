"""Main CLI entry point for SQL Quest."""

from __future__ import annotations

import click
from rich.panel import Panel
from rich.text import Text

from sqlquest import __version__
from sqlquest.cli.commands import register_commands
from sqlquest.cli.commands.configuration import config_group
from sqlquest.cli.commands.database import db_group
from sqlquest.cli.commands.new import new_command
from sqlquest.cli.commands.run import run_command
from sqlquest.cli.utils import console, setup_logging
from sqlquest.config import EnvironmentSettings


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version information")
@click.option("--config", type=click.Path(exists=True), help="Path to configuration file")
@click.option("--db", help="Database connection name")
@click.option("--url", help="Database URL, used instead of a configuration file")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(
    ctx: click.Context,
    version: bool,
    config: str,
    db: str,
    url: str,
    verbose: bool,
) -> None:
    """SQL Quest - run ordered batches of templated SQL against a database."""
    ctx.ensure_object(dict)
    ctx.obj.update(
        {
            "config": config,
            "db": db,
            "url": url,
            "verbose": verbose,
        }
    )

    settings = EnvironmentSettings()
    setup_logging(settings.log_level, verbose=verbose or settings.debug)

    if version:
        console.print(f"SQL Quest v{__version__}")
        return

    if ctx.invoked_subcommand is None:
        show_dashboard()


# Commands are registered in workflow order:
# 1) Running quests, 2) Environment tools.
COMMAND_REGISTRY = [
    run_command,
    new_command,
    db_group,
    config_group,
]

register_commands(cli, COMMAND_REGISTRY)


def show_dashboard() -> None:
    """Display the main dashboard."""
    title = Text("SQL Quest", style="bold blue")
    subtitle = Text("Templated SQL batches with retries and transactions", style="italic")

    dashboard_content = Text()
    dashboard_content.append("🗡️  Run a quest:        sqlquest run QUEST_DIR\n", style="bold")
    dashboard_content.append("📜 Start a quest:      sqlquest new QUEST_DIR\n", style="bold")
    dashboard_content.append("🗄️  Check connections:  sqlquest db test\n", style="bold")
    dashboard_content.append("⚙️  Configure:          sqlquest config sample sqlquest.yaml\n", style="bold")
    dashboard_content.append("\nRun 'sqlquest --help' for available commands", style="dim")

    panel = Panel(
        dashboard_content,
        title=title,
        subtitle=subtitle,
        border_style="blue",
        padding=(1, 2),
    )

    console.print(panel)


if __name__ == "__main__":
    cli()
