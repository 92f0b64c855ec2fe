"""Quest execution CLI command."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import click

from rich.markup import escape

from sqlquest.cli.output import ConsoleReporter
from sqlquest.cli.utils import console, print_exception
from sqlquest.config import load_config
from sqlquest.exceptions import ConfigurationError
from sqlquest.quest import QuestRunner, load_adventure


def parse_assignments(assignments: Iterable[str]) -> Dict[str, Any]:
    """Turn ``key=value`` pairs into a template view."""
    view: Dict[str, Any] = {}
    for assignment in assignments:
        key, separator, value = assignment.partition("=")
        if not separator or not key.strip():
            raise click.BadParameter(f"Expected KEY=VALUE, got '{assignment}'", param_hint="--set")
        view[key.strip()] = value
    return view


@click.command(name="run")
@click.argument("quest_dir", type=click.Path(exists=True, file_okay=False))
@click.option("--set", "assignments", multiple=True, metavar="KEY=VALUE", help="Template binding for every statement")
@click.option("--timing/--no-timing", default=None, help="Report the duration of every statement")
@click.option("--split-service", help="URL of a dialect-aware statement splitting service")
@click.option("--quiet", "-q", is_flag=True, help="Do not echo statements")
@click.pass_context
def run_command(
    ctx: click.Context,
    quest_dir: str,
    assignments: tuple[str, ...],
    timing: Optional[bool],
    split_service: Optional[str],
    quiet: bool,
) -> None:
    """Run the quest in QUEST_DIR."""
    verbose = ctx.obj.get('verbose', False)
    view = parse_assignments(assignments)

    try:
        config = load_config(ctx.obj.get('config'), ctx.obj.get('url'), quest_dir=quest_dir)
        if timing is not None:
            config = config.model_copy(update={'execution': config.execution.model_copy(update={'timing': timing})})
        if split_service:
            config = config.model_copy(update={'splitter': config.splitter.model_copy(update={'service_url': split_service})})

        runner = QuestRunner.from_config(
            config,
            quest_dir,
            load_adventure(quest_dir),
            db_name=ctx.obj.get('db'),
            view=view,
            reporter=ConsoleReporter(console, show_statements=not quiet),
        )
    except ConfigurationError as exc:
        console.print(f"[red]Configuration Error: {escape(str(exc))}[/red]", highlight=False)
        raise SystemExit(1) from exc

    console.print(f"[bold blue]Quest: {runner.name}[/bold blue] [dim]({runner.adventure.description})[/dim]\n")

    try:
        runner.run()
    except Exception as exc:
        # The reporter has already shown the failure
        if verbose:
            print_exception("Quest failed", exc, verbose=True)
        raise SystemExit(1) from exc

    console.print(f"\n[green]✅ Quest '{runner.name}' completed[/green]")
