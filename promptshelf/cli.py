"""promptshelf CLI - manage the prompt library from a terminal."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .bridge import Bridge, MessageDispatcher
from .errors import PromptShelfError
from .paths import ConfigPaths
from .router import PromptRequestRouter
from .storage import PromptStore

console = Console()


def _setup_logging(paths: ConfigPaths) -> logging.Logger:
    """Send promptshelf logs to <home>/logs/promptshelf.log."""
    paths.logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = paths.logs_dir / "promptshelf.log"

    logger = logging.getLogger("promptshelf")
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    handler = logging.FileHandler(log_path)
    handler.setFormatter(
        logging.Formatter("[%(asctime)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    )
    logger.addHandler(handler)

    return logger


def _format_created(value) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return ""
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc).strftime(
        "%Y-%m-%d %H:%M"
    )


def _parse_assignment(assignment: str) -> tuple[str, object]:
    """Split key=value; the value is read as JSON when it parses, else kept as text."""
    key, sep, raw = assignment.partition("=")
    if not sep or not key:
        raise click.BadParameter(f"expected key=value, got {assignment!r}")
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return key, value


def _fail(e: PromptShelfError) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(e.message)}")
    sys.exit(1)


@click.group()
@click.version_option(package_name="promptshelf")
@click.option(
    "--home",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Library directory (default: $PROMPTSHELF_HOME or ~/.config/promptshelf)",
)
@click.option("--verbose", "-v", is_flag=True, help="Write debug logs to <home>/logs")
@click.pass_context
def cli(ctx: click.Context, home: Path | None, verbose: bool):
    """promptshelf - a JSON-backed prompt library."""
    paths = ConfigPaths(home)
    if verbose:
        _setup_logging(paths)
    ctx.obj = PromptStore(paths=paths)


@cli.command("list")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
@click.pass_obj
def list_cmd(store: PromptStore, as_json: bool):
    """List prompts, newest first."""
    prompts = store.list_prompts()

    if as_json:
        click.echo(json.dumps(prompts, indent=2, ensure_ascii=False))
        return

    if not prompts:
        console.print("[yellow]No prompts yet.[/yellow]")
        return

    table = Table(title="Prompt Library")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Content")
    table.add_column("Created")

    for p in prompts:
        table.add_row(
            escape(str(p.get("id", ""))),
            escape(str(p.get("name") or "")),
            escape(str(p.get("content") or "")[:50]),
            _format_created(p.get("createdAt")),
        )

    console.print(table)


@cli.command()
@click.argument("prompt_id")
@click.pass_obj
def show(store: PromptStore, prompt_id: str):
    """Show a single prompt."""
    prompt = store.get_prompt(prompt_id)
    if prompt is None:
        _fail(PromptShelfError.not_found(prompt_id))

    extra = {
        k: v for k, v in prompt.items() if k not in ("id", "name", "content", "createdAt")
    }
    lines = [escape(str(prompt.get("content") or ""))]
    if extra:
        lines.append("")
        lines.extend(
            f"[dim]{escape(k)}:[/dim] {escape(json.dumps(v, ensure_ascii=False))}"
            for k, v in extra.items()
        )

    console.print(
        Panel(
            "\n".join(lines),
            title=escape(str(prompt.get("name") or prompt_id)),
            subtitle=_format_created(prompt.get("createdAt")),
        )
    )


@cli.command()
@click.argument("prompt_id")
@click.option("--content", "-c", required=True, help="Prompt text")
@click.option("--name", "-n", default=None, help="Display name")
@click.pass_obj
def add(store: PromptStore, prompt_id: str, content: str, name: str | None):
    """Add a prompt."""
    prompt = {"id": prompt_id, "content": content}
    if name is not None:
        prompt["name"] = name
    try:
        store.add_prompt(prompt)
    except PromptShelfError as e:
        _fail(e)
    console.print(f"[green]✓[/green] Added {prompt_id}")


@cli.command()
@click.argument("prompt_id")
@click.option("--set", "assignments", multiple=True, help="key=value (repeatable)")
@click.option("--unset", "removals", multiple=True, help="Field to remove (repeatable)")
@click.pass_obj
def update(
    store: PromptStore,
    prompt_id: str,
    assignments: tuple[str, ...],
    removals: tuple[str, ...],
):
    """Update fields of a prompt. id and createdAt cannot be changed."""
    updates = dict(_parse_assignment(a) for a in assignments)
    updates.update({key: None for key in removals})
    if not updates:
        raise click.UsageError("Nothing to update: pass --set or --unset")
    try:
        store.update_prompt(prompt_id, updates)
    except PromptShelfError as e:
        _fail(e)
    console.print(f"[green]✓[/green] Updated {prompt_id}")


@cli.command()
@click.argument("prompt_id")
@click.pass_obj
def delete(store: PromptStore, prompt_id: str):
    """Delete a prompt."""
    try:
        deleted = store.delete_prompt(prompt_id)
    except PromptShelfError as e:
        _fail(e)
    if not deleted:
        _fail(PromptShelfError.not_found(prompt_id))
    console.print(f"[green]✓[/green] Deleted {prompt_id}")


@cli.command()
@click.argument("message")
@click.pass_obj
def send(store: PromptStore, message: str):
    """Send a raw bridge message, e.g. 'add_prompt:{"id":"p1","content":"hi"}'.

    Prints every window callback the message produces, in delivery order.
    """
    delivered: list[tuple[str, str]] = []
    bridge = Bridge(lambda function, argument: delivered.append((function, argument)))
    dispatcher = MessageDispatcher([PromptRequestRouter(store, bridge)])

    if not dispatcher.dispatch(message):
        console.print(f"[red]Error:[/red] Unhandled message type in {escape(repr(message))}")
        sys.exit(1)

    bridge.callbacks.drain()
    for function, argument in delivered:
        click.echo(f"{function}('{argument}')")


def main():
    cli()


if __name__ == "__main__":
    main()
