"""CLI entry point."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from urlspine.core.config import Settings, get_settings
from urlspine.core.exceptions import UrlSpineError
from urlspine.core.logging import configure_logging
from urlspine.core.urlspine import UrlSpine
from urlspine.models.events import MessageEvent, Source
from urlspine.notifier.console import ConsoleNotifier
from urlspine.query import format_line

app = typer.Typer(
    name="urlspine",
    help="Duplicate URL detection for chat channels",
    no_args_is_help=True,
)
console = Console()


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj


@app.callback()
def main(
    ctx: typer.Context,
    db: Optional[Path] = typer.Option(None, "--db", help="History database file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Duplicate URL detection for chat channels."""
    overrides = {}
    if db is not None:
        overrides["database_path"] = db
    if log_level is not None:
        overrides["log_level"] = log_level
    settings = get_settings(**overrides)
    configure_logging(settings.log_level, settings.log_format)
    ctx.obj = settings


@app.command()
def version() -> None:
    """Show version."""
    from urlspine import __version__

    console.print(f"urlspine {__version__}")


@app.command()
def info(ctx: typer.Context) -> None:
    """Show configuration."""
    import sys

    from urlspine import __version__

    settings = _settings(ctx)
    console.print(f"[bold]urlspine[/bold] {__version__}")
    console.print(f"Python {sys.version}")
    console.print(f"Store: {settings.storage_backend} ({settings.database_path})")
    console.print(f"Command: {settings.command_prefix}{settings.command_name}")


@app.command()
def observe(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Message text"),
    dst: str = typer.Option(..., "--dst", help="Destination channel"),
    src: str = typer.Option(..., "--src", help="Raw source, e.g. nick!user@host"),
    nick: Optional[str] = typer.Option(None, "--nick", help="Nick (parsed from --src if omitted)"),
) -> None:
    """Run one message through duplicate detection and print any notices."""
    source = Source(raw=src, nick=nick) if nick else Source.parse(src)
    message = MessageEvent(source=source, destination=dst, text=text)

    async def run() -> int:
        async with UrlSpine(ConsoleNotifier(), settings=_settings(ctx)) as spine:
            observations = await spine.on_message(message)
        return len(observations)

    count = _run(run())
    console.print(f"[dim]{count} URL(s) recorded[/dim]")


@app.command()
def recent(
    ctx: typer.Context,
    limit: int = typer.Option(5, "--limit", "-n", min=1, help="Number of URLs"),
) -> None:
    """Show the most recently seen distinct URLs."""
    settings = _settings(ctx)

    async def run():
        async with UrlSpine(ConsoleNotifier(), settings=settings) as spine:
            return await spine.store.recent_distinct(limit)

    events = _run(run())
    if not events:
        console.print("(no URLs)")
        return

    table = Table(title="Recent URLs")
    table.add_column("Seen", style="dim")
    table.add_column("Destination")
    table.add_column("URL", style="cyan")
    table.add_column("By")
    for event in events:
        seen, _, _ = format_line(event, settings.tzinfo).partition(": ")
        table.add_row(seen, event.dst, event.url, event.display_name)
    console.print(table)


@app.command()
def stats(
    ctx: typer.Context,
    url: Optional[str] = typer.Option(None, "--url", help="Only this URL"),
    dst: Optional[str] = typer.Option(None, "--dst", help="Only this destination"),
) -> None:
    """Count recorded sightings."""

    async def run() -> int:
        async with UrlSpine(ConsoleNotifier(), settings=_settings(ctx)) as spine:
            return await spine.store.count(url=url, dst=dst)

    console.print(f"{_run(run())} sighting(s)")


def _run(coro):
    try:
        return asyncio.run(coro)
    except UrlSpineError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e


if __name__ == "__main__":
    app()
