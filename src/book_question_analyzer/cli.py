"""Command-line interface for Book Question Analyzer."""

import json
import logging
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from book_question_analyzer import __version__
from book_question_analyzer.config import Settings, get_settings
from book_question_analyzer.errors import QuestionAnalyzerError
from book_question_analyzer.models.entities import EventDetail
from book_question_analyzer.storage.base import NarrativeStore

console = Console()
err_console = Console(stderr=True)


def configure_logging(level: str) -> None:
    """Send log records through rich on stderr."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _settings(ctx: click.Context) -> Settings:
    return ctx.obj["settings"]


def _store(ctx: click.Context) -> NarrativeStore:
    """Open the configured store once per invocation."""
    from book_question_analyzer.storage import open_store

    if ctx.obj.get("store") is None:
        ctx.obj["store"] = open_store(_settings(ctx))
    return ctx.obj["store"]


def _fail(ctx: click.Context, error: QuestionAnalyzerError) -> NoReturn:
    err_console.print(f"[red]Error ({error.status_code}):[/red] {error}")
    ctx.exit(1)


def _print_events(events: list[EventDetail]) -> None:
    table = Table()
    table.add_column("Event", style="cyan")
    table.add_column("Characters")
    table.add_column("Place", style="green")
    table.add_column("Description", style="dim")

    for event in events:
        table.add_row(
            event.name,
            ", ".join(c.name for c in event.characters),
            event.place.name if event.place else "",
            event.description or "",
        )
    console.print(table)


@click.group()
@click.version_option(version=__version__)
@click.option("--seeds-dir", type=click.Path(file_okay=False, path_type=Path), help="Seed JSON directory")
@click.option("--backend", type=click.Choice(["seeds", "neo4j"]), help="Storage backend")
@click.option("--verbose", "-v", is_flag=True, help="Show analysis trace")
@click.pass_context
def main(ctx: click.Context, seeds_dir: Path | None, backend: str | None, verbose: bool) -> None:
    """Book Question Analyzer - Ask questions about a novel's events."""
    settings = get_settings()
    updates: dict = {}
    if seeds_dir:
        updates["seeds_path"] = seeds_dir
    if backend:
        updates["storage_backend"] = backend
    if verbose:
        updates["log_level"] = "DEBUG"
    if updates:
        settings = settings.model_copy(update=updates)

    configure_logging(settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@main.command()
@click.argument("question")
@click.option("--json", "as_json", is_flag=True, help="Print the JSON response body")
@click.pass_context
def ask(ctx: click.Context, question: str, as_json: bool) -> None:
    """Answer a question with the events it refers to."""
    from book_question_analyzer.analyze import QueryAnalyzer
    from book_question_analyzer.resolve import QuestionResolver

    try:
        store = _store(ctx)
        analyzer = QueryAnalyzer(store, fuzzy_threshold=_settings(ctx).fuzzy_threshold)
        result = QuestionResolver(store, analyzer).resolve(question)
    except QuestionAnalyzerError as e:
        _fail(ctx, e)

    if as_json:
        click.echo(json.dumps(result.to_payload(), ensure_ascii=False, indent=2))
        return

    console.print(f"[bold]Question:[/bold] {question}")
    console.print(f"[dim]Resolved as {result.state.value}, chapter: {result.chapter_label}[/dim]\n")

    if not result.results:
        console.print("[yellow]No events found[/yellow]")
        return

    _print_events(result.results)


@main.command()
@click.argument("question")
@click.pass_context
def analyze(ctx: click.Context, question: str) -> None:
    """Show the signals detected in a question."""
    from book_question_analyzer.analyze import QueryAnalyzer

    try:
        analysis = QueryAnalyzer(_store(ctx), fuzzy_threshold=_settings(ctx).fuzzy_threshold).analyze(question)
    except QuestionAnalyzerError as e:
        _fail(ctx, e)

    table = Table(title="Question Analysis")
    table.add_column("Signal", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Normalized", analysis.normalized)
    table.add_row("Chapter", str(analysis.chapter_number) if analysis.chapter_number is not None else "-")
    table.add_row("Characters", ", ".join(analysis.character_names) or "-")
    table.add_row("Places", ", ".join(analysis.place_names) or "-")
    table.add_row("Objects", ", ".join(analysis.object_names) or "-")
    table.add_row(
        "Intents",
        ", ".join(f"{m.intent.value} ({m.phrase})" for m in analysis.intents) or "-",
    )
    table.add_row("Similar event", analysis.fuzzy_event.name if analysis.fuzzy_event else "-")

    console.print(table)


@main.command()
@click.argument("query")
@click.pass_context
def search(ctx: click.Context, query: str) -> None:
    """Search every collection by name."""
    from book_question_analyzer.resolve import CatalogSearch

    try:
        results = CatalogSearch(_store(ctx)).search(query)
    except QuestionAnalyzerError as e:
        _fail(ctx, e)

    console.print(f"[bold]Searching:[/bold] {query}\n")
    if not results.total:
        console.print("[yellow]No matches[/yellow]")
        return

    for title, items in [
        ("Characters", results.characters),
        ("Places", results.places),
        ("Objects", results.objects),
        ("Generations", results.generations),
        ("Events", results.events),
    ]:
        if items:
            console.print(f"[bold]{title}:[/bold]")
            for item in items:
                console.print(f"  {item.name}")


@main.command()
@click.pass_context
def catalog(ctx: click.Context) -> None:
    """Show how many records each collection holds."""
    try:
        store = _store(ctx)
        counts = [
            ("Characters", len(store.characters.list_names())),
            ("Places", len(store.places.list_names())),
            ("Objects", len(store.objects.list_names()) if store.objects is not None else 0),
            ("Generations", len(store.generations.list_names())),
            ("Events", len(store.events.list_summaries())),
            ("Chapters", len(store.chapters.list_numbers())),
        ]
    except QuestionAnalyzerError as e:
        _fail(ctx, e)

    table = Table(title="Catalog")
    table.add_column("Collection", style="cyan")
    table.add_column("Count", style="green", justify="right")
    for name, count in counts:
        table.add_row(name, f"{count:,}")

    console.print(table)


@main.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Check system status (storage backend, Neo4j connection)."""
    from book_question_analyzer.graph.connection import check_neo4j_connection

    settings = _settings(ctx)
    console.print("[bold]Book Question Analyzer Status[/bold]\n")
    console.print(f"Backend: {settings.storage_backend}")
    console.print(f"Seeds: {settings.seeds_dir}")

    if settings.seeds_dir.is_dir():
        console.print("[green]OK[/green] Seed directory found")
    else:
        console.print("[red]X[/red] Seed directory missing")

    console.print(f"Neo4j URI: {settings.neo4j_uri}")
    if check_neo4j_connection(settings):
        console.print("[green]OK[/green] Neo4j connected")
    else:
        console.print("[red]X[/red] Neo4j not reachable")


@main.group()
def graph() -> None:
    """Graph database commands."""
    pass


@graph.command(name="load")
@click.pass_context
def graph_load(ctx: click.Context) -> None:
    """Load the seed files into Neo4j."""
    from book_question_analyzer.graph.connection import get_driver
    from book_question_analyzer.graph.writer import GraphWriter
    from book_question_analyzer.storage.seeds import load_seed_store

    settings = _settings(ctx)
    try:
        store = load_seed_store(settings.seeds_dir)
    except QuestionAnalyzerError as e:
        _fail(ctx, e)

    driver = get_driver(settings)
    if not driver:
        console.print("[red]Cannot connect to Neo4j[/red]")
        ctx.exit(1)

    writer = GraphWriter(driver)
    try:
        with console.status("Writing to Neo4j..."):
            counts = writer.write_store(store)
    finally:
        writer.close()

    console.print("[green]OK[/green] Loaded seeds into Neo4j")
    for name, count in counts.items():
        console.print(f"  {name}: {count:,}")


@graph.command(name="stats")
@click.pass_context
def graph_stats(ctx: click.Context) -> None:
    """Show node counts per label and the relationship count."""
    from neo4j.exceptions import DriverError, Neo4jError

    from book_question_analyzer.graph.connection import get_driver

    driver = get_driver(_settings(ctx))
    if not driver:
        console.print("[red]Cannot connect to Neo4j[/red]")
        ctx.exit(1)

    try:
        with driver.session() as session:
            labels = [
                (record["label"] or "Unlabeled", record["count"])
                for record in session.run("""
                    MATCH (n)
                    RETURN labels(n)[0] as label, count(*) as count
                    ORDER BY count DESC
                """)
            ]
            rel_count = session.run("MATCH ()-[r]->() RETURN count(r) as count").single()["count"]
    except (Neo4jError, DriverError) as e:
        err_console.print(f"[red]Error:[/red] Neo4j query failed: {e}")
        ctx.exit(1)
    finally:
        driver.close()

    table = Table(title="Graph")
    table.add_column("Label", style="cyan")
    table.add_column("Nodes", style="green", justify="right")
    for label, count in labels:
        table.add_row(label, f"{count:,}")
    console.print(table)

    console.print(f"[bold]Total nodes:[/bold] {sum(count for _, count in labels):,}")
    console.print(f"[bold]Total relationships:[/bold] {rel_count:,}")


if __name__ == "__main__":
    main()
