import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich import print
from rich.panel import Panel
from rich.table import Table

from topicgraph.config import get_config
from topicgraph.models import Difficulty, Topic
from topicgraph.services import (
    DocumentStore,
    NotFoundError,
    TopicGraph,
    ValidationError,
    all_of,
    difficulty_is,
    has_tag,
    has_use_case,
    load,
)

logger = logging.getLogger(__name__)

APP_HELP = """
topicgraph: validate and browse a documentation topic manifest.

The manifest describes topics (one markdown file each) and how they relate:
prerequisites, suggested next topics, related topics, tags and difficulty.

CORE WORKFLOW:
1. CHECK:   Run `topicgraph validate` after editing the manifest.
2. BROWSE:  Run `topicgraph list --difficulty beginner` to find a starting point.
3. PLAN:    Run `topicgraph path "<topic>"` for a learning order ending at a topic.
4. READ:    Run `topicgraph body "<topic>"` to print the document.
"""

app = typer.Typer(name="topicgraph", help=APP_HELP, no_args_is_help=True)

state = {"manifest": None}


@app.callback()
def main(
    manifest: Optional[Path] = typer.Option(
        None, "--manifest", "-m", help="Manifest JSON. Defaults to TOPICGRAPH_MANIFEST_PATH."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
):
    """
    Topic manifest tools.
    """
    config = get_config()
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    state["manifest"] = manifest or config.manifest_path


def _load_graph() -> TopicGraph:
    manifest_path = state["manifest"] or get_config().manifest_path
    try:
        return load(Path(manifest_path))
    except FileNotFoundError:
        print(f"[red]Manifest not found: {manifest_path}[/red]")
        print("Pass --manifest or set TOPICGRAPH_MANIFEST_PATH.")
        raise typer.Exit(code=1)
    except ValidationError as e:
        print(f"[red]Invalid manifest ({e.kind.value}):[/red] {e.message}")
        for problem in e.detail.get("problems", []):
            print(f"  - {problem}")
        raise typer.Exit(code=1)


def _docs_store(manifest_path: Path) -> DocumentStore:
    config = get_config()
    return DocumentStore(config.docs_root or Path(manifest_path).resolve().parent)


def _lookup(graph: TopicGraph, name: str) -> Topic:
    try:
        return graph.get_by_name(name)
    except NotFoundError as e:
        print(f"[red]{e.message}[/red]")
        raise typer.Exit(code=1)


def _topic_dict(topic: Topic) -> dict:
    return topic.model_dump(mode="json")


def _topics_table(title: str, topics: List[Topic]) -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim")
    table.add_column("Topic", style="cyan")
    table.add_column("Difficulty", style="magenta")
    table.add_column("File")
    table.add_column("Tags", style="green")
    for index, topic in enumerate(topics, start=1):
        table.add_row(str(index), topic.name, topic.difficulty.value, topic.file, ", ".join(topic.tags))
    return table


def _emit(title: str, topics: List[Topic], json_output: bool) -> None:
    if json_output:
        typer.echo(json.dumps([_topic_dict(t) for t in topics]))
        return
    if not topics:
        print("[dim]No topics.[/dim]")
        return
    print(_topics_table(title, topics))


@app.command()
def validate(
    check_documents: bool = typer.Option(False, "--check-documents", help="Fail if a topic's file is missing."),
    check_snippets: bool = typer.Option(False, "--check-snippets", help="Compare totalSnippets with fenced code blocks."),
):
    """
    Load the manifest and run every structural and graph check.

    Exits with code 1 on the first validation error. Mismatched
    leads_to/prerequisites pairs are reported but do not fail.
    """
    graph = _load_graph()
    manifest = graph.manifest

    store = _docs_store(state["manifest"])
    if check_documents:
        try:
            missing = store.missing_documents(graph)
        except ValueError as e:
            print(f"[red]{e}[/red]")
            raise typer.Exit(code=1)
        if missing:
            for topic in missing:
                print(f"[red]Missing document for {topic.name!r}: {topic.file}[/red]")
            raise typer.Exit(code=1)

    if check_snippets:
        try:
            counted = store.snippet_total(graph)
        except ValueError as e:
            print(f"[red]{e}[/red]")
            raise typer.Exit(code=1)
        if counted != manifest.total_snippets:
            print(
                f"[yellow]warning:[/yellow] totalSnippets is {manifest.total_snippets}, "
                f"but {counted} fenced code blocks were found"
            )

    print(f"[bold green]OK:[/bold green] {manifest.name} {manifest.version} ({len(graph)} topics)")


@app.command("list")
def list_topics(
    difficulty: Optional[Difficulty] = typer.Option(None, "--difficulty", "-d", help="Only this difficulty."),
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Only topics with this tag."),
    use_case: Optional[str] = typer.Option(None, "--use-case", "-u", help="Only topics with this use case."),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List topics in manifest order, optionally filtered.
    """
    graph = _load_graph()
    predicates = []
    if difficulty is not None:
        predicates.append(difficulty_is(difficulty))
    if tag:
        predicates.append(has_tag(tag))
    if use_case:
        predicates.append(has_use_case(use_case))
    _emit("Topics", graph.filter(all_of(*predicates)), json_output)


@app.command()
def show(
    name: str = typer.Argument(..., help="Topic name"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show one topic's metadata and edges.
    """
    graph = _load_graph()
    topic = _lookup(graph, name)
    if json_output:
        typer.echo(json.dumps(_topic_dict(topic)))
        return

    lines = [
        f"[bold]File:[/bold] {topic.file}",
        f"[bold]Difficulty:[/bold] {topic.difficulty.value}",
        f"[bold]Prerequisites:[/bold] {', '.join(topic.prerequisites) or '-'}",
        f"[bold]Leads to:[/bold] {', '.join(topic.leads_to) or '-'}",
        f"[bold]Related:[/bold] {', '.join(topic.related) or '-'}",
        f"[bold]Tags:[/bold] {', '.join(topic.tags) or '-'}",
        f"[bold]Use cases:[/bold] {'; '.join(topic.use_cases) or '-'}",
    ]
    print(Panel("\n".join(lines), title=topic.name, border_style="blue"))


@app.command()
def path(
    name: str = typer.Argument(..., help="Topic name"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Recommended learning path: every prerequisite, then the topic itself.
    """
    graph = _load_graph()
    _lookup(graph, name)
    _emit(f"Path to {name}", graph.recommended_path(name), json_output)


@app.command()
def related(
    name: str = typer.Argument(..., help="Topic name"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Topics declared as related to NAME (declared direction only).
    """
    graph = _load_graph()
    _lookup(graph, name)
    _emit(f"Related to {name}", graph.related(name), json_output)


@app.command()
def body(name: str = typer.Argument(..., help="Topic name")):
    """
    Print the raw document for a topic.
    """
    graph = _load_graph()
    topic = _lookup(graph, name)
    store = _docs_store(state["manifest"])
    try:
        text = store.read_body(topic)
    except (FileNotFoundError, ValueError) as e:
        print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)
    typer.echo(text, nl=False)


if __name__ == "__main__":
    app()
