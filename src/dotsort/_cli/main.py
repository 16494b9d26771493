import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from dotsort._dot import MalformedInputError, load_graph
from dotsort._graph import CycleDetectedError, DependencyGraph, detect_cycle, topological_sort

from .config import ConfigError, DotsortConfig, get_config

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True, soft_wrap=True)
# Console for stdout (results); node names are printed verbatim
out_console = Console(markup=False, emoji=False, highlight=False, soft_wrap=True)


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Detect cycles in and topologically sort DOT dependency graphs."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr, replacing any
    # handlers left by an earlier invocation in the same process
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        force=True,
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]Error: {escape(message)}[/red]")
    return typer.Exit(code=1)


def _load_config() -> DotsortConfig:
    try:
        return get_config()
    except ConfigError as e:
        raise _fail(f"Configuration error: {e}") from e


def _load(path: Path | None, config: DotsortConfig) -> DependencyGraph[str]:
    """Load the graph from the CLI path, falling back to [tool.dotsort].graph."""
    effective_path = path if path is not None else config.graph
    if effective_path is None:
        msg = "No graph file specified. Provide a FILE argument or configure [tool.dotsort].graph in pyproject.toml."
        raise _fail(msg)

    logger.debug("Loading graph from %s", effective_path)
    try:
        graph = load_graph(effective_path)
    except OSError as e:
        raise _fail(f"Cannot read {effective_path}: {e.strerror or e}") from e
    except MalformedInputError as e:
        raise _fail(f"{effective_path}: {e}") from e

    logger.debug("Graph has %d nodes", len(graph))
    return graph


GraphFileArgument = Annotated[
    Path | None,
    typer.Argument(help="Path to a DOT digraph file (defaults to [tool.dotsort].graph)", show_default=False),
]


@app.command()
def check(
    path: GraphFileArgument = None,
    *,
    strict: Annotated[
        bool | None,
        typer.Option("--strict/--no-strict", help="Exit non-zero when a cycle is found", show_default=False),
    ] = None,
) -> None:
    """Check a graph for circular dependencies."""
    config = _load_config()
    graph = _load(path, config)

    cycle = detect_cycle(graph)
    if cycle is None:
        out_console.print("The graph has no circular dependencies")
        return

    err_console.print(escape(cycle.message))
    logger.debug("Cycle: %s", " -> ".join(str(node) for node in cycle.path))

    effective_strict = strict if strict is not None else config.strict
    if effective_strict:
        raise typer.Exit(code=1)


@app.command()
def sort(path: GraphFileArgument = None) -> None:
    """Print the nodes of a graph in dependency order, one per line."""
    config = _load_config()
    graph = _load(path, config)

    try:
        order = topological_sort(graph)
    except CycleDetectedError as e:
        err_console.print(f"[red]ERROR: {escape(e.cycle.message)}[/red]")
        err_console.print("[red]           Cannot sort a graph with cycles[/red]")
        raise typer.Exit(code=1) from e

    for node in order:
        out_console.print(node)


def main() -> None:
    app()
