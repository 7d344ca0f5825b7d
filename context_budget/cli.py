"""Command line interface for context budget management."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer

from .config.settings import ContextBudgetConfig
from .core.budget_manager import ContextBudgetManager
from .errors import ContextBudgetError
from .services.relevance_scanner import MarkdownRelevanceScanner

app = typer.Typer(
    name="context-budget",
    help="Token-bounded context assembly for document generation.",
    no_args_is_help=True,
)


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )


def _load_config(config_file: Optional[Path], model: Optional[str],
                 max_tokens: Optional[int]) -> ContextBudgetConfig:
    if config_file is not None:
        if config_file.suffix.lower() == ".json":
            config = ContextBudgetConfig.from_json(str(config_file))
        else:
            config = ContextBudgetConfig.from_yaml(str(config_file))
    elif model:
        config = ContextBudgetConfig.for_model(model)
    else:
        config = ContextBudgetConfig()

    if max_tokens is not None:
        config.max_context_tokens = max_tokens
    return config


@app.command()
def scan(
    root: Path = typer.Argument(..., help="Project root to scan for markdown files"),
    max_depth: int = typer.Option(3, "--max-depth", help="Maximum directory depth"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable INFO logging"),
) -> None:
    """List markdown candidates with their relevance scores."""
    _configure_logging(verbose)
    scanner = MarkdownRelevanceScanner(max_depth=max_depth)
    try:
        candidates = asyncio.run(scanner.scan(str(root)))
    except ContextBudgetError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    if not candidates:
        typer.echo("No markdown candidates found.")
        return

    for candidate in candidates:
        typer.echo(f"{candidate.relevance_score:>5g}  {candidate.category:<13} {candidate.path}")


@app.command()
def inject(
    root: Path = typer.Argument(..., help="Project root to scan for markdown files"),
    core: Path = typer.Option(..., "--core", help="File holding the core context (e.g. README.md)"),
    threshold: Optional[float] = typer.Option(None, "--threshold", help="Minimum relevance score (0-100)"),
    max_files: Optional[int] = typer.Option(None, "--max-files", help="Maximum documents to inject"),
    document_type: str = typer.Option("project-charter", "--document-type", help="Document type label"),
    max_tokens: Optional[int] = typer.Option(None, "--max-tokens", help="Overall context token ceiling"),
    model: Optional[str] = typer.Option(None, "--model", help="Size the budget for a known model"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="YAML or JSON configuration file"),
    show_context: bool = typer.Option(False, "--show-context", help="Print the composed context"),
    as_json: bool = typer.Option(False, "--json", help="Print statistics as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable INFO logging"),
) -> None:
    """Seed the core context, run one injection pass and print the result."""
    _configure_logging(verbose)

    try:
        core_text = core.read_text(encoding="utf-8")
    except OSError as e:
        typer.echo(f"Error: cannot read core context file {core}: {e}", err=True)
        raise typer.Exit(1) from None

    try:
        config = _load_config(config_file, model, max_tokens)
    except OSError as e:
        typer.echo(f"Error: cannot read configuration file {config_file}: {e}", err=True)
        raise typer.Exit(1) from None
    except ContextBudgetError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    try:
        manager = ContextBudgetManager(config=config)
        manager.create_core_context(core_text)
        injected = asyncio.run(
            manager.inject_high_relevance_markdown_files(str(root), threshold, max_files)
        )
        context = manager.build_context_for_document(document_type)
    except ContextBudgetError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    stats = manager.get_injection_statistics()
    if as_json:
        typer.echo(json.dumps({"injected": injected, **stats, **manager.get_metrics()}, indent=2))
    else:
        typer.echo(f"Injected {injected} documents")
        typer.echo(manager.get_context_utilization_report())

    if show_context:
        typer.echo(context)


def main():
    app()


if __name__ == "__main__":
    main()
