"""
CLI Main - Typer-based command-line interface.

Usage:
    docverify validate invoice.pdf --reference expected.json --type invoice
    docverify extract receipt.jpg --field total --field date
    docverify providers
    docverify serve
"""

from __future__ import annotations

import asyncio
import json
import mimetypes
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

import httpx
import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from docverify.adapters.llm import InMemoryMetrics, ProviderKind
from docverify.adapters.providers import build_registry
from docverify.config import DocVerifyError, configure_logging, get_settings
from docverify.domains.extraction import SUPPORTED_CONTENT_TYPES, DocumentInput
from docverify.domains.orchestration import (
    PipelineFacade,
    PipelinePhase,
    PipelineResult,
    build_pipeline,
)

T = TypeVar("T")

app = typer.Typer(
    name="docverify",
    help="DocVerify - Document extraction and cross-validation",
    add_completion=False,
)
console = Console()


def _load_document(path: Path) -> DocumentInput:
    """Read a local file, guessing its content type from the extension."""
    if not path.exists():
        console.print(f"[red]Error:[/red] File not found: {path}")
        raise typer.Exit(1)

    content_type, _ = mimetypes.guess_type(path.name)
    if content_type not in SUPPORTED_CONTENT_TYPES:
        console.print(f"[red]Error:[/red] Unsupported file type: {content_type or path.suffix}")
        raise typer.Exit(1)

    content = path.read_bytes()
    if not content:
        console.print(f"[red]Error:[/red] File is empty: {path}")
        raise typer.Exit(1)

    return DocumentInput(content=content, filename=path.name, content_type=content_type)


async def _with_pipeline(work: Callable[[PipelineFacade], Awaitable[T]]) -> T:
    """Run work against a pipeline wired to one shared HTTP client."""
    settings = get_settings()
    async with httpx.AsyncClient(timeout=httpx.Timeout(settings.llm_timeout_seconds)) as client:
        registry = build_registry(settings, client, InMemoryMetrics())
        pipeline = build_pipeline(settings, registry)
        return await work(pipeline)


def _run(work: Callable[[PipelineFacade], Awaitable[T]], description: str) -> T:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(description, total=None)
        try:
            return asyncio.run(_with_pipeline(work))
        except DocVerifyError as e:
            console.print(f"[red]Error:[/red] {e.message}")
            raise typer.Exit(1) from e


@app.callback()
def _configure(
    log_level: str | None = typer.Option(None, "--log-level", help="Override LOG_LEVEL"),
) -> None:
    configure_logging(log_level)


@app.command()
def validate(
    file: Path = typer.Argument(..., help="PDF or image to validate"),
    reference: Path = typer.Option(..., "--reference", "-r", help="Reference data JSON file"),
    document_type: str = typer.Option("document", "--type", "-t", help="Document type label"),
    fields: list[str] | None = typer.Option(None, "--field", "-f", help="Field to prioritize"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON path"),
) -> None:
    """Extract a document and cross-validate it against reference data."""
    document = _load_document(file)
    if not reference.exists():
        console.print(f"[red]Error:[/red] Reference file not found: {reference}")
        raise typer.Exit(1)
    reference_json = reference.read_text(encoding="utf-8")
    if not reference_json.strip():
        console.print("[red]Error:[/red] Reference file is empty")
        raise typer.Exit(1)

    result = _run(
        lambda pipeline: pipeline.run(document, reference_json, document_type, fields or None),
        "Extracting and validating...",
    )

    _print_result(result)

    if output:
        output.write_text(json.dumps(result.to_response(), indent=2), encoding="utf-8")
        console.print(f"\n[green]Saved to:[/green] {output}")

    if not result.success:
        raise typer.Exit(1)


def _print_result(result: PipelineResult) -> None:
    table = Table(title="Validation Summary")
    table.add_column("Phase", style="cyan")
    table.add_column("Status")
    table.add_column("Provider")
    table.add_column("Model")
    table.add_column("Time (s)", justify="right")

    for step in result.steps:
        phase = result.extraction if step.name is PipelinePhase.EXTRACTION else result.validation
        status = {
            "completed": "[green]completed[/green]",
            "failed": "[red]failed[/red]",
        }.get(step.status, f"[dim]{step.status}[/dim]")
        table.add_row(
            step.name.value,
            status,
            phase.provider_name if phase else "",
            phase.model_used if phase else "",
            f"{phase.processing_time:.2f}" if phase else "",
        )
    console.print(table)

    if not result.success:
        console.print(
            f"\n[red]Failed during {result.failed_phase.value if result.failed_phase else '?'}:"
            f"[/red] {escape(result.error or '')}"
        )
        return

    validation = result.validation
    verdict = "[green]VALID[/green]" if validation.is_valid else "[red]DISCREPANCIES FOUND[/red]"
    console.print(
        Panel(
            f"[bold]Verdict:[/bold] {verdict}\n"
            f"[bold]Confidence:[/bold] {validation.confidence_score:.0%}\n\n"
            f"{escape(validation.analysis_text)}",
            title="Analysis",
        )
    )

    if validation.discrepancies:
        disc_table = Table(title="Discrepancies")
        disc_table.add_column("Field", style="cyan")
        disc_table.add_column("Extracted")
        disc_table.add_column("Reference")
        disc_table.add_column("Type")
        disc_table.add_column("Severity", justify="right")
        for d in validation.discrepancies:
            disc_table.add_row(
                escape(d.field),
                escape(d.extracted_value),
                escape(d.provided_value),
                d.discrepancy_type.value,
                _severity_color(d.severity),
            )
        console.print(disc_table)

    for warning in validation.warnings:
        console.print(f"[yellow]![/yellow] {warning}")


def _severity_color(severity: float) -> str:
    """Color-code a 0-1 severity score."""
    if severity >= 0.7:
        return f"[bold red]{severity:.2f}[/bold red]"
    if severity >= 0.4:
        return f"[yellow]{severity:.2f}[/yellow]"
    return f"[green]{severity:.2f}[/green]"


@app.command()
def extract(
    file: Path = typer.Argument(..., help="PDF or image to extract"),
    document_type: str = typer.Option("document", "--type", "-t", help="Document type label"),
    fields: list[str] | None = typer.Option(None, "--field", "-f", help="Field to prioritize"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON path"),
) -> None:
    """Run the extraction phase only."""
    document = _load_document(file)

    result = _run(
        lambda pipeline: pipeline.extractor.extract(document, document_type, fields or None),
        "Extracting...",
    )

    if not result.success:
        console.print(f"[red]Extraction failed:[/red] {result.error_message}")
        raise typer.Exit(1)

    table = Table(title="Extraction Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Provider", result.provider_name)
    table.add_row("Model", result.model_used)
    table.add_row("Processing Time", f"{result.processing_time:.2f}s")
    for key, value in result.metadata.items():
        table.add_row(key, str(value))
    console.print(table)
    console.print(Panel(escape(result.extracted_data), title="Extracted Data"))

    if output:
        output.write_text(json.dumps(result.model_dump(mode="json"), indent=2), encoding="utf-8")
        console.print(f"\n[green]Saved to:[/green] {output}")


@app.command()
def providers() -> None:
    """Show the configured provider registry."""
    settings = get_settings()
    primaries = {
        ProviderKind.VISION: settings.vision_provider,
        ProviderKind.ANALYSIS: settings.analysis_provider,
    }

    async def _list() -> list[tuple[ProviderKind, str, str, bool]]:
        async with httpx.AsyncClient() as client:
            registry = build_registry(settings, client)
            return [
                (kind, p.name, p.config.model, p.name == primaries[kind])
                for kind in ProviderKind
                for p in registry.providers(kind)
            ]

    try:
        rows = asyncio.run(_list())
    except DocVerifyError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1) from e

    table = Table(title="Providers")
    table.add_column("Kind", style="cyan")
    table.add_column("Name")
    table.add_column("Model")
    table.add_column("Primary", justify="center")
    for kind, name, model, primary in rows:
        table.add_row(kind.value, name, model, "[green]*[/green]" if primary else "")
    console.print(table)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Host to bind"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    console.print("\n[green]Starting DocVerify API server[/green]")
    console.print(f"[dim]http://{host}:{port}[/dim]\n")

    uvicorn.run(
        "docverify.interfaces.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    from docverify import __version__

    console.print(f"DocVerify v{__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
