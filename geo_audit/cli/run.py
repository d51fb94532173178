"""CLI commands."""
from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from geo_audit import __version__
from geo_audit.audit.run_store import RunStore
from geo_audit.audit.runner import generate_faq_only, run_geo_audit
from geo_audit.config.log_setup import configure_logging
from geo_audit.errors import AuditError, RobotsDisallowed
from geo_audit.report.formatter import OutputFormat, format_report

app = typer.Typer(
    add_completion=False,
    help="GEO Audit - Score a web page for generative engine optimization",
)
console = Console()

_OUTPUT_FORMATS = ("cli", "json", "markdown")


def _check_output(output: str) -> OutputFormat:
    if output not in _OUTPUT_FORMATS:
        console.print(f"[red]Error:[/red] Invalid output format '{output}'. Use cli, json, or markdown.")
        raise typer.Exit(1)
    return output  # type: ignore[return-value]


def _emit(report: str, output_format: OutputFormat, save: str | None) -> None:
    if save:
        save_path = Path(save)
        save_path.write_text(report, encoding="utf-8")
        console.print(f"\n[green]Report saved to:[/green] {save_path}")
    elif output_format == "cli":
        console.print("")
        console.print(report)
    else:
        console.print(report, markup=False, highlight=False, soft_wrap=True)


@app.command()
def run(
    target: str = typer.Argument(..., help="URL to audit"),
    output: str = typer.Option(
        "cli",
        "--output",
        "-o",
        help="Output format: cli, json, markdown",
    ),
    save: str | None = typer.Option(
        None,
        "--save",
        "-s",
        help="Save report to file",
    ),
    fail_under: float | None = typer.Option(
        None,
        "--fail-under",
        help="Exit with status 1 when the GEO score is below this value",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging and fetch details",
    ),
) -> None:
    """Run a full GEO audit on a URL.

    Examples:
        geo-audit run https://example.com
        geo-audit run https://example.com -o json
        geo-audit run https://example.com -o markdown -s report.md
    """
    output_format = _check_output(output)
    configure_logging("DEBUG" if verbose else None)

    console.print(Panel.fit(
        f"[bold cyan]GEO Audit[/bold cyan]\n[dim]Auditing:[/dim] {target}",
        border_style="cyan",
    ))

    try:
        with console.status("[bold blue]Fetching, rendering and scoring...", spinner="dots"):
            result = run_geo_audit(target)
    except RobotsDisallowed as e:
        console.print(f"\n[red]Not permitted:[/red] {e}")
        raise typer.Exit(1)
    except AuditError as e:
        console.print(f"\n[red]Error:[/red] {type(e).__name__}: {e}")
        raise typer.Exit(1)

    if verbose:
        evidence = result.evidence
        console.print(
            f"[dim]Fetched {evidence.bytes:,} bytes, TTFB {evidence.ttfb_ms:.0f} ms, "
            f"{len(evidence.console_errors)} console error(s)[/dim]"
        )

    _emit(format_report(result.to_dict(), output_format), output_format, save)

    if fail_under is not None and result.geo_score < fail_under:
        raise typer.Exit(1)


@app.command()
def faq(
    target: str = typer.Argument(..., help="URL to build an FAQ page from"),
    save: str | None = typer.Option(
        None,
        "--save",
        "-s",
        help="Save the artifact JSON to file",
    ),
) -> None:
    """Generate an FAQ artifact without scoring.

    Example:
        geo-audit faq https://example.com/guide
    """
    configure_logging()
    try:
        with console.status("[bold blue]Rendering page...", spinner="dots"):
            artifact = generate_faq_only(target)
    except AuditError as e:
        console.print(f"[red]Error:[/red] {type(e).__name__}: {e}")
        raise typer.Exit(1)

    if artifact is None:
        console.print("[yellow]Not enough question-style headings to build an FAQ (need 3).[/yellow]")
        raise typer.Exit(1)

    payload = json.dumps({"url": target, "artifact": artifact.to_dict()}, ensure_ascii=False, indent=2)
    if save:
        _emit(payload, "json", save)
        return
    console.print(f"[bold]Recommended path:[/bold] {artifact.recommended_path}")
    console.print(f"[dim]{artifact.provenance}[/dim]\n")
    console.print(artifact.html, markup=False, highlight=False, soft_wrap=True)
    console.print("")
    console.print(artifact.jsonld, markup=False, highlight=False, soft_wrap=True)


@app.command()
def show(
    run_id: str = typer.Argument(..., help="Run id printed by a previous audit"),
    output: str = typer.Option(
        "cli",
        "--output",
        "-o",
        help="Output format: cli, json, markdown",
    ),
) -> None:
    """Show a stored audit result."""
    output_format = _check_output(output)
    document = RunStore().get(run_id)
    if document is None:
        console.print(f"[red]Error:[/red] Run '{run_id}' not found")
        raise typer.Exit(1)
    _emit(format_report(document, output_format), output_format, None)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]GEO Audit[/bold] v{__version__}")
    console.print("[dim]Generative engine optimization page auditor[/dim]")


if __name__ == "__main__":
    app()
