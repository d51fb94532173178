"""Report formatting utilities."""
from __future__ import annotations

import json
from typing import Literal

from rich.markup import escape

OutputFormat = Literal["cli", "json", "markdown"]

_LEVEL_COLORS = {"high": "red", "medium": "yellow", "low": "blue"}


def _score_color(percentage: float) -> str:
    if percentage >= 75:
        return "green"
    if percentage >= 50:
        return "yellow"
    return "red"


def _percentage(score: float, maximum: float) -> int:
    return int(round(score / maximum * 100)) if maximum else 0


def format_report(result: dict, output: OutputFormat = "cli") -> str:
    """Format an audit result document for output.

    Args:
        result: AuditResult.to_dict() output, or a document read from the run store
        output: Output format - 'cli', 'json', or 'markdown'

    Returns:
        Formatted string representation of the result
    """
    if output == "json":
        return _format_json(result)
    elif output == "markdown":
        return _format_markdown(result)
    else:
        return _format_cli(result)


def _format_json(result: dict) -> str:
    return json.dumps(result, ensure_ascii=False, indent=2)


def _format_cli(result: dict) -> str:
    """Format results for terminal display with Rich-compatible markup."""
    lines = []
    evidence = result.get("evidence", {})

    lines.append("[bold cyan]GEO Audit Report[/bold cyan]")
    lines.append(f"[dim]URL:[/dim] {escape(result.get('url', ''))}")
    lines.append(f"[dim]Run:[/dim] {result.get('id', '')}  [dim]at[/dim] {result.get('timestamp', '')}")
    lines.append("")

    total = result.get("geo_score", 0)
    color = _score_color(total)
    lines.append(f"[bold]GEO Score:[/bold] [{color}]{total}/100[/{color}]")
    lines.append("")

    lines.append("[bold]Pillars:[/bold]")
    for pillar in result.get("pillars", []):
        score = pillar.get("score", 0)
        maximum = pillar.get("max", 0)
        percentage = _percentage(score, maximum)

        bar_width = 20
        filled = int(bar_width * percentage / 100)
        bar = "█" * filled + "░" * (bar_width - filled)
        bar_color = _score_color(percentage)
        lines.append(
            f"  {pillar.get('name', ''):26} [{bar_color}]{bar}[/{bar_color}] "
            f"{score}/{maximum} ({percentage}%)"
        )
    lines.append("")

    lines.append("[bold]Rendering:[/bold]")
    lines.append(f"  text_ratio_noJS  {evidence.get('text_ratio_no_js', 0)}")
    lines.append(f"  mode             {evidence.get('rendering_mode', 'dual')}")
    missing = evidence.get("missing_headings", [])
    if missing:
        lines.append(f"  JS-only headings {len(missing)}")
    for note in evidence.get("degraded", []):
        lines.append(f"  [yellow]![/yellow] {escape(note)}")
    lines.append("")

    penalties = [row for row in result.get("score_trace", []) if row.get("max") == 0]
    if penalties:
        lines.append("[bold red]Red Flags:[/bold red]")
        for row in penalties:
            lines.append(f"  [red]✗[/red] {row.get('title')} ({row.get('score')})")
        lines.append("")

    findings = result.get("findings", [])
    if findings:
        lines.append("[bold]Findings:[/bold]")
        for finding in findings:
            severity = finding.get("severity", "low")
            severity_color = _LEVEL_COLORS.get(severity, "white")
            lines.append(
                f"  [{severity_color}]{escape(f'[{severity}]')}[/{severity_color}] {escape(finding.get('title', ''))}"
                f" [dim]({finding.get('id')})[/dim]"
            )
        lines.append("")

    fixes = result.get("top_fixes", [])
    if fixes:
        lines.append("[bold]Top Fixes:[/bold]")
        for i, fix in enumerate(fixes, 1):
            lines.append(
                f"  {i}. {fix.get('id')} (impact: {fix.get('impact')}, effort: {fix.get('effort')})"
            )
            lines.append(f"     [dim]{escape(fix.get('why', ''))}[/dim]")
        lines.append("")

    faq_page = result.get("generated_artifacts", {}).get("faq_page")
    if faq_page:
        lines.append(f"[bold]Generated FAQ:[/bold] {faq_page.get('recommended_path')}")

    return "\n".join(lines)


def _format_markdown(result: dict) -> str:
    """Format results as Markdown."""
    lines = []
    evidence = result.get("evidence", {})

    lines.append("# GEO Audit Report")
    lines.append("")
    lines.append(f"**URL:** {result.get('url', '')}")
    lines.append(f"**Run:** `{result.get('id', '')}` ({result.get('timestamp', '')})")
    lines.append("")

    lines.append("## GEO Score")
    lines.append("")
    lines.append(f"**{result.get('geo_score', 0)}/100**")
    lines.append("")

    lines.append("### Pillars")
    lines.append("")
    lines.append("| Pillar | Score | Max | Percentage |")
    lines.append("|--------|-------|-----|------------|")
    for pillar in result.get("pillars", []):
        score = pillar.get("score", 0)
        maximum = pillar.get("max", 0)
        lines.append(f"| {pillar.get('name')} | {score} | {maximum} | {_percentage(score, maximum)}% |")
    lines.append("")

    lines.append("## Evidence")
    lines.append("")
    lines.append("| Signal | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| Text ratio (no JS) | {evidence.get('text_ratio_no_js')} |")
    lines.append(f"| Rendering mode | {evidence.get('rendering_mode')} |")
    lines.append(f"| Canonical | {evidence.get('canonical') or 'Not set'} |")
    lines.append(f"| Sitemap | {evidence.get('sitemap') or 'Not found'} |")
    lines.append(f"| JSON-LD types | {', '.join(evidence.get('json_ld_types', [])) or 'None'} |")
    lines.append(f"| JS-only headings | {len(evidence.get('missing_headings', []))} |")
    lines.append("")

    lines.append("## Rule Trace")
    lines.append("")
    lines.append("| Rule | Pillar | Score | Max | Passed |")
    lines.append("|------|--------|-------|-----|--------|")
    for row in result.get("score_trace", []):
        passed = "✅" if row.get("passed") else "❌"
        lines.append(
            f"| {row.get('title')} | {row.get('pillar')} | {row.get('score')} | {row.get('max')} | {passed} |"
        )
    lines.append("")

    fixes = result.get("top_fixes", [])
    if fixes:
        lines.append("## Top Fixes")
        lines.append("")
        for i, fix in enumerate(fixes, 1):
            lines.append(
                f"{i}. **{fix.get('id')}** _(impact: {fix.get('impact')}, effort: {fix.get('effort')})_"
            )
            lines.append(f"   {fix.get('why')} Where: {fix.get('where')}")
            for key, language in (("snippet_html", "html"), ("snippet_jsonld", "json"), ("snippet_js", "js")):
                snippet = fix.get(key)
                if snippet:
                    lines.append("")
                    lines.append(f"   ```{language}")
                    lines.extend(f"   {line}" for line in snippet.splitlines())
                    lines.append("   ```")
        lines.append("")

    faq_page = result.get("generated_artifacts", {}).get("faq_page")
    if faq_page:
        lines.append("## Generated FAQ")
        lines.append("")
        lines.append(f"Recommended path: `{faq_page.get('recommended_path')}`")
        lines.append("")
        lines.append(faq_page.get("provenance", ""))

    return "\n".join(lines)
