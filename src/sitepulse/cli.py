"""CLI interface for sitepulse."""

import asyncio
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional
from urllib.parse import urlsplit

import click
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from . import __version__
from .config import Settings
from .diff import diff_reports
from .errors import AuditError
from .models import Issue, Report, ReportDiff, Severity
from .service import AuditOutcome, AuditService, error_payload


console = Console()
PILLARS = ("performance", "accessibility", "seo", "security", "ux")


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def severity_style(severity: Severity) -> str:
    """Get Rich style for severity level."""
    return {
        Severity.LOW: "blue",
        Severity.MEDIUM: "yellow",
        Severity.HIGH: "red",
    }.get(severity, "white")


def score_color(score: float) -> str:
    """Get color for a score value."""
    if score >= 80:
        return "green"
    elif score >= 60:
        return "yellow"
    elif score >= 40:
        return "orange1"
    else:
        return "red"


def delta_style(delta: float) -> str:
    if delta > 0.5:
        return "green"
    if delta < -0.5:
        return "red"
    return "dim"


def score_bar(score: float, width: int = 20) -> Text:
    """Create a visual score bar."""
    filled = int((score / 100) * width)
    color = score_color(score)

    bar = Text()
    bar.append("█" * filled, style=color)
    bar.append("░" * (width - filled), style="dim")
    bar.append(f" {score:.1f}/100", style=f"bold {color}")
    return bar


def print_issue(issue: Issue, index: Optional[int] = None) -> None:
    style = severity_style(issue.severity)
    prefix = f"{index}. " if index is not None else ""
    console.print(f"  {prefix}[{style}]{issue.severity.value.upper():<6}[/] "
                  f"[bold]{issue.id}[/bold] [dim]({issue.category.value}, +{issue.est_score_gain})[/dim]")
    console.print(f"     {escape(issue.why)}")
    console.print(f"     [cyan]→ {escape(issue.fix)}[/cyan]")


def print_report(report: Report) -> None:
    """Print an audit report to the console."""
    console.print()
    console.print(Panel(
        f"[bold]{escape(report.page_title)}[/bold]\n{escape(report.url)}\n"
        f"[dim]Fetched {report.fetched_at} • TTFB {report.metrics.timing.ttfb_ms}ms • id {report.id}[/dim]",
        title="SitePulse Audit",
        border_style="blue",
    ))

    console.print()
    console.print("  Overall: ", end="")
    console.print(score_bar(report.overall, width=25))
    console.print()

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Pillar", style="cyan")
    table.add_column("Score")
    table.add_column("Issues", justify="right")
    for pillar in PILLARS:
        score = getattr(report.scores, pillar)
        count = sum(1 for i in report.issues if i.category.value == pillar)
        table.add_row(pillar, score_bar(score), str(count) if count else "[green]OK[/green]")
    console.print(table)

    if report.issues:
        console.print("[bold]Issues (highest impact first):[/bold]\n")
        for n, issue in enumerate(report.issues, 1):
            print_issue(issue, n)
    else:
        console.print("[green]No issues found.[/green]")
    console.print()


def print_diff(diff: ReportDiff) -> None:
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold", title="Change since previous report")
    table.add_column("Pillar", style="cyan")
    table.add_column("Delta", justify="right")
    for name, delta in diff.deltas.to_dict().items():
        table.add_row(name, f"[{delta_style(delta)}]{delta:+.1f}[/]")
    console.print(table)

    for label, issues, style in (
        ("Added", diff.issues.added, "red"),
        ("Resolved", diff.issues.resolved, "green"),
        ("Unchanged", diff.issues.unchanged, "dim"),
    ):
        ids = ", ".join(i.id for i in issues) or "none"
        console.print(f"  [{style}]{label}:[/] {ids}")
    console.print()


def print_error(url: str, exc: AuditError) -> None:
    console.print(f"\n[red]Error[/red] [dim]{exc.code}[/dim] {escape(url)}: {escape(exc.message)}")
    if exc.hint:
        console.print(f"  [cyan]→ {exc.hint}[/cyan]")


def load_report(path: str) -> Report:
    try:
        return Report.from_dict(json.loads(Path(path).read_text(encoding="utf-8")))
    except (OSError, ValueError, KeyError, TypeError) as e:
        raise click.BadParameter(f"{path} is not a saved SitePulse report ({e})")


def client_key(url: str) -> str:
    """Throttle key for a target: its host, so one site is not hammered."""
    work = url.strip()
    if "://" not in work:
        work = "https://" + work
    try:
        return urlsplit(work).hostname or work
    except ValueError:
        return work


async def _scan_all(service: AuditService, urls: tuple[str, ...],
                    previous_id: Optional[str]) -> list:
    return await asyncio.gather(
        *(service.audit(url, client_key(url), previous_id) for url in urls),
        return_exceptions=True,
    )


@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version=__version__)
def cli(ctx):
    """SitePulse - single page quality audit.

    \b
    Quick start:
        sitepulse scan example.com
        sitepulse diff before.json after.json

    \b
    Commands:
        scan    Audit one or more URLs
        diff    Compare two saved reports
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("urls", nargs=-1, required=True)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
@click.option("-t", "--timeout", type=int, default=None, help="Fetch timeout in milliseconds")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.option("--save", type=click.Path(dir_okay=False), help="Write the report JSON to this file")
@click.option("--compare-to", type=click.Path(exists=True, dir_okay=False),
              help="Saved report to diff the new audit against")
def scan(urls: tuple[str, ...], verbose: bool, timeout: Optional[int], json_output: bool,
         save: Optional[str], compare_to: Optional[str]):
    """Audit URLs for performance, accessibility, SEO, security and UX.

    \b
    Examples:
        sitepulse scan example.com
        sitepulse scan example.com --json --save before.json
        sitepulse scan example.com --compare-to before.json
        sitepulse scan example.com example.org
    """
    configure_logging(verbose)
    if len(urls) > 1 and (save or compare_to):
        raise click.UsageError("--save and --compare-to work with a single URL")

    settings = Settings.from_env()
    if timeout is not None:
        settings = replace(settings, timeout_ms=timeout)
    service = AuditService(settings=settings)

    previous_id = None
    if compare_to:
        previous = load_report(compare_to)
        service.store.put(previous.id, previous)
        previous_id = previous.id

    if json_output:
        results = asyncio.run(_scan_all(service, urls, previous_id))
    else:
        with console.status(f"[bold blue]Auditing {', '.join(urls)}...[/bold blue]"):
            results = asyncio.run(_scan_all(service, urls, previous_id))

    failed = False
    payloads = []
    for url, result in zip(urls, results):
        if isinstance(result, AuditError):
            failed = True
            payloads.append({"url": url, **error_payload(result)})
            if not json_output:
                print_error(url, result)
            continue
        if isinstance(result, BaseException):
            raise result
        outcome: AuditOutcome = result
        payloads.append(outcome.to_dict())
        if save:
            Path(save).write_text(json.dumps(outcome.report.to_dict(), indent=2), encoding="utf-8")
        if not json_output:
            print_report(outcome.report)
            if outcome.diff:
                print_diff(outcome.diff)

    if json_output:
        click.echo(json.dumps(payloads[0] if len(payloads) == 1 else payloads, indent=2))
    elif save and not failed:
        console.print(f"[green]✓[/green] Saved report to [cyan]{save}[/cyan]")

    if not json_output:
        console.print(f"[dim]sitepulse v{__version__}[/dim]")
    if failed:
        sys.exit(1)


@cli.command()
@click.argument("previous", type=click.Path(exists=True, dir_okay=False))
@click.argument("current", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
def diff(previous: str, current: str, json_output: bool):
    """Compare two saved reports.

    \b
    Example:
        sitepulse diff before.json after.json
    """
    result = diff_reports(load_report(current), load_report(previous))
    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        print_diff(result)


# Convenience: allow `sitepulse URL` as shortcut for `sitepulse scan URL`
def main():
    """Entry point that handles both `sitepulse URL` and `sitepulse scan URL`."""
    args = sys.argv[1:]

    if args and not args[0].startswith('-') and args[0] not in ['scan', 'diff']:
        if '.' in args[0]:
            sys.argv.insert(1, 'scan')

    cli()


if __name__ == "__main__":
    main()
