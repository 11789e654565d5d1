"""
Command-line interface for bucketfinder.

Provides commands for scanning candidate buckets, previewing the
generated permutations, and listing supported regions.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from rich import box

from bucketfinder import __version__
from bucketfinder.config import BucketFinderConfig, REGION_ENDPOINTS, REGION_NAMES
from bucketfinder.core.models import FileStatus, ScanResult
from bucketfinder.core.scanner import BucketScanner, ScanRequest
from bucketfinder.errors import ConfigurationError
from bucketfinder.modules.permutations import generate_candidates
from bucketfinder.utils.output import ScanLog
from bucketfinder.utils.validators import parse_seed_keywords

# Initialize Typer app
app = typer.Typer(
    name="bucketfinder",
    help="Find public cloud storage buckets from keywords or a wordlist",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


def print_banner():
    """Print the bucketfinder banner."""
    console.print(
        f"bucketfinder {__version__} - public bucket discovery for authorized testing",
        style="bold cyan",
    )


@app.command()
def scan(
    wordlist: Optional[Path] = typer.Argument(
        None,
        help="Wordlist file with one bucket name per line (optional if using --keyword)"
    ),
    keyword: Optional[str] = typer.Option(
        None, "--keyword", "-k",
        help="Generate bucket names from keyword permutations (comma or space separated)"
    ),
    region: str = typer.Option(
        "us", "--region", "-r",
        help="Region to use (run 'bucketfinder regions' for the list)"
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w",
        help="Number of concurrent workers (default: 10)"
    ),
    delay: Optional[float] = typer.Option(
        None, "--delay",
        help="Seconds each worker sleeps before a probe (default: 1/workers)"
    ),
    download: bool = typer.Option(
        False, "--download", "-d",
        help="Download any public files found"
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", "-l",
        help="Filename to log output to"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Verbose output"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-C",
        help="Path to configuration file"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Skip the banner and summary"
    ),
):
    """
    Probe candidate bucket names and inspect anything public.

    Examples:
        bucketfinder scan -w 5 -d wordlist.txt
        bucketfinder scan -k company -w 10 -l output.log
        bucketfinder scan -k google.com -w 15
    """
    if not quiet:
        print_banner()

    config = BucketFinderConfig.load(config_file)
    if workers is not None:
        config.scan.workers = workers
    if delay is not None:
        config.scan.delay = delay
    if log_file is not None:
        config.output.log_file = str(log_file)

    request = ScanRequest(
        keywords=parse_seed_keywords(keyword or ""),
        wordlist=wordlist,
        region=region,
        download=download,
        verbose=verbose,
    )

    try:
        log = ScanLog(
            console=console,
            log_file=Path(config.output.log_file) if config.output.log_file else None,
            verbose=verbose,
        )
    except OSError as e:
        console.print(f"[red]Error: Could not open the logging file: {e}[/red]")
        raise typer.Exit(1)

    with log:
        try:
            result = BucketScanner(config=config, log=log).run(request)
        except ConfigurationError as e:
            console.print(f"[red]Error: {e}[/red]")
            console.print("[dim]Run 'bucketfinder scan --help' for usage[/dim]")
            raise typer.Exit(1)

    if not quiet:
        _display_results_summary(result)


@app.command()
def permutations(
    keywords: str = typer.Argument(
        ...,
        help="Seed keywords (comma or space separated)"
    ),
):
    """
    Print the candidate names generated for KEYWORDS without probing.

    Examples:
        bucketfinder permutations acme
        bucketfinder permutations "acme,example.com"
    """
    seeds = parse_seed_keywords(keywords)
    if not seeds:
        console.print("[red]Error: No keywords given[/red]")
        raise typer.Exit(1)

    for name in sorted(generate_candidates(seeds)):
        console.print(name, markup=False, highlight=False)


@app.command()
def regions():
    """List supported region codes."""
    table = Table(box=box.ROUNDED)
    table.add_column("Code", style="cyan")
    table.add_column("Region", style="white")
    table.add_column("Endpoint", style="dim")

    for code, endpoint in REGION_ENDPOINTS.items():
        table.add_row(code, REGION_NAMES.get(code, ""), endpoint)

    console.print(table)


@app.command()
def config(
    init: bool = typer.Option(False, "--init", help="Write a config file with the default settings"),
    show: bool = typer.Option(False, "--show", help="Show the effective configuration"),
    path: Path = typer.Option(
        Path("./bucketfinder.yaml"), "--path", "-p",
        help="Config file path"
    ),
):
    """Manage bucketfinder configuration."""
    if init:
        if path.exists():
            console.print(f"[red]Error: {path} already exists[/red]")
            raise typer.Exit(1)
        BucketFinderConfig().save(path)
        console.print(f"[green]Configuration file created: {path}[/green]")
    elif show:
        _display_config(BucketFinderConfig.load(path))
    else:
        console.print("Use --init to create a config file or --show to view the current settings")


def _display_config(cfg: BucketFinderConfig):
    """Display the effective configuration."""
    table = Table(title="Configuration", box=box.ROUNDED, show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    for section, values in cfg.model_dump().items():
        for name, value in values.items():
            table.add_row(f"{section}.{name}", "" if value is None else str(value))

    console.print(table)


@app.command()
def version():
    """Show bucketfinder version."""
    console.print(f"bucketfinder version {__version__}")


def _display_results_summary(result: ScanResult):
    """Display a summary table for a finished scan."""
    table = Table(title="Scan Summary", box=box.ROUNDED, show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Candidates", str(result.total_candidates))
    table.add_row("Workers", str(result.workers))
    table.add_row("Listable buckets", str(len(result.listable)))
    table.add_row("Access denied", str(len(result.denied)))
    table.add_row("Public objects", str(sum(
        1 for b in result.buckets for o in b.objects if o.status is not FileStatus.PRIVATE
    )))
    table.add_row("Transport errors", str(result.transport_errors))
    if result.failures:
        table.add_row("Failures", f"[red]{result.failures}[/red]")

    console.print()
    console.print(table)
