"""Main CLI entry point for archlink."""

import logging
import os
import sys
from typing import List, Optional

import click
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.prompt import Confirm, IntPrompt
from rich.syntax import Syntax
from rich.table import Table

from .. import __version__
from ..core.configuration import (
    USER_CONFIG_DIR, DEFAULT_MAX_RESULTS, ArchlinkConfig, ConfigurationManager, write_default_config
)
from ..core.exceptions import ArchlinkError
from ..core.installer import PackageInstaller
from ..core.interfaces import FetcherConfig, PackageSource, RankedSuggestion
from ..fetcher import AURFetcher, OfficialRepositoryFetcher, PacmanSyncDatabaseFetcher
from ..search.engine import PackageSearchEngine

logger = logging.getLogger(__name__)

# Initialize rich console for better output formatting
console = Console()


def setup_logging(verbose: bool = False):
    """Set up logging configuration."""
    # Check environment variable for log level override
    env_log_level = os.getenv('ARCHLINK_LOG_LEVEL', '').upper()
    if env_log_level in ['DEBUG', 'INFO', 'WARNING', 'ERROR']:
        level = getattr(logging, env_log_level)
    else:
        level = logging.DEBUG if verbose else logging.WARNING

    log_format = os.getenv('ARCHLINK_LOG_FORMAT', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    logging.basicConfig(
        level=level,
        format=log_format
    )


def build_search_engine(config: ArchlinkConfig) -> PackageSearchEngine:
    """Create the search engine with the fetchers selected by the configuration."""
    fetcher_config = FetcherConfig(
        request_timeout=config.request_timeout,
        retry_count=config.retry_count
    )

    if config.official_backend == "local":
        official = PacmanSyncDatabaseFetcher(config.sync_db_path, fetcher_config)
    else:
        official = OfficialRepositoryFetcher(config=fetcher_config)

    return PackageSearchEngine(
        official_fetcher=official,
        aur_fetcher=AURFetcher(config=fetcher_config),
    )


def display_suggestions(suggestions: List[RankedSuggestion], query: str):
    """Display ranked suggestions in a formatted table."""
    table = Table(title=f"Suggestions for '{query}'")
    table.add_column("#", style="bold white", justify="right")
    table.add_column("Name", style="green", no_wrap=True)
    table.add_column("Version", style="blue")
    table.add_column("Source", style="cyan")
    table.add_column("Description", style="white")

    for suggestion in suggestions:
        table.add_row(
            str(suggestion.rank),
            suggestion.name,
            suggestion.version or "N/A",
            suggestion.source.value,
            suggestion.description
        )

    console.print(table)


def install_package(package: str, source: Optional[PackageSource]) -> None:
    """Install a package, exiting with status 1 on failure."""
    console.print(f"[bold white]Installing '{package}'... (may prompt for password)[/bold white]")
    try:
        tool = PackageInstaller().install(package, source)
    except ArchlinkError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    console.print(f"[green]Successfully installed '{package}' with {tool}[/green]")


def prompt_for_install(suggestions: List[RankedSuggestion]) -> None:
    """Ask the user which suggestion to install, if any."""
    choice = IntPrompt.ask(
        "[bold white]Enter the number of the package to install (0 to exit)[/bold white]",
        default=0,
        console=console
    )

    if choice == 0:
        return
    if not 1 <= choice <= len(suggestions):
        console.print("[yellow]Invalid selection. Exiting.[/yellow]")
        return

    selected = suggestions[choice - 1]
    if Confirm.ask(f"[bold white]Install '{selected.name}'?[/bold white]", default=False, console=console):
        install_package(selected.name, selected.source)
    else:
        console.print("[yellow]Installation cancelled.[/yellow]")


@click.group()
@click.version_option(__version__, prog_name='archlink')
@click.option('--config', '-c', type=click.Path(),
              default=None,
              help='Configuration file path (default: $ARCHLINK_CONFIG, then ~/.config/archlink)')
@click.option('--verbose', '-v', is_flag=True,
              help='Enable verbose output')
@click.pass_context
def cli(ctx, config, verbose):
    """
    ArchLink helps Arch Linux users to find and install packages.

    It searches the official repositories and the AUR and ranks the results
    so that misspelled or descriptive queries still find the right package.
    """
    ctx.ensure_object(dict)
    ctx.obj['config'] = config
    ctx.obj['verbose'] = verbose

    setup_logging(verbose)


@cli.command()
@click.argument('query')
@click.option('--limit', '-l', type=int, default=None,
              help='Maximum number of suggestions (default: max_results from config)')
@click.option('--no-install', is_flag=True, help='Only list suggestions, do not prompt to install')
@click.pass_context
def search(ctx, query, limit, no_install):
    """
    Search for packages in official repos and AUR.

    Examples:

      # Misspelled name
      archlink search pythn

      # Descriptive query
      archlink search "network tool" --limit 5
    """
    query = query.strip()
    if not query:
        console.print("[red]Error: Query cannot be empty.[/red]")
        sys.exit(1)

    try:
        config = ConfigurationManager(ctx.obj['config']).load()
        max_results = limit if limit is not None else config.max_results
        if max_results <= 0:
            logger.warning(f"Invalid --limit {max_results}, using {DEFAULT_MAX_RESULTS}")
            max_results = DEFAULT_MAX_RESULTS

        engine = build_search_engine(config)
        try:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                progress.add_task("Searching official repos and AUR...", total=None)
                result = engine.search(query, max_results)
        finally:
            engine.close()

    except ArchlinkError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    for source, error in result.errors.items():
        console.print(f"[yellow]Warning: {source} search failed: {error}[/yellow]")

    if not result.suggestions:
        console.print(f"[yellow]No packages found for '{query}'. Try refining your query.[/yellow]")
        return

    display_suggestions(result.suggestions, query)

    if not no_install:
        prompt_for_install(result.suggestions)


@cli.command()
@click.argument('package')
def install(package):
    """Install a package directly by its exact name."""
    package = package.strip()
    if not package:
        console.print("[red]Error: Package name cannot be empty.[/red]")
        sys.exit(1)

    install_package(package, None)


@cli.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--path', 'config_file', type=click.Path(),
              default=str(USER_CONFIG_DIR / 'config.yaml'),
              help='Configuration file to create')
@click.option('--force', is_flag=True, help='Overwrite existing configuration')
def config_init(config_file, force):
    """Initialize archlink configuration."""
    try:
        path = write_default_config(config_file, force=force)
    except ArchlinkError as e:
        console.print(f"[yellow]{e}[/yellow]")
        if not force:
            console.print("Use --force to overwrite")
        sys.exit(1)

    console.print(f"✅ Configuration initialized at [cyan]{path}[/cyan]")


@config.command('show')
@click.pass_context
def config_show(ctx):
    """Show the resolved configuration."""
    manager = ConfigurationManager(ctx.obj['config'])
    try:
        resolved = manager.load()
    except ArchlinkError as e:
        console.print(f"[red]Error reading configuration:[/red] {e}")
        sys.exit(1)

    source = manager.find_config_file()
    title = f"Configuration: {source}" if source else "Configuration: defaults"
    config_yaml = yaml.dump(resolved.to_dict(), default_flow_style=False, sort_keys=False)
    syntax = Syntax(config_yaml, "yaml", theme="monokai", line_numbers=True)
    console.print(Panel(syntax, title=title, border_style="blue"))


def main() -> int:
    """Main CLI entry point."""
    try:
        cli(standalone_mode=False)
        return 0
    except click.ClickException as e:
        e.show()
        return e.exit_code
    except click.Abort:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 130
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 130
    except SystemExit as e:
        return e.code


if __name__ == "__main__":
    sys.exit(main())
