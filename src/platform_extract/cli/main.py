"""
Main CLI application for the platform extraction engine.

Provides the command-line interface for:
- Extracting items from a saved HTML page or a live URL
- Listing supported platforms and their pacing policy
- Showing and initializing configuration
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from platform_extract import __version__
from platform_extract.config import Settings, load_config
from platform_extract.core.exceptions import PlatformExtractError
from platform_extract.dom.soup import SoupDocument
from platform_extract.extraction.models import ExtractionResult
from platform_extract.service import ExtractionService
from platform_extract.utils.logging import setup_logging, get_logger

app = typer.Typer(
    name="platform-extract",
    help="Platform-aware content extraction for xiaohongshu and Google search pages",
    add_completion=False,
    no_args_is_help=True,
)
config_app = typer.Typer(help="Configuration management", no_args_is_help=True)
app.add_typer(config_app, name="config")

console = Console()
logger = get_logger(__name__)

CONTENT_PREVIEW_LENGTH = 80


def version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold blue]platform-extract[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable debug logging",
    ),
) -> None:
    """
    Extract posts and search results from supported platforms.

    Use 'platform-extract --help' for command list.
    """
    setup_logging(level="DEBUG" if verbose else "WARNING")


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


@app.command()
def extract(
    source: str = typer.Argument(
        ...,
        help="Saved HTML file, or a URL to load in the browser",
    ),
    url: Optional[str] = typer.Option(
        None,
        "--url",
        "-u",
        help="Page URL of a saved HTML file (selects the platform)",
    ),
    title: Optional[str] = typer.Option(
        None,
        "--title",
        help="Page title of a saved HTML file (defaults to its <title>)",
    ),
    platform: Optional[str] = typer.Option(
        None,
        "--platform",
        "-p",
        help="Force a platform instead of matching the URL",
    ),
    max_items: Optional[int] = typer.Option(
        None,
        "--max-items",
        "-m",
        help="Items to extract (platform default when omitted)",
        min=0,
        max=100,
    ),
    full: Optional[bool] = typer.Option(
        None,
        "--full/--preview",
        help="Full detail-page content or card previews (platform default when omitted)",
    ),
    paced: bool = typer.Option(
        True,
        "--paced/--immediate",
        help="Pace items through the platform's rate limit",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the result as JSON",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
) -> None:
    """
    Extract items from a page.

    Examples:
        platform-extract extract saved.html --url "https://www.google.com/search?q=python"
        platform-extract extract "https://www.xiaohongshu.com/search_result?keyword=pasta" --full
    """
    try:
        settings = load_config(config_file)
        if _is_url(source):
            result = asyncio.run(
                _extract_live(settings, source, platform, max_items, full, paced)
            )
        else:
            path = Path(source)
            if not path.is_file():
                console.print(f"[red]Error:[/red] File not found: {source}")
                raise typer.Exit(1)
            document = SoupDocument.from_file(
                path, url=url or path.resolve().as_uri(), title=title
            )
            service = ExtractionService(settings)
            result = asyncio.run(
                service.extract(document, max_items, full, paced=paced, platform=platform)
            )
    except PlatformExtractError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        _print_result(result)

    if not result.success:
        raise typer.Exit(1)


async def _extract_live(
    settings: Settings,
    url: str,
    platform: Optional[str],
    max_items: Optional[int],
    full: Optional[bool],
    paced: bool,
) -> ExtractionResult:
    """Load ``url`` in the browser, extract, and resolve full content."""
    from platform_extract.browser import BrowserManager, make_document_fetcher

    probe = ExtractionService(settings)
    extractor = (
        probe.registry.require(platform)
        if platform
        else probe.registry.select_extractor(SoupDocument("", url=url))
    )
    wait_ms = extractor.settings.page_load_wait_ms if extractor else 0

    async with BrowserManager(settings.browser) as browser:
        with console.status(f"[cyan]Loading {url}..."):
            document = await browser.load_document(url, wait_ms=wait_ms)
        service = ExtractionService(
            settings,
            registry=probe.registry,
            rate_limiter=probe.rate_limiter,
            fetch_document=make_document_fetcher(browser, wait_ms),
        )
        with console.status("[cyan]Extracting..."):
            return await service.extract(
                document, max_items, full, paced=paced, platform=platform
            )


def _print_result(result: ExtractionResult) -> None:
    if not result.success:
        console.print(f"[red]Extraction failed:[/red] {result.error}")
        return

    console.print(Panel(
        f"[bold]{result.page_title or result.page_url}[/bold]\n"
        f"Platform: [cyan]{result.platform}[/cyan]  "
        f"Items: [green]{len(result.items)}[/green] of {result.total_found} found",
        border_style="blue",
    ))

    if not result.items:
        console.print("[yellow]No items found[/yellow]")
        return

    table = Table(show_header=True)
    table.add_column("#", style="dim", width=3)
    table.add_column("Title", style="bold")
    table.add_column("Content")
    table.add_column("Link", style="cyan", overflow="fold")

    for item in result.items:
        content = item.content
        if len(content) > CONTENT_PREVIEW_LENGTH:
            content = content[:CONTENT_PREVIEW_LENGTH] + "..."
        table.add_row(str(item.index), item.title, content, item.link)

    console.print(table)


@app.command()
def platforms(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
) -> None:
    """List supported platforms and their pacing policy."""
    try:
        settings = load_config(config_file)
    except PlatformExtractError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    service = ExtractionService(settings)

    table = Table(title="Supported Platforms", show_header=True)
    table.add_column("Platform", style="cyan")
    table.add_column("Paced")
    table.add_column("Delay (s)", justify="right")
    table.add_column("Batch Limit", justify="right")
    table.add_column("Default Items", justify="right")
    table.add_column("Full Content")

    for name in service.list_platforms():
        policy = settings.platform(name)
        table.add_row(
            name,
            "yes" if policy.rate_limited else "no",
            f"{policy.rate_limit_delay_seconds:g}",
            str(policy.max_items_per_batch),
            str(policy.default_max_items),
            "yes" if policy.default_fetch_full_content else "no",
        )

    console.print(table)


@config_app.command("show")
def config_show(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
) -> None:
    """Show the effective configuration."""
    try:
        settings = load_config(config_file)
    except PlatformExtractError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(Panel("[bold]Current Configuration[/bold]", border_style="blue"))

    for section, values in settings.model_dump().items():
        console.print(f"\n[bold cyan]{section}:[/bold cyan]")
        for key, value in values.items():
            console.print(f"  {key}: [dim]{value}[/dim]")


@config_app.command("init")
def config_init(
    output: Path = typer.Option(
        Path("config.yaml"),
        "--output",
        "-o",
        help="Output path for config file",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing file",
    ),
) -> None:
    """Write the default configuration to a YAML file."""
    import yaml

    if output.exists() and not force:
        if not typer.confirm(f"File {output} exists. Overwrite?"):
            raise typer.Exit(0)

    with open(output, "w", encoding="utf-8") as f:
        yaml.safe_dump(
            Settings().model_dump(mode="json"),
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )

    console.print(f"[green]✓[/green] Configuration saved to: {output}")


if __name__ == "__main__":
    app()
