"""
Command-line interface for ContentQuarry.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
import structlog
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import Config, find_config_file
from .dom.document import load_document
from .exceptions import InvalidInputError, InvalidURLError
from .metadata.metadata_extractor import MetadataExtractor, collect_json_ld
from .observability.logging import configure_logging
from .observability.metrics import export_prometheus
from .readability.engine import Readability
from .readability.preprocessor import Preprocessor

console = Console()
logger = structlog.get_logger(__name__)

# Exit status when a document has no extractable article.
EXIT_NO_CONTENT = 2


def _load_config(config_path: Optional[Path]) -> Config:
    if config_path is not None:
        return Config.from_yaml(config_path)
    found = find_config_file()
    if found is not None:
        return Config.from_yaml(found)
    return Config()


def _read_html(path: Path) -> bytes:
    return path.read_bytes()


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file path",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Override the configured log level",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], log_level: Optional[str]) -> None:
    """ContentQuarry - main content extraction for HTML documents."""
    ctx.ensure_object(dict)
    try:
        config = _load_config(config_path)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Could not load configuration: {e}") from e

    if log_level:
        config.monitoring.log_level = log_level.upper()
    if config.monitoring.enabled:
        configure_logging(config.monitoring)

    ctx.obj["config"] = config


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--url", help="Document URL, used to resolve relative links")
@click.option("--json", "as_json", is_flag=True, help="Print the article as JSON")
@click.option("--char-threshold", type=click.IntRange(min=0), help="Minimum article length in characters")
@click.option("--keep-classes", is_flag=True, help="Keep class attributes in the output")
@click.option("--debug", is_flag=True, help="Log every extraction attempt")
@click.option("--show-metrics", is_flag=True, help="Print Prometheus metrics after parsing")
@click.pass_context
def parse(
    ctx: click.Context,
    file: Path,
    url: Optional[str],
    as_json: bool,
    char_threshold: Optional[int],
    keep_classes: bool,
    debug: bool,
    show_metrics: bool,
) -> None:
    """Extract the main article of an HTML FILE."""
    config: Config = ctx.obj["config"]
    overrides: Dict[str, Any] = {}
    if char_threshold is not None:
        overrides["char_threshold"] = char_threshold
    if keep_classes:
        overrides["keep_classes"] = keep_classes
    if debug:
        overrides["debug"] = debug
    parser_config = config.parser.model_copy(update=overrides)

    with structlog.contextvars.bound_contextvars(document_url=url or str(file)):
        logger.info("Parsing document", file=str(file))
        try:
            article = Readability(parser_config).parse(_read_html(file), url)
        except (InvalidInputError, InvalidURLError) as e:
            raise click.ClickException(str(e)) from e

    if article is None:
        console.print(f"[yellow]No article found in {file}[/yellow]", highlight=False)
        if show_metrics:
            click.echo(export_prometheus())
        sys.exit(EXIT_NO_CONTENT)

    if as_json:
        click.echo(json.dumps(article.to_dict(), indent=2, ensure_ascii=False))
    else:
        table = Table(title="Article")
        table.add_column("Field", style="cyan")
        table.add_column("Value", style="magenta")
        table.add_row("Title", article.title or "")
        table.add_row("Byline", article.byline or "")
        table.add_row("Site", article.site_name or "")
        table.add_row("Published", article.published_time or "")
        table.add_row("Language", article.language or "")
        table.add_row("Direction", article.direction or "")
        table.add_row("Length", str(article.length))
        table.add_row("Excerpt", article.excerpt or "")
        console.print(table)
        click.echo(article.text_content)

    if show_metrics:
        click.echo(export_prometheus())


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--url", help="Document URL, used to resolve image and favicon links")
@click.option("--json", "as_json", is_flag=True, help="Print the metadata as JSON")
@click.pass_context
def metadata(ctx: click.Context, file: Path, url: Optional[str], as_json: bool) -> None:
    """Show the metadata of an HTML FILE without extracting the article."""
    config: Config = ctx.obj["config"]
    try:
        soup = load_document(_read_html(file))
        json_ld = [] if config.parser.disable_json_ld else collect_json_ld(soup)
        Preprocessor().process(soup)
        record = MetadataExtractor().extract(soup, json_ld=json_ld, url=url)
    except InvalidInputError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(json.dumps({"metadata": record.to_dict(), "sources": record.sources}, indent=2, ensure_ascii=False))
        return

    table = Table(title="Metadata")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_column("Source", style="green")
    for name, value in record.to_dict().items():
        table.add_row(name, "" if value is None else str(value), record.sources.get(name, ""))
    console.print(table)


@cli.command("show-config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Print the effective configuration as JSON."""
    config: Config = ctx.obj["config"]
    click.echo(config.model_dump_json(indent=2))


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
