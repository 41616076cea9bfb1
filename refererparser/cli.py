"""Command-line interface for refererparser."""

import json
import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from refererparser.config import Config, find_config_file, load_config, merge_cli_options
from refererparser.dataset import (
    CorruptReferersError,
    get_dataset_stats,
    load_default_referers,
    load_referers_file,
)
from refererparser.feeds import DEFAULT_FEED_URL, ReferersFeedManager
from refererparser.models import Medium, RefererLookup
from refererparser.parser import Parser
from refererparser.summary import RefererSummary

console = Console()

MEDIUM_STYLES = {
    Medium.SEARCH: "green",
    Medium.SOCIAL: "cyan",
    Medium.EMAIL: "magenta",
    Medium.PAID: "yellow",
    Medium.INTERNAL: "blue",
    Medium.UNKNOWN: "dim",
}


def _feed_manager(cfg: Config) -> ReferersFeedManager:
    return ReferersFeedManager(
        cache_dir=cfg.cache_dir,
        url=cfg.dataset_url or DEFAULT_FEED_URL,
        update_interval_hours=cfg.update_interval_hours,
        timeout_seconds=cfg.timeout_seconds,
    )


def _load_referers(cfg: Config) -> Mapping[str, RefererLookup]:
    """Load the dataset: explicit path, then feed cache, then bundled."""
    try:
        if cfg.dataset_path is not None:
            return load_referers_file(cfg.dataset_path)
        if cfg.dataset_url:
            return _feed_manager(cfg).load()
        return load_default_referers()
    except CorruptReferersError as e:
        console.print(f"[red]Error loading referers dataset: {e}[/red]")
        sys.exit(1)


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to config file (default: searches standard locations)",
)
@click.option(
    "--dataset",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to a referers JSON dataset (default: bundled dataset)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config: Optional[Path], dataset: Optional[Path], verbose: bool) -> None:
    """refererparser - Classify referer URLs by attribution medium."""
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    cfg = load_config(config)
    merge_cli_options(cfg, dataset=dataset)
    ctx.obj["config"] = cfg

    config_path = config or find_config_file()
    if config_path:
        ctx.obj["config_path"] = config_path


@main.command()
@click.argument("referer")
@click.option("--page-host", type=str, default=None, help="Host of the current page")
@click.option("--page-url", type=str, default=None, help="URL of the current page (host is used)")
@click.option(
    "--internal-domain",
    "-i",
    type=str,
    multiple=True,
    help="Host to treat as internal (repeatable)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def parse(
    ctx: click.Context,
    referer: str,
    page_host: Optional[str],
    page_url: Optional[str],
    internal_domain: tuple[str, ...],
    as_json: bool,
) -> None:
    """Classify a single REFERER URL."""
    cfg: Config = ctx.obj["config"]
    merge_cli_options(cfg, page_host=page_host, internal_domain=internal_domain)

    # An explicit --page-url takes precedence over a configured page host
    use_page_host = None if page_url and not page_host else cfg.page_host

    parser = Parser(_load_referers(cfg))
    result = parser.parse(
        referer,
        use_page_host,
        cfg.internal_domains,
        page_url=page_url,
    )

    if result is None:
        if as_json:
            click.echo(json.dumps(None))
        else:
            console.print(f"[red]Not a classifiable referer: {referer}[/red]")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_dict()))
        return

    style = MEDIUM_STYLES.get(result.medium, "white")
    console.print(f"Medium: [{style}]{result.medium.value}[/{style}]")
    source = getattr(result, "source", None)
    if source:
        console.print(f"Source: {source}")
    if getattr(result, "term", None) is not None:
        console.print(f"Term:   {result.term}")


@main.command()
@click.argument("file", type=click.File("r", encoding="utf-8", errors="replace"))
@click.option("--page-host", type=str, default=None, help="Host of the current page")
@click.option(
    "--internal-domain",
    "-i",
    type=str,
    multiple=True,
    help="Host to treat as internal (repeatable)",
)
@click.option("--top", type=int, default=None, help="Number of sources and terms to show")
@click.pass_context
def summarize(
    ctx: click.Context,
    file,
    page_host: Optional[str],
    internal_domain: tuple[str, ...],
    top: Optional[int],
) -> None:
    """Summarize referers from FILE, one per line ('-' for stdin)."""
    cfg: Config = ctx.obj["config"]
    merge_cli_options(cfg, page_host=page_host, internal_domain=internal_domain, top=top)

    summary = RefererSummary(
        Parser(_load_referers(cfg)),
        page_host=cfg.page_host,
        internal_domains=cfg.internal_domains,
        cache_size=cfg.summary_cache_size,
    )
    count = summary.add_all(file)

    if count == 0:
        console.print("[yellow]No referers found[/yellow]")
        return

    table = Table(title=f"Referers by medium ({count} total)")
    table.add_column("Medium")
    table.add_column("Count", justify="right")
    table.add_column("Share", justify="right")

    for medium, medium_count in summary.mediums.most_common():
        style = MEDIUM_STYLES.get(medium, "white")
        table.add_row(
            f"[{style}]{medium.value}[/{style}]",
            str(medium_count),
            f"{100 * medium_count / count:.1f}%",
        )
    if summary.not_classifiable:
        table.add_row(
            "[red]not classifiable[/red]",
            str(summary.not_classifiable),
            f"{100 * summary.not_classifiable / count:.1f}%",
        )
    console.print(table)

    top_sources = summary.top_sources(cfg.summary_top)
    if top_sources:
        table = Table(title="Top sources")
        table.add_column("Source")
        table.add_column("Medium")
        table.add_column("Count", justify="right")
        for medium, source, source_count in top_sources:
            style = MEDIUM_STYLES.get(medium, "white")
            table.add_row(source, f"[{style}]{medium.value}[/{style}]", str(source_count))
        console.print(table)

    top_terms = summary.top_search_terms(cfg.summary_top)
    if top_terms:
        table = Table(title="Top search terms")
        table.add_column("Term")
        table.add_column("Count", justify="right")
        for term, term_count in top_terms:
            table.add_row(term[:60], str(term_count))
        console.print(table)


@main.command()
@click.option(
    "--medium",
    type=click.Choice([m.value for m in Medium]),
    default=None,
    help="List the sources of one medium",
)
@click.pass_context
def sources(ctx: click.Context, medium: Optional[str]) -> None:
    """Show referers dataset statistics."""
    cfg: Config = ctx.obj["config"]
    if "config_path" in ctx.obj:
        console.print(f"[dim]Config: {ctx.obj['config_path']}[/dim]")
    referers = _load_referers(cfg)

    if medium is None:
        table = Table(title="Referers dataset")
        table.add_column("Medium")
        table.add_column("Sources", justify="right")
        table.add_column("Keys", justify="right")
        for name, stat in get_dataset_stats(referers).items():
            table.add_row(name, str(stat["sources"]), str(stat["keys"]))
        console.print(table)
        return

    domains_by_source: dict[str, list[str]] = {}
    for key, lookup in referers.items():
        if lookup.medium.value == medium:
            domains_by_source.setdefault(lookup.source, []).append(key)

    if not domains_by_source:
        console.print(f"[yellow]No sources for medium {medium}[/yellow]")
        return

    table = Table(title=f"Sources ({medium})")
    table.add_column("Source")
    table.add_column("Keys", justify="right")
    table.add_column("Example", style="dim")
    for source in sorted(domains_by_source):
        keys = sorted(domains_by_source[source])
        table.add_row(source, str(len(keys)), keys[0])
    console.print(table)


@main.command()
@click.option("--force", is_flag=True, help="Download even if the cache is fresh")
@click.pass_context
def update(ctx: click.Context, force: bool) -> None:
    """Refresh the cached referers dataset from the feed URL."""
    cfg: Config = ctx.obj["config"]
    manager = _feed_manager(cfg)

    console.print(f"[cyan]Checking {manager.url}...[/cyan]")
    if manager.update(force=force):
        console.print(f"[green]Updated {manager.cache_file}[/green]")
    elif manager.cache_file.exists():
        console.print(f"[dim]Cache {manager.cache_file} kept[/dim]")
    else:
        console.print("[red]Download failed and no cached dataset exists[/red]")
        sys.exit(1)

    try:
        stats = manager.get_stats()
    except CorruptReferersError as e:
        console.print(f"[red]Cached dataset is invalid: {e}[/red]")
        sys.exit(1)

    console.print(f"[dim]Updated {stats['updated']} ({stats['age_hours']}h ago)[/dim]")
    for name, stat in stats["mediums"].items():
        console.print(f"  {name}: {stat['sources']} sources, {stat['keys']} keys")


if __name__ == "__main__":
    main()
