from contextlib import ExitStack
from pathlib import Path
import json

import typer
from rich.console import Console
from rich.table import Table

from boxdly.config import load_config
from boxdly.errors import ConfigError, FetchError, InputError, PageParseError
from boxdly.export.html import render_results_html
from boxdly.ingest.letterboxd.listing import get_listing_format
from boxdly.service import (
    default_fetcher,
    get_top_films_for_month,
    resolve_month,
    validate_username,
)
from boxdly.util.logging import configure_logging

app = typer.Typer(add_completion=False)
console = Console()


def _stars(rating: int) -> str:
    return "★" * (rating // 2) + ("½" if rating % 2 else "")


def _films_table(films, title: str) -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Film")
    table.add_column("Year")
    table.add_column("Rating")
    table.add_column("Watched")
    for rank, film in enumerate(films, start=1):
        table.add_row(
            str(rank),
            film.title or "?",
            film.year or "-",
            _stars(film.rating),
            film.watched_date.isoformat(),
        )
    return table


def _load(config: Path | None):
    try:
        return load_config(config)
    except (ConfigError, FileNotFoundError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2) from exc


@app.command()
def top(
    username: str,
    month: str | None = typer.Option(None, help="Month as YYYY-MM (default: current month)."),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON."),
    html: Path | None = typer.Option(None, help="Also write an HTML results page here."),
    config: Path | None = typer.Option(None, help="Path to config.toml."),
    verbose: bool = False,
) -> None:
    """Show a member's four highest-rated films for a month."""
    configure_logging(verbose)
    cfg = _load(config)
    try:
        target_month = resolve_month(month)
        films = get_top_films_for_month(username, target_month, cfg=cfg)
    except InputError as exc:
        console.print(f"[red]Error fetching data for user: {username}[/red] ({exc})")
        raise typer.Exit(code=2) from exc

    if as_json:
        typer.echo(json.dumps([film.to_dict() for film in films], ensure_ascii=False, indent=2))
    elif films:
        console.print(_films_table(films, f"{username}: top films of {target_month}"))
    else:
        console.print(f"No rated films for {username} in {target_month}.")

    if html is not None:
        render_results_html(username, target_month, films, html)
        console.print(f"Wrote {html}")


@app.command()
def inspect_page(
    username: str,
    page: int = typer.Option(1, min=1),
    month: str | None = None,
    config: Path | None = None,
    verbose: bool = False,
) -> None:
    """Fetch and parse a single listing page, printing every rated record."""
    configure_logging(verbose)
    cfg = _load(config)
    try:
        username = validate_username(username)
        target_month = resolve_month(month)
    except InputError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2) from exc

    listing = get_listing_format(cfg.scrape.listing)
    url = listing.page_url(cfg.base_url, username, target_month, page)
    try:
        with ExitStack() as stack:
            fetch = default_fetcher(cfg, stack)
            html = fetch(
                url,
                headers={"User-Agent": cfg.app.user_agent},
                timeout=cfg.scrape.fetch_timeout,
            )
        parsed = listing.parse(html, target_month, cfg.base_url)
    except (FetchError, PageParseError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    console.print(f"{url}: entries={parsed.entry_count} rated={len(parsed.films)}")
    if parsed.films:
        console.print(_films_table(parsed.films, f"{listing.name} page {page}"))


if __name__ == "__main__":
    app()
