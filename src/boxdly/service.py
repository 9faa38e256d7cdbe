from __future__ import annotations

from contextlib import ExitStack
import re

from boxdly.config import Config
from boxdly.errors import InvalidMonthError, InvalidUsernameError
from boxdly.ingest.letterboxd import browser
from boxdly.ingest.letterboxd.client import DocumentFetcher, LetterboxdClient
from boxdly.ingest.letterboxd.paginate import PageCrawler
from boxdly.ingest.letterboxd.parse import FilmRecord
from boxdly.month import YearMonth
from boxdly.ranking import rank_month
from boxdly.util.logging import get_logger

LOG = get_logger(__name__)

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_]{2,15}$")


def validate_username(username: str | None) -> str:
    cleaned = (username or "").strip()
    if not _USERNAME_RE.match(cleaned):
        raise InvalidUsernameError(username or "")
    return cleaned


def resolve_month(year_month: YearMonth | str | None) -> YearMonth:
    if year_month is None:
        return YearMonth.current()
    if isinstance(year_month, YearMonth):
        return year_month
    if isinstance(year_month, str):
        return YearMonth.parse(year_month)
    raise InvalidMonthError(f"Expected YearMonth or YYYY-MM, got {year_month!r}")


def get_top_films_for_month(
    username: str,
    year_month: YearMonth | str | None = None,
    cfg: Config | None = None,
    fetch: DocumentFetcher | None = None,
) -> list[FilmRecord]:
    """Top four rated films ``username`` logged in ``year_month``.

    Defaults to the current month. Upstream trouble (timeouts, bad status
    codes, odd markup) only shortens the result; bad input raises an
    ``InputError``.
    """
    username = validate_username(username)
    target_month = resolve_month(year_month)
    cfg = cfg or Config()
    LOG.info("Fetching films for user: %s for month: %s", username, target_month)

    with ExitStack() as stack:
        if fetch is None:
            fetch = default_fetcher(cfg, stack)
        films = PageCrawler(fetch, cfg).fetch_all(username, target_month)

    top = rank_month(films, target_month)
    LOG.info("Top %s of %s rated films for %s", len(top), len(films), username)
    return top


def default_fetcher(cfg: Config, stack: ExitStack) -> DocumentFetcher:
    if cfg.scrape.use_browser:
        return browser.fetch_html
    client = stack.enter_context(LetterboxdClient())
    return client.fetch_html
