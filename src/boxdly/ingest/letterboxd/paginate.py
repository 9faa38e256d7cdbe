from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from boxdly.config import Config
from boxdly.errors import FetchError, PageParseError
from boxdly.ingest.letterboxd.client import DocumentFetcher
from boxdly.ingest.letterboxd.listing import ListingFormat, get_listing_format
from boxdly.ingest.letterboxd.parse import FilmRecord, ListingPage
from boxdly.month import YearMonth
from boxdly.util.logging import get_logger

LOG = get_logger(__name__)


class StopReason(Enum):
    EMPTY_PAGE = "empty_page"
    FETCH_FAULT = "fetch_fault"
    PAGE_CEILING = "page_ceiling"


@dataclass
class CrawlState:
    """Fetching ``page`` until ``stop_reason`` is set."""

    page: int = 1
    pages_fetched: int = 0
    films: list[FilmRecord] = field(default_factory=list)
    stop_reason: StopReason | None = None

    @property
    def done(self) -> bool:
        return self.stop_reason is not None


@dataclass(frozen=True)
class CrawlResult:
    films: list[FilmRecord]
    pages_fetched: int
    stop_reason: StopReason


class PageCrawler:
    """Walks a member's listing pages in order, one blocking fetch at a time.

    Stops on the first page with no entries, on the first fetch or parse
    fault, or once ``max_pages`` pages have been fetched. Whatever was
    collected before the stop is kept.
    """

    def __init__(
        self,
        fetch: DocumentFetcher,
        cfg: Config,
        listing: ListingFormat | None = None,
    ) -> None:
        self.fetch = fetch
        self.base_url = cfg.base_url
        self.user_agent = cfg.app.user_agent
        self.max_pages = cfg.scrape.max_pages
        self.timeout = cfg.scrape.fetch_timeout
        self.listing = listing or get_listing_format(cfg.scrape.listing)

    def fetch_all(self, username: str, target_month: YearMonth) -> list[FilmRecord]:
        return self.crawl(username, target_month).films

    def crawl(self, username: str, target_month: YearMonth) -> CrawlResult:
        state = CrawlState()
        while not state.done:
            self.step(state, username, target_month)
        LOG.info(
            "Stopped after %s page(s) for %s (%s): %s rated films",
            state.pages_fetched,
            username,
            state.stop_reason.value,
            len(state.films),
        )
        return CrawlResult(
            films=state.films,
            pages_fetched=state.pages_fetched,
            stop_reason=state.stop_reason,
        )

    def step(self, state: CrawlState, username: str, target_month: YearMonth) -> None:
        if state.page > self.max_pages:
            LOG.info("Reached max_pages=%s for %s", self.max_pages, username)
            state.stop_reason = StopReason.PAGE_CEILING
            return

        url = self.listing.page_url(self.base_url, username, target_month, state.page)
        try:
            page = self._fetch_page(url, target_month)
        except (FetchError, PageParseError) as exc:
            LOG.warning("Stopping at page %s: %s", state.page, exc)
            state.stop_reason = StopReason.FETCH_FAULT
            return

        state.pages_fetched += 1
        if page.is_empty:
            LOG.info("No more films found on page %s", state.page)
            state.stop_reason = StopReason.EMPTY_PAGE
            return

        LOG.debug(
            "Page %s: %s entries, %s rated", state.page, page.entry_count, len(page.films)
        )
        state.films.extend(page.films)
        state.page += 1

    def _fetch_page(self, url: str, target_month: YearMonth) -> ListingPage:
        html = self.fetch(url, headers={"User-Agent": self.user_agent}, timeout=self.timeout)
        return self.listing.parse(html, target_month, self.base_url)
