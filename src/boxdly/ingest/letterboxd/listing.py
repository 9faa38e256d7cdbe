from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from boxdly.errors import ConfigError
from boxdly.ingest.letterboxd.parse import ListingPage, parse_diary_page, parse_films_page
from boxdly.month import YearMonth

PageParser = Callable[[str, YearMonth, str], ListingPage]


@dataclass(frozen=True)
class ListingFormat:
    name: str
    path_template: str
    parser: PageParser

    def page_url(self, base_url: str, username: str, target_month: YearMonth, page: int) -> str:
        path = self.path_template.format(
            username=username,
            year=target_month.year,
            month=target_month.month,
            page=page,
        )
        return f"{base_url.rstrip('/')}/{path}"

    def parse(self, html: str, target_month: YearMonth, base_url: str) -> ListingPage:
        return self.parser(html, target_month, base_url)


FILMS = ListingFormat("films", "{username}/films/page/{page}/", parse_films_page)
DIARY = ListingFormat(
    "diary",
    "{username}/films/diary/for/{year}/{month:02d}/page/{page}/",
    parse_diary_page,
)

LISTING_FORMATS = {fmt.name: fmt for fmt in (FILMS, DIARY)}


def get_listing_format(name: str) -> ListingFormat:
    try:
        return LISTING_FORMATS[name]
    except KeyError:
        raise ConfigError(f"Unknown listing format: {name!r}") from None
