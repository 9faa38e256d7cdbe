from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from boxdly.errors import PageParseError
from boxdly.ingest.letterboxd.rating import encode_rating, strip_viewing_markers
from boxdly.month import YearMonth
from boxdly.util.logging import get_logger

LOG = get_logger(__name__)

_DIARY_DATE_RE = re.compile(r"/(?P<year>\d{4})/(?P<month>\d{1,2})/(?P<day>\d{1,2})/?$")


@dataclass(frozen=True)
class FilmRecord:
    title: str
    year: str
    rating: int
    watched_date: date
    poster_url: str
    film_url: str

    @property
    def stars(self) -> float:
        return self.rating / 2.0

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "year": self.year,
            "rating": self.rating,
            "stars": self.stars,
            "watched_date": self.watched_date.isoformat(),
            "poster_url": self.poster_url,
            "film_url": self.film_url,
        }


@dataclass(frozen=True)
class ListingPage:
    entry_count: int
    films: list[FilmRecord] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.entry_count == 0


def is_challenge_page(html: str) -> bool:
    markers = (
        "Just a moment...",
        "cf_chl_opt",
        "cf_chl",
        "Enable JavaScript and cookies to continue",
        "/cdn-cgi/challenge-platform/h/b/orchestrate",
    )
    return any(marker in html for marker in markers)


def parse_films_page(html: str, target_month: YearMonth, base_url: str) -> ListingPage:
    """Parse one page of a member's poster-grid film listing.

    Only rated entries are returned. The grid carries no watch date, so every
    record is stamped with the first day of ``target_month``.
    """
    soup = _soup(html)
    entries = soup.select("ul.poster-list li")
    films: list[FilmRecord] = []
    for index, entry in enumerate(entries):
        try:
            film = _parse_grid_entry(entry, target_month, base_url)
        except Exception as exc:  # noqa: BLE001
            LOG.debug("Dropping grid entry %s: %s", index, exc)
            continue
        if film is not None:
            films.append(film)
    return ListingPage(entry_count=len(entries), films=films)


def parse_diary_page(html: str, target_month: YearMonth, base_url: str) -> ListingPage:
    """Parse one page of a member's diary table.

    Unlike the poster grid, each diary row links to the day it was logged, so
    ``watched_date`` is the real date. Rows without one are dropped.
    """
    soup = _soup(html)
    rows = soup.select("tr.diary-entry-row")
    films: list[FilmRecord] = []
    for index, row in enumerate(rows):
        try:
            film = _parse_diary_row(row, base_url)
        except Exception as exc:  # noqa: BLE001
            LOG.debug("Dropping diary row %s: %s", index, exc)
            continue
        if film is not None:
            films.append(film)
    return ListingPage(entry_count=len(rows), films=films)


def _soup(html: str) -> BeautifulSoup:
    if is_challenge_page(html):
        raise PageParseError("Blocked by Cloudflare challenge page.")
    return BeautifulSoup(html, "lxml")


def _parse_grid_entry(entry, target_month: YearMonth, base_url: str) -> FilmRecord | None:
    poster = entry.find("div")
    slug = _attr(poster, "data-film-slug") or _attr(poster, "data-item-slug")
    if not slug:
        return None

    img = entry.find("img")
    title = _attr(img, "alt") or ""

    viewing = entry.select_one("p.poster-viewingdata")
    if viewing is None:
        LOG.debug("No viewing data for %s", slug)
        return None
    viewing_text = viewing.get_text(" ", strip=True)
    rating = encode_rating(strip_viewing_markers(viewing_text))
    LOG.debug("Viewing data for %s: %r -> %s", slug, viewing_text, rating)
    if rating == 0:
        return None

    year_link = entry.select_one("small.metadata a")
    year = year_link.get_text(strip=True) if year_link else ""

    return FilmRecord(
        title=title,
        year=year,
        rating=rating,
        watched_date=target_month.first_day(),
        poster_url=normalize_url(_image_src(img), base_url),
        film_url=film_url(base_url, slug),
    )


def _parse_diary_row(row, base_url: str) -> FilmRecord | None:
    link = row.select_one("h3.headline-3 a") or row.select_one("td.td-film-details a")
    slug = (
        _attr(row, "data-film-slug")
        or _attr(row.select_one("div.film-poster"), "data-film-slug")
        or _slug_from_href(_attr(link, "href"))
    )
    if not slug:
        return None
    title = _attr(row, "data-film-name") or (link.get_text(strip=True) if link else "")

    rating_node = row.select_one("td.col-rating span.rating") or row.select_one(".rating")
    rating = encode_rating(rating_node.get_text(strip=True)) if rating_node else 0
    if rating == 0:
        LOG.debug("Skipping unrated diary entry: %s", slug)
        return None

    date_link = row.select_one("td.td-day a") or row.select_one("a.date-link")
    watched = _diary_date(_attr(date_link, "href"))
    if watched is None:
        LOG.debug("No diary date for %s", slug)
        return None

    year = _attr(row, "data-film-year")
    if not year:
        year_node = row.select_one("small.metadata")
        year = year_node.get_text(strip=True) if year_node else ""

    return FilmRecord(
        title=title,
        year=year,
        rating=rating,
        watched_date=watched,
        poster_url=normalize_url(_image_src(row.find("img")), base_url),
        film_url=film_url(base_url, slug),
    )


def film_url(base_url: str, slug: str) -> str:
    return f"{base_url.rstrip('/')}/film/{slug}/"


def normalize_url(url: str, base_url: str) -> str:
    if not url:
        return ""
    if url.startswith("//"):
        return f"https:{url}"
    if url.startswith(("http://", "https://")):
        return url
    return urljoin(base_url.rstrip("/") + "/", url)


def _image_src(img) -> str:
    if img is None:
        return ""
    return img.get("src") or img.get("data-src") or ""


def _diary_date(href: str | None) -> date | None:
    if not href:
        return None
    match = _DIARY_DATE_RE.search(href)
    if not match:
        return None
    try:
        return date(int(match.group("year")), int(match.group("month")), int(match.group("day")))
    except ValueError:
        return None


def _slug_from_href(href: str | None) -> str | None:
    if not href:
        return None
    parts = [part for part in href.strip("/").split("/") if part]
    if "film" in parts:
        index = parts.index("film")
        if index + 1 < len(parts):
            return parts[index + 1]
    return None


def _attr(node, key: str) -> str | None:
    return node.get(key) if node else None
