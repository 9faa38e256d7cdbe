from datetime import date

from boxdly.ingest.letterboxd.parse import FilmRecord
from boxdly.month import YearMonth
from boxdly.ranking import rank_month

DECEMBER = YearMonth(2025, 12)


def film(title: str, rating: int, watched: date = date(2025, 12, 1)) -> FilmRecord:
    return FilmRecord(
        title=title,
        year="2025",
        rating=rating,
        watched_date=watched,
        poster_url="",
        film_url=f"https://letterboxd.com/film/{title}/",
    )


def test_ties_keep_listing_order() -> None:
    records = [
        film("a", 2),
        film("b", 2),
        film("c", 4),
        film("d", 4),
        film("e", 4),
        film("f", 6),
    ]
    top = rank_month(records, DECEMBER)
    assert [(r.title, r.rating) for r in top] == [("f", 6), ("c", 4), ("d", 4), ("e", 4)]


def test_other_months_are_excluded() -> None:
    records = [
        film("november", 10, date(2025, 11, 1)),
        film("last-december", 10, date(2024, 12, 1)),
        film("december", 3),
    ]
    assert [r.title for r in rank_month(records, DECEMBER)] == ["december"]


def test_unrated_records_are_excluded() -> None:
    assert rank_month([film("unrated", 0)], DECEMBER) == []


def test_limit() -> None:
    records = [film(str(n), n) for n in range(1, 11)]
    assert [r.rating for r in rank_month(records, DECEMBER)] == [10, 9, 8, 7]
    assert [r.rating for r in rank_month(records, DECEMBER, limit=2)] == [10, 9]


def test_empty_input() -> None:
    assert rank_month([], DECEMBER) == []
