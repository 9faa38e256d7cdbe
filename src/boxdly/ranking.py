from __future__ import annotations

from typing import Iterable

from boxdly.ingest.letterboxd.parse import FilmRecord
from boxdly.month import YearMonth

TOP_N = 4


def rank_month(
    records: Iterable[FilmRecord],
    target_month: YearMonth,
    limit: int = TOP_N,
) -> list[FilmRecord]:
    """Highest-rated films watched in ``target_month``, best first.

    ``sorted`` is stable, so equal ratings keep listing order: page order,
    then position on the page.
    """
    eligible = [
        record
        for record in records
        if record.rating > 0 and target_month.contains(record.watched_date)
    ]
    return sorted(eligible, key=lambda record: record.rating, reverse=True)[:limit]
