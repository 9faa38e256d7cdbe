from datetime import date
import json
import re

from boxdly.export.html import render_results_html
from boxdly.ingest.letterboxd.parse import FilmRecord
from boxdly.month import YearMonth


def embedded_data(html: str) -> dict:
    match = re.search(r'<script id="films-data" type="application/json">(.*?)</script>', html, re.S)
    assert match
    return json.loads(match.group(1))


def test_render_results_html(tmp_path) -> None:
    film = FilmRecord(
        title="Perfect Days",
        year="2023",
        rating=9,
        watched_date=date(2025, 12, 1),
        poster_url="https://a.ltrbxd.com/perfect-days.jpg",
        film_url="https://letterboxd.com/film/perfect-days/",
    )
    out = tmp_path / "out" / "index.html"
    render_results_html("alice", YearMonth(2025, 12), [film], out)

    data = embedded_data(out.read_text(encoding="utf-8"))
    assert data["username"] == "alice"
    assert data["month"] == "2025-12"
    assert data["films"] == [film.to_dict()]
    assert data["films"][0]["stars"] == 4.5


def test_titles_cannot_close_the_data_block(tmp_path) -> None:
    film = FilmRecord("</script><b>x", "", 2, date(2025, 12, 1), "", "")
    out = tmp_path / "index.html"
    render_results_html("alice", YearMonth(2025, 12), [film], out)

    html = out.read_text(encoding="utf-8")
    assert "</script><b>" not in html
    assert embedded_data(html)["films"][0]["title"] == "</script><b>x"


def test_results_page_is_self_contained(tmp_path) -> None:
    out = tmp_path / "index.html"
    render_results_html("alice", YearMonth(2025, 12), [], out)

    html = out.read_text(encoding="utf-8")
    assert "<link" not in html
    assert "fonts.googleapis.com" not in html
    assert embedded_data(html)["films"] == []
