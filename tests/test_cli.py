from datetime import date
import json

import pytest
from typer.testing import CliRunner

from boxdly import cli, service
from boxdly.errors import FetchError, InvalidUsernameError
from boxdly.ingest.letterboxd import browser
from boxdly.ingest.letterboxd.parse import FilmRecord
from boxdly.month import YearMonth

runner = CliRunner()

FILM = FilmRecord(
    title="Perfect Days",
    year="2023",
    rating=9,
    watched_date=date(2025, 12, 1),
    poster_url="https://a.ltrbxd.com/perfect-days.jpg",
    film_url="https://letterboxd.com/film/perfect-days/",
)


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda verbose=False: None)


def test_top_prints_table(monkeypatch) -> None:
    seen = {}

    def fake_query(username, year_month=None, cfg=None, fetch=None):
        seen.update(username=username, month=year_month)
        return [FILM]

    monkeypatch.setattr(cli, "get_top_films_for_month", fake_query)
    result = runner.invoke(cli.app, ["top", "alice", "--month", "2025-12"])

    assert result.exit_code == 0
    assert "Perfect Days" in result.output
    assert "★★★★½" in result.output
    assert seen == {"username": "alice", "month": YearMonth(2025, 12)}


def test_top_json(monkeypatch) -> None:
    monkeypatch.setattr(cli, "get_top_films_for_month", lambda *_args, **_kwargs: [FILM])
    result = runner.invoke(cli.app, ["top", "alice", "--month", "2025-12", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.output) == [FILM.to_dict()]


def test_top_empty(monkeypatch) -> None:
    monkeypatch.setattr(cli, "get_top_films_for_month", lambda *_args, **_kwargs: [])
    result = runner.invoke(cli.app, ["top", "alice", "--month", "2025-12"])
    assert result.exit_code == 0
    assert "No rated films for alice in 2025-12." in result.output


def test_top_writes_html(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(cli, "get_top_films_for_month", lambda *_args, **_kwargs: [FILM])
    out = tmp_path / "results.html"
    result = runner.invoke(cli.app, ["top", "alice", "--month", "2025-12", "--html", str(out)])
    assert result.exit_code == 0
    assert "Perfect Days" in out.read_text(encoding="utf-8")


def test_top_input_error_is_a_client_error(monkeypatch) -> None:
    def bad_username(username, *_args, **_kwargs):
        raise InvalidUsernameError(username)

    monkeypatch.setattr(cli, "get_top_films_for_month", bad_username)
    result = runner.invoke(cli.app, ["top", "x"])
    assert result.exit_code == 2
    assert "Error fetching data for user: x" in result.output


def test_top_bad_month() -> None:
    result = runner.invoke(cli.app, ["top", "alice", "--month", "2025-13"])
    assert result.exit_code == 2


def test_top_missing_config(tmp_path) -> None:
    result = runner.invoke(cli.app, ["top", "alice", "--config", str(tmp_path / "missing.toml")])
    assert result.exit_code == 2


class DummyClient:
    html = ""
    error: Exception | None = None
    urls: list[str] = []

    def __enter__(self):
        return self

    def __exit__(self, *_exc):
        return None

    def fetch_html(self, url, *, headers, timeout):
        DummyClient.urls.append(url)
        if DummyClient.error:
            raise DummyClient.error
        return DummyClient.html


def test_inspect_page(monkeypatch) -> None:
    DummyClient.html = (
        '<ul class="poster-list"><li><div data-film-slug="past-lives">'
        '<img src="//a.ltrbxd.com/p.jpg" alt="Past Lives"/></div>'
        '<p class="poster-viewingdata">★★½</p></li></ul>'
    )
    DummyClient.error = None
    DummyClient.urls = []
    monkeypatch.setattr(service, "LetterboxdClient", DummyClient)

    result = runner.invoke(cli.app, ["inspect-page", "alice", "--page", "2", "--month", "2025-12"])
    assert result.exit_code == 0
    assert DummyClient.urls == ["https://letterboxd.com/alice/films/page/2/"]
    assert "entries=1 rated=1" in result.output
    assert "Past Lives" in result.output


def test_inspect_page_fetch_error(monkeypatch) -> None:
    DummyClient.error = FetchError("https://letterboxd.com/alice/films/page/1/", "timed out")
    DummyClient.urls = []
    monkeypatch.setattr(service, "LetterboxdClient", DummyClient)

    result = runner.invoke(cli.app, ["inspect-page", "alice"])
    assert result.exit_code == 1
    assert "timed out" in result.output


def test_top_wrong_type_in_config(tmp_path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('[scrape]\nmax_pages = "5"\n', encoding="utf-8")
    result = runner.invoke(cli.app, ["top", "alice", "--config", str(path)])
    assert result.exit_code == 2
    assert "scrape.max_pages" in result.output


def test_inspect_page_uses_browser_when_configured(monkeypatch, tmp_path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("[scrape]\nuse_browser = true\n", encoding="utf-8")
    urls = []

    def fake_browser_fetch(url, *, headers, timeout):
        urls.append(url)
        return '<ul class="poster-list"></ul>'

    def no_client():
        raise AssertionError("requests client should not be used")

    monkeypatch.setattr(browser, "fetch_html", fake_browser_fetch)
    monkeypatch.setattr(service, "LetterboxdClient", no_client)

    result = runner.invoke(cli.app, ["inspect-page", "alice", "--config", str(path)])
    assert result.exit_code == 0
    assert len(urls) == 1
    assert "entries=0 rated=0" in result.output
