from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

import requests

from boxdly.errors import FetchError
from boxdly.util.logging import get_logger

LOG = get_logger(__name__)


class DocumentFetcher(Protocol):
    def __call__(self, url: str, *, headers: Mapping[str, str], timeout: float) -> str: ...


class LetterboxdClient:
    """Plain HTTP fetcher, one per query.

    No retries and no caching: a failed request is reported as ``FetchError``
    and the caller decides what to do with the pages it already has.
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        self.session = session or requests.Session()

    def fetch_html(self, url: str, *, headers: Mapping[str, str], timeout: float) -> str:
        LOG.info("Fetching: %s", url)
        try:
            resp = self.session.get(url, headers=dict(headers), timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise FetchError(url, str(exc)) from exc
        return resp.text

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> LetterboxdClient:
        return self

    def __exit__(self, *_exc) -> None:
        self.close()
