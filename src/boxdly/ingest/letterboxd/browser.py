from __future__ import annotations

from collections.abc import Mapping

from boxdly.errors import FetchError
from boxdly.util.logging import get_logger

LOG = get_logger(__name__)


def fetch_html(url: str, *, headers: Mapping[str, str], timeout: float) -> str:
    LOG.info("Browser fetching: %s", url)
    try:
        from playwright.sync_api import Error as PlaywrightError
        from playwright.sync_api import sync_playwright
    except ImportError as exc:
        raise RuntimeError(
            "Playwright is not installed. Install 'boxdly[browser]' to enable browser fetching."
        ) from exc

    extra_headers = {k: v for k, v in headers.items() if k.lower() != "user-agent"}
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=True)
        try:
            context = browser.new_context(
                user_agent=headers.get("User-Agent"),
                extra_http_headers=extra_headers or None,
            )
            content = _read_page(context.new_page(), url, timeout, PlaywrightError)
            context.close()
        finally:
            browser.close()
    return content


def _read_page(page, url: str, timeout: float, error_cls: type[Exception]) -> str:
    try:
        response = page.goto(url, wait_until="domcontentloaded", timeout=timeout * 1000)
        if response is not None and not response.ok:
            raise FetchError(url, f"HTTP {response.status}")
        return page.content()
    except error_cls as exc:
        raise FetchError(url, str(exc)) from exc
