from __future__ import annotations


class BoxdlyError(Exception):
    """Base class for errors raised by boxdly."""


class FetchError(BoxdlyError, RuntimeError):
    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class PageParseError(BoxdlyError, ValueError):
    pass


class ConfigError(BoxdlyError, ValueError):
    pass


class InputError(BoxdlyError, ValueError):
    """Caller supplied a value the query cannot run with."""


class InvalidUsernameError(InputError):
    def __init__(self, username: str) -> None:
        super().__init__(f"Invalid Letterboxd username: {username!r}")
        self.username = username


class InvalidMonthError(InputError):
    pass
