from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
import tomllib

from boxdly.errors import ConfigError

BASE_URL = "https://letterboxd.com"
DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
LISTINGS = ("films", "diary")


@dataclass(frozen=True)
class AppConfig:
    base_url: str = BASE_URL
    user_agent: str = DEFAULT_USER_AGENT


@dataclass(frozen=True)
class ScrapeConfig:
    max_pages: int = 10
    fetch_timeout: float = 10.0
    use_browser: bool = False
    listing: str = "films"


@dataclass(frozen=True)
class Config:
    app: AppConfig = field(default_factory=AppConfig)
    scrape: ScrapeConfig = field(default_factory=ScrapeConfig)

    @property
    def base_url(self) -> str:
        return self.app.base_url.rstrip("/")


DEFAULT_CONFIG_PATH = Path("config.toml")

# field annotations are strings under postponed evaluation
_FIELD_TYPES = {
    "str": (str,),
    "int": (int,),
    "float": (int, float),
    "bool": (bool,),
}


def load_config(path: Path | None = None) -> Config:
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return Config()
        path = DEFAULT_CONFIG_PATH
    elif not path.exists():
        raise FileNotFoundError(
            f"Missing config file {path}. Copy config.example.toml and edit it."
        )

    try:
        raw = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    unknown = set(raw) - {"app", "scrape"}
    if unknown:
        raise ConfigError(f"Unknown config sections: {', '.join(sorted(unknown))}")

    cfg = Config(
        app=_section(AppConfig, raw.get("app", {}), "app"),
        scrape=_section(ScrapeConfig, raw.get("scrape", {}), "scrape"),
    )
    validate_config(cfg)
    return cfg


def validate_config(cfg: Config) -> None:
    if not cfg.app.base_url.startswith(("http://", "https://")):
        raise ConfigError(f"app.base_url must be an http(s) URL, got {cfg.app.base_url!r}")
    if cfg.scrape.max_pages < 1:
        raise ConfigError("scrape.max_pages must be >= 1")
    if cfg.scrape.fetch_timeout <= 0:
        raise ConfigError("scrape.fetch_timeout must be > 0")
    if cfg.scrape.listing not in LISTINGS:
        raise ConfigError(
            f"scrape.listing must be one of {', '.join(LISTINGS)}, got {cfg.scrape.listing!r}"
        )


def _section(cls, values, name: str):
    if not isinstance(values, dict):
        raise ConfigError(f"[{name}] must be a table")
    types = {f.name: f.type for f in fields(cls)}
    unknown = set(values) - set(types)
    if unknown:
        raise ConfigError(f"Unknown keys in [{name}]: {', '.join(sorted(unknown))}")
    for key, value in values.items():
        expected = _FIELD_TYPES[types[key]]
        # bool is an int subclass; "max_pages = true" is still a mistake
        if not isinstance(value, expected) or (isinstance(value, bool) and bool not in expected):
            raise ConfigError(f"{name}.{key} must be {types[key]}, got {value!r}")
    return cls(**values)
