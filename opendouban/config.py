"""
Configuration for the Open Douban metadata provider.

Settings are read once at startup and passed explicitly to the client,
resolver and mapper constructors.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional


DEFAULT_HOME_PAGE_URL = "https://www.douban.com"


def parse_role_table(raw: Optional[str]) -> dict[str, str]:
    """
    Parse a role table from ``label=Kind`` pairs separated by commas.

    Example: ``"导演=Director,演员=Actor"``.
    """
    table: dict[str, str] = {}
    if not raw:
        return table

    for pair in raw.split(","):
        if "=" not in pair:
            continue
        label, kind = pair.split("=", 1)
        label = label.strip()
        kind = kind.strip()
        if label and kind:
            table[label] = kind
    return table


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    # Upstream API
    api_base_uri: str = "http://localhost:5000"
    poster_size: str = ""
    request_timeout: float = 10.0

    # Title cleanup applied before searching by name
    noise_pattern: str = ""

    # Mapping
    home_page_url: str = DEFAULT_HOME_PAGE_URL
    role_table: dict[str, str] = field(default_factory=dict)

    # Environment
    environment: str = "development"
    debug: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            api_base_uri=os.getenv("ODDB_API_BASE_URI", cls.api_base_uri),
            poster_size=os.getenv("ODDB_POSTER_SIZE", cls.poster_size),
            request_timeout=float(os.getenv("ODDB_REQUEST_TIMEOUT", cls.request_timeout)),
            noise_pattern=os.getenv("ODDB_NOISE_PATTERN", cls.noise_pattern),
            home_page_url=os.getenv("ODDB_HOME_PAGE_URL", cls.home_page_url),
            role_table=parse_role_table(os.getenv("ODDB_ROLE_TABLE")),
            environment=os.getenv("OPENDOUBAN_ENV", cls.environment),
            debug=os.getenv("DEBUG", "true").lower() == "true",
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()
