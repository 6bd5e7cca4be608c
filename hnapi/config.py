from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

BASE_URL = "https://news.ycombinator.com"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:144.0) Gecko/20100101 Firefox/144.0"
)


@dataclass(frozen=True)
class ClientConfig:
    """Settings for HackerNewsClient. The base URL is the only one the site logic depends on."""

    base_url: str = BASE_URL
    timeout: float = 10.0
    # 1 second between requests by default - polite for the website
    min_interval_ms: float = 1000.0
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """
        Build a config from HN_BASE_URL, HN_TIMEOUT and HN_MIN_INTERVAL_MS.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            base_url=env.get("HN_BASE_URL", defaults.base_url).rstrip("/"),
            timeout=float(env.get("HN_TIMEOUT", defaults.timeout)),
            min_interval_ms=float(env.get("HN_MIN_INTERVAL_MS", defaults.min_interval_ms)),
            user_agent=env.get("HN_USER_AGENT", defaults.user_agent),
        )
