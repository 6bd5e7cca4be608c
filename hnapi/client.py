from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from hnapi import auth, vote
from hnapi.config import ClientConfig
from hnapi.detail import extract_detail
from hnapi.listing import extract_listing
from hnapi.markup import parse_document
from hnapi.models import AuthCredential, Story, StoryDetails, StoryList, User
from hnapi.rate_limiter import RateLimiter
from hnapi.user import extract_user
from hnapi.utils import utc_now

log = logging.getLogger(__name__)


HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "DNT": "1",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


class HackerNewsClient:
    """
    Fetches Hacker News pages and hands them to the extractors.

    This is the only place that does network I/O. Every method is one
    request (plus the politeness delay) followed by a pure extraction, and
    errors from either side propagate unchanged: httpx.HTTPError for the
    transport, hnapi.errors for everything else.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.config = config or ClientConfig()
        self.base_url = self.config.base_url.rstrip("/")
        self._client = client or httpx.Client(
            timeout=self.config.timeout,
            follow_redirects=True,
            headers={**HEADERS, "User-Agent": self.config.user_agent},
        )
        self.rate_limiter = RateLimiter(min_interval_ms=self.config.min_interval_ms)

    def __enter__(self) -> "HackerNewsClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def stories(
        self,
        story_list: StoryList = StoryList.NEWS,
        page: int = 1,
        credential: Optional[AuthCredential] = None,
    ) -> list[tuple[int, Story]]:
        """
        Load one page of a story list as (rank, story) pairs.

        Pass a credential to get upvote tokens on the stories.
        """
        document, fetched_at = self._get_document(
            story_list.path, params={"p": str(page)}, credential=credential
        )
        return extract_listing(document, page_number=page, fetched_at=fetched_at)

    def story(
        self,
        story_id: int,
        credential: Optional[AuthCredential] = None,
    ) -> StoryDetails:
        document, fetched_at = self._get_document(
            "/item", params={"id": str(story_id)}, credential=credential
        )
        return extract_detail(document, fetched_at=fetched_at, story_id=story_id)

    def user(self, username: str) -> User:
        document, _ = self._get_document("/user", params={"id": username})
        return extract_user(document, username)

    def login(self, username: str, password: str) -> AuthCredential:
        self.rate_limiter.wait_if_needed()
        return auth.login(self._client, username, password, base_url=self.base_url)

    def upvote(
        self,
        story_id: int,
        upvote_token: Optional[str],
        credential: Optional[AuthCredential],
    ) -> bool:
        self.rate_limiter.wait_if_needed()
        return vote.upvote(
            self._client, story_id, upvote_token, credential, base_url=self.base_url
        )

    # HTTP helpers
    # ------------------------------------------------------------

    def _get_document(
        self,
        path: str,
        params: Optional[dict] = None,
        credential: Optional[AuthCredential] = None,
    ) -> tuple[BeautifulSoup, datetime]:
        url = f"{self.base_url}{path}"
        headers = {}
        if credential is not None:
            headers["Cookie"] = credential.cookie_header()

        self.rate_limiter.wait_if_needed()
        log.info("Loading %s %s", url, params or "")
        response = self._client.get(url, params=params, headers=headers)
        response.raise_for_status()
        fetched_at = utc_now()
        return parse_document(response.text), fetched_at
