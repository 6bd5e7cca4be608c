from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional
from urllib.parse import parse_qs, urlparse

from bs4 import BeautifulSoup, Tag

from hnapi.errors import MalformedListing
from hnapi.markup import attr_of, next_row, select_one, text_of
from hnapi.models import PAGE_SIZE, Story
from hnapi.utils import arr_get, parse_count, parse_timestamp, resolve_age, utc_now

log = logging.getLogger(__name__)

LISTING_CONTAINER = "#bigbox, table.itemlist"
STORY_ROW = "tr.athing:not(.comtr)"
TITLE_LINK = "span.titleline > a, a.titlelink, a.storylink"


def extract_listing(
    document: BeautifulSoup,
    page_number: int = 1,
    fetched_at: Optional[datetime] = None,
) -> list[tuple[int, Story]]:
    """
    Turn a listing page into (rank, story) pairs in page order.

    Args:
        document: Parsed listing page.
        page_number: 1-based page number, used only to offset the ranks.
        fetched_at: When the page was fetched. "3 hours ago" style ages are
            resolved against it when no absolute time is rendered.

    Raises:
        MalformedListing: The page has no story list at all (error page,
            rate limit notice, layout change). A list with no rows is a
            valid, empty page.
    """
    container = select_one(document, LISTING_CONTAINER)
    if container is None:
        raise MalformedListing(
            f"no story list found on listing page {page_number}",
            identifier=page_number,
        )

    fetched_at = fetched_at or utc_now()
    offset = (max(page_number, 1) - 1) * PAGE_SIZE

    stories: list[tuple[int, Story]] = []
    for position, row in enumerate(container.select(STORY_ROW), start=1):
        try:
            story = extract_story(row, fetched_at=fetched_at)
        except ValueError as exc:
            raise MalformedListing(
                f"unreadable story row {position} on listing page {page_number}: {exc}",
                identifier=page_number,
            ) from exc
        stories.append((offset + position, story))

    log.debug("Extracted %s stories from listing page %s", len(stories), page_number)
    return stories


def extract_story(row: Tag, fetched_at: Optional[datetime] = None) -> Story:
    """
    Build a Story from its title row and the subtext row that follows it.

    Raises ValueError when the row has no usable id or title.
    """
    raw_id = attr_of(row, "id")
    if not raw_id or not raw_id.isdigit():
        raise ValueError(f"missing story id (got {raw_id!r})")

    title_el = select_one(row, TITLE_LINK)
    title = text_of(title_el)
    if not title:
        raise ValueError(f"missing title for story {raw_id}")

    url = _external_url(attr_of(title_el, "href"))
    url_displayed = text_of(row, "span.sitestr")

    subtext = select_one(next_row(row), "td.subtext")
    age_el = select_one(subtext, "span.age")
    posted_ago = text_of(age_el) or ""
    posted_at = parse_timestamp(attr_of(age_el, "title"))
    if posted_at is None:
        posted_at = resolve_age(posted_ago, fetched_at or utc_now())

    story = Story(
        id=int(raw_id),
        title=title,
        url=url,
        url_displayed=url_displayed,
        user=text_of(subtext, "a.hnuser"),
        score=parse_count(text_of(subtext, "span.score")),
        posted_at=posted_at,
        posted_ago=posted_ago,
        comment_count=_comment_count(subtext),
        upvote_token=_upvote_token(row),
    )
    if story.url_displayed is None and story.url:
        # older layouts render no sitestr span
        story = replace(story, url_displayed=story.url_domain())
    return story


def _external_url(href: Optional[str]) -> Optional[str]:
    if not href:
        return None
    if urlparse(href).scheme in ("http", "https"):
        return href
    # text posts link back to their own item page
    return None


def _comment_count(subtext: Optional[Tag]) -> Optional[int]:
    if subtext is None:
        return None
    for link in subtext.select("a"):
        label = link.get_text(strip=True).lower()
        if "comment" in label:
            return parse_count(label)
        if label == "discuss":
            return 0
    return None


def _upvote_token(row: Tag) -> Optional[str]:
    arrow = select_one(row, "a[id^=up_]")
    if arrow is None or "nosee" in (attr_of(arrow, "class") or "").split():
        return None
    href = attr_of(arrow, "href")
    if not href:
        return None
    return arr_get(parse_qs(urlparse(href).query).get("auth", []))
