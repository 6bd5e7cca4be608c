from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional

from bs4 import BeautifulSoup, Tag

from hnapi.errors import MalformedDetail
from hnapi.listing import extract_story
from hnapi.markup import attr_of, inner_html, select_one, text_of
from hnapi.models import Comment, CommentTree, StoryDetails
from hnapi.utils import parse_timestamp, resolve_age, utc_now

log = logging.getLogger(__name__)

HEADER_ROW = "table.fatitem tr.athing"
STORY_BODY = "table.fatitem div.toptext"
COMMENT_ROW = "tr.athing.comtr"

# width in pixels of one indentation step in layouts without the indent attribute
INDENT_WIDTH = 40


def extract_detail(
    document: BeautifulSoup,
    fetched_at: Optional[datetime] = None,
    story_id: Optional[int] = None,
) -> StoryDetails:
    """
    Read a story page: the story itself, its text body and every comment.

    `story_id` is only used to say which story was missing in errors.

    Raises:
        MalformedDetail: The page has no story header (unknown id, error
            page) or a comment row without an id.
    """
    label = f"story {story_id}" if story_id is not None else "story page"
    header = select_one(document, HEADER_ROW)
    if header is None:
        raise MalformedDetail(f"{label} not found", identifier=story_id)

    fetched_at = fetched_at or utc_now()
    try:
        story = extract_story(header, fetched_at=fetched_at)
    except ValueError as exc:
        raise MalformedDetail(f"unreadable header for {label}: {exc}", identifier=story_id) from exc

    body = inner_html(select_one(document, STORY_BODY)) or None

    entries = [
        _comment_entry(row, fetched_at, story.id) for row in document.select(COMMENT_ROW)
    ]
    comments = build_comment_tree(entries)
    log.debug("Story %s has %s comments", story.id, len(comments))
    return StoryDetails(story=story, html_content=body, comments=comments)


def build_comment_tree(entries: Iterable[tuple[int, Comment]]) -> CommentTree:
    """
    Link page-ordered (indent level, comment) pairs into a comment forest.

    The page only tells how far each comment is indented. Walking the rows
    in order, the parent of a comment is the closest previous comment with a
    smaller indent, which is the top of a stack of open ancestors once every
    entry at the same or a deeper level has been popped. The stack holds
    (level, index) pairs into the output list.
    """
    drafts: list[Comment] = []
    levels: list[int] = []
    parents: list[Optional[int]] = []
    children: list[list[int]] = []
    stack: list[tuple[int, int]] = []

    for level, comment in entries:
        while stack and stack[-1][0] >= level:
            stack.pop()

        index = len(drafts)
        if stack:
            parent_index = stack[-1][1]
            parents.append(drafts[parent_index].id)
            children[parent_index].append(comment.id)
        else:
            parents.append(None)

        drafts.append(comment)
        levels.append(level)
        children.append([])
        stack.append((level, index))

    return CommentTree(
        comments=tuple(
            replace(
                comment,
                parent_id=parents[i],
                children=tuple(children[i]),
                level=levels[i],
            )
            for i, comment in enumerate(drafts)
        )
    )


def _comment_entry(row: Tag, fetched_at: datetime, story_id: int) -> tuple[int, Comment]:
    raw_id = attr_of(row, "id")
    if not raw_id or not raw_id.isdigit():
        raise MalformedDetail(
            f"comment row without id on story {story_id}", identifier=story_id
        )
    comment_id = int(raw_id)

    try:
        level = _indent_level(row, comment_id)
    except ValueError as exc:
        raise MalformedDetail(
            f"unreadable indentation for comment {comment_id} on story {story_id}",
            identifier=story_id,
        ) from exc

    try:
        comment = _read_comment(comment_id, row, fetched_at)
    except ValueError as exc:
        log.warning("Keeping placeholder for comment %s: %s", comment_id, exc)
        comment = Comment(id=comment_id)
    return level, comment


def _indent_level(row: Tag, comment_id: int) -> int:
    """Nesting depth from the `indent` attribute, else from the spacer image width."""
    cell = select_one(row, "td.ind")
    if cell is None:
        return 0
    indent = attr_of(cell, "indent")
    if indent is not None:
        if indent.strip().isdigit():
            return int(indent)
        log.warning("Unreadable indent %r for comment %s, using spacer width", indent, comment_id)
    width = attr_of(cell, "width", "img")
    if width is not None:
        return int(width) // INDENT_WIDTH
    if indent is not None:
        raise ValueError(f"unreadable indent {indent!r}")
    return 0


def _read_comment(comment_id: int, row: Tag, fetched_at: datetime) -> Comment:
    cell = select_one(row, "td.default")
    if cell is None:
        raise ValueError("no comment cell")

    age_el = select_one(cell, "span.age")
    posted_ago = text_of(age_el) or ""
    posted_at = parse_timestamp(attr_of(age_el, "title")) or resolve_age(posted_ago, fetched_at)

    text_el = select_one(cell, ".commtext")
    if text_el is not None:
        html_content = inner_html(text_el, exclude=(".reply",)) or ""
    else:
        # deleted and flagged comments only render a marker such as "[deleted]"
        html_content = text_of(cell, "div.comment") or ""

    return Comment(
        id=comment_id,
        user=text_of(cell, "a.hnuser"),
        posted_at=posted_at,
        posted_ago=posted_ago,
        html_content=html_content,
    )
