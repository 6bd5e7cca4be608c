from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterator, Optional
from urllib.parse import urlparse

PAGE_SIZE = 30


class StoryList(enum.Enum):
    """Named story lists, each served on its own listing page."""

    NEWS = "news"
    NEWEST = "newest"
    BEST = "best"
    ASK = "ask"
    SHOW = "show"
    JOBS = "jobs"

    @property
    def path(self) -> str:
        return f"/{self.value}"


@dataclass(frozen=True)
class Story:
    """
    A single story as rendered on a listing page or on its own page.

    `url` is None for text posts (Ask HN and friends), whose title links
    back to the discussion page. `upvote_token` is only present when the
    page was fetched with a logged in session and the story can still be
    voted on.
    """

    id: int
    title: str
    url: Optional[str] = None
    url_displayed: Optional[str] = None
    user: Optional[str] = None
    score: Optional[int] = None
    posted_at: Optional[datetime] = None
    posted_ago: str = ""
    comment_count: Optional[int] = None
    upvote_token: Optional[str] = None

    def url_domain(self) -> Optional[str]:
        """Extract the domain from the story URL for display purposes."""
        if not self.url:
            return None
        netloc = urlparse(self.url).netloc
        if netloc.startswith("www."):
            netloc = netloc[4:]
        return netloc or None

    def item_url(self, base_url: str) -> str:
        return f"{base_url.rstrip('/')}/item?id={self.id}"


@dataclass(frozen=True)
class Comment:
    id: int
    parent_id: Optional[int] = None
    children: tuple[int, ...] = ()
    user: Optional[str] = None
    posted_at: Optional[datetime] = None
    posted_ago: str = ""
    html_content: str = ""
    level: int = 0


@dataclass(frozen=True)
class CommentTree:
    """
    Flat, page-ordered sequence of comments.

    Nesting is expressed only through `parent_id` / `children` ids, so the
    tree holds no references between Comment objects.
    """

    comments: tuple[Comment, ...] = ()
    _by_id: dict = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # frozen dataclass, so the index is filled through object.__setattr__
        index = {comment.id: comment for comment in self.comments}
        object.__setattr__(self, "_by_id", index)

    def __len__(self) -> int:
        return len(self.comments)

    def __iter__(self) -> Iterator[Comment]:
        return iter(self.comments)

    def get(self, comment_id: int) -> Optional[Comment]:
        return self._by_id.get(comment_id)

    def roots(self) -> list[Comment]:
        return [comment for comment in self.comments if comment.parent_id is None]

    def children_of(self, comment_id: int) -> list[Comment]:
        comment = self.get(comment_id)
        if comment is None:
            return []
        return [self._by_id[child_id] for child_id in comment.children]

    def walk(self) -> Iterator[tuple[int, Comment]]:
        """Yield (depth, comment) pairs in pre-order, roots first."""
        stack = [(0, root) for root in reversed(self.roots())]
        while stack:
            depth, comment = stack.pop()
            yield depth, comment
            for child in reversed(self.children_of(comment.id)):
                stack.append((depth + 1, child))


@dataclass(frozen=True)
class StoryDetails:
    story: Story
    html_content: Optional[str] = None
    comments: CommentTree = field(default_factory=CommentTree)


@dataclass(frozen=True)
class User:
    id: str
    created: date
    karma: int = 0
    about: Optional[str] = None


@dataclass(frozen=True)
class AuthCredential:
    """Session value handed out by the login page (the `user` cookie)."""

    token: str

    def cookies(self) -> dict[str, str]:
        return {"user": self.token}

    def cookie_header(self) -> str:
        return f"user={self.token}"

    def __repr__(self) -> str:
        return "AuthCredential(token=<hidden>)"
