"""
Scrape stories, comments and user profiles from Hacker News, log in and upvote.

The extractors in hnapi.listing, hnapi.detail and hnapi.user are pure
functions over parsed pages; hnapi.client.HackerNewsClient fetches the pages.
"""

from hnapi.client import HackerNewsClient
from hnapi.config import ClientConfig
from hnapi.models import (
    AuthCredential,
    Comment,
    CommentTree,
    Story,
    StoryDetails,
    StoryList,
    User,
)

__all__ = [
    "AuthCredential",
    "ClientConfig",
    "Comment",
    "CommentTree",
    "HackerNewsClient",
    "Story",
    "StoryDetails",
    "StoryList",
    "User",
]
