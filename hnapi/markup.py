"""
Small query helpers over BeautifulSoup documents.

Extractors only go through these functions (plus the Tag API for walking
siblings) so the selector handling stays in one place.
"""

from __future__ import annotations

import copy
from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

Node = Union[BeautifulSoup, Tag]

PARSER = "html.parser"


def parse_document(markup: Union[str, bytes]) -> BeautifulSoup:
    return BeautifulSoup(markup, PARSER)


def select_one(node: Optional[Node], selector: str) -> Optional[Tag]:
    if node is None:
        return None
    return node.select_one(selector)


def text_of(node: Optional[Node], selector: Optional[str] = None) -> Optional[str]:
    """Stripped text of `node` (or of its first match for `selector`)."""
    target = select_one(node, selector) if selector else node
    if target is None:
        return None
    return target.get_text(strip=True)


def attr_of(node: Optional[Node], name: str, selector: Optional[str] = None) -> Optional[str]:
    target = select_one(node, selector) if selector else node
    if target is None:
        return None
    value = target.get(name)
    if isinstance(value, list):
        # multi-valued attributes such as class come back as lists
        return " ".join(value)
    return value


def inner_html(node: Optional[Tag], exclude: tuple[str, ...] = ()) -> Optional[str]:
    """
    Markup inside `node`, without the node's own tag.

    Descendants matching any selector in `exclude` are left out. The
    document itself is never modified.
    """
    if node is None:
        return None
    if exclude:
        node = copy.copy(node)
        for selector in exclude:
            for unwanted in node.select(selector):
                unwanted.decompose()
    return node.decode_contents().strip()


def next_row(row: Tag) -> Optional[Tag]:
    """The next `tr` sibling, skipping whitespace text nodes."""
    return row.find_next_sibling("tr")


def plain_text(markup: str) -> str:
    """Text of a markup fragment, with paragraphs separated by a blank line."""
    fragment = parse_document(markup)
    for paragraph in fragment.find_all("p"):
        paragraph.insert_before("\n\n")
        paragraph.unwrap()
    return fragment.get_text()
