from __future__ import annotations

import logging
import re
from datetime import date
from typing import Optional

from bs4 import BeautifulSoup, Tag

from hnapi.errors import MalformedUser, UserNotFound
from hnapi.markup import attr_of, inner_html, text_of
from hnapi.models import User
from hnapi.utils import arr_get, parse_human_date

log = logging.getLogger(__name__)

_DAY_RE = re.compile(r"day=(\d{4}-\d{2}-\d{2})")


def extract_user(document: BeautifulSoup, username: str) -> User:
    """
    Read a profile page.

    Raises:
        UserNotFound: The page has no profile block ("No such user.").
        MalformedUser: The profile block is there but a field is unreadable.
    """
    fields = _profile_fields(document)
    if "user" not in fields:
        raise UserNotFound(username)

    user_id = text_of(fields["user"]) or username
    created = _created(fields.get("created"))
    if created is None:
        raise MalformedUser(f"unreadable creation date for user {username!r}", identifier=username)

    karma = 0
    if "karma" in fields:
        karma_text = (text_of(fields["karma"]) or "").replace(",", "")
        try:
            karma = int(karma_text)
        except ValueError:
            raise MalformedUser(
                f"unreadable karma {karma_text!r} for user {username!r}", identifier=username
            ) from None

    about = inner_html(fields["about"]) if "about" in fields else None

    log.debug("Extracted profile of %s", user_id)
    return User(id=user_id, created=created, karma=karma, about=about)


def _profile_fields(document: BeautifulSoup) -> dict[str, Tag]:
    """Map each "label:" row of the profile table to its value cell."""
    label_cell = next(
        (td for td in document.select("td") if td.get_text(strip=True) == "user:"),
        None,
    )
    if label_cell is None:
        return {}

    fields: dict[str, Tag] = {}
    for row in label_cell.parent.parent.find_all("tr", recursive=False):
        cells = row.find_all("td", recursive=False)
        if len(cells) < 2:
            continue
        label = cells[0].get_text(strip=True)
        if label.endswith(":"):
            fields[label[:-1].lower()] = arr_get(cells, 1)
    return fields


def _created(cell: Optional[Tag]) -> Optional[date]:
    if cell is None:
        return None
    href = attr_of(cell, "href", "a") or ""
    match = _DAY_RE.search(href)
    if match:
        try:
            return date.fromisoformat(match.group(1))
        except ValueError:
            pass
    return parse_human_date(text_of(cell))
