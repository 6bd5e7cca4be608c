from __future__ import annotations

import logging
from typing import Optional

import httpx

from hnapi.config import BASE_URL
from hnapi.errors import InvalidToken, Unauthenticated, UnexpectedVoteResponse
from hnapi.markup import parse_document, select_one
from hnapi.models import AuthCredential

log = logging.getLogger(__name__)

LOGIN_FORM = "form[action=vote], form[action=login]"
INVALID_TOKEN_MARKERS = ("Unknown or expired link", "Can't make that vote")


def upvote(
    client: httpx.Client,
    story_id: int,
    upvote_token: Optional[str],
    credential: Optional[AuthCredential],
    base_url: str = BASE_URL,
) -> bool:
    """
    Upvote a story.

    `upvote_token` must come from a page fetched with the same credential.
    A token is good for one vote: a second call with the same token fails
    with InvalidToken, and nothing here retries.

    Raises:
        Unauthenticated: No credential, or the site asked to log in.
        InvalidToken: No token, or the site rejected it.
        UnexpectedVoteResponse: The response matched no known outcome.
    """
    if credential is None:
        raise Unauthenticated(f"logging in is required to upvote story {story_id}")
    if not upvote_token:
        raise InvalidToken(f"no upvote token for story {story_id}", story_id=story_id)

    url = f"{base_url.rstrip('/')}/vote"
    params = {
        "id": str(story_id),
        "how": "up",
        "auth": upvote_token,
        "goto": f"item?id={story_id}",
    }
    log.info("Upvoting story %s", story_id)
    response = client.get(
        url,
        params=params,
        headers={"Cookie": credential.cookie_header()},
        follow_redirects=False,
    )
    result = classify_vote_response(response, story_id)
    log.info("Upvoted story %s", story_id)
    return result


def classify_vote_response(response: httpx.Response, story_id: Optional[int] = None) -> bool:
    """
    Decide how a vote request ended, from the response content.

    A redirect back to the story (the `goto` sent by upvote), or a rendered
    page without an error message, is a success. Everything unrecognised is
    an error, never a success.
    """
    if response.is_redirect:
        location = response.headers.get("location", "")
        if "login" in location:
            raise Unauthenticated(f"the site asked to log in to upvote story {story_id}")
        if _is_story_redirect(response, location, story_id):
            return True
        raise UnexpectedVoteResponse(
            f"unexpected redirect to {location!r} while upvoting story {story_id}",
            story_id=story_id,
        )

    if response.status_code >= 400:
        raise UnexpectedVoteResponse(
            f"HTTP {response.status_code} while upvoting story {story_id}", story_id=story_id
        )

    text = response.text
    for marker in INVALID_TOKEN_MARKERS:
        if marker in text:
            raise InvalidToken(
                f"upvote token rejected for story {story_id}: {marker}", story_id=story_id
            )

    document = parse_document(text)
    if select_one(document, LOGIN_FORM) is not None:
        raise Unauthenticated(f"the site asked to log in to upvote story {story_id}")
    if select_one(document, "#hnmain") is not None:
        return True

    raise UnexpectedVoteResponse(
        f"unrecognised response while upvoting story {story_id}", story_id=story_id
    )


def _is_story_redirect(response: httpx.Response, location: str, story_id: Optional[int]) -> bool:
    """True when `location` points at item?id=<story_id> on the host that answered."""
    if not location or story_id is None:
        return False
    target = response.url.join(location)
    return (
        target.host == response.url.host
        and target.path.rstrip("/").endswith("/item")
        and target.params.get("id") == str(story_id)
    )
