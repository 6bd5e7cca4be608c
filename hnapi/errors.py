from __future__ import annotations

from typing import Optional, Union

Identifier = Union[int, str, None]


class HnApiError(Exception):
    """Base class for every error raised by hnapi."""


class ExtractionError(HnApiError):
    """
    The fetched page does not have the structure the extractor expects.

    `extractor` names the extractor that failed ("listing", "detail",
    "user") and `identifier` the story id, username or page involved, so
    that callers can report which lookup went wrong.
    """

    extractor = "extraction"

    def __init__(self, message: str, identifier: Identifier = None) -> None:
        super().__init__(message)
        self.identifier = identifier


class MalformedListing(ExtractionError):
    extractor = "listing"


class MalformedDetail(ExtractionError):
    extractor = "detail"


class MalformedUser(ExtractionError):
    extractor = "user"


class UserNotFound(ExtractionError):
    extractor = "user"

    def __init__(self, username: str) -> None:
        super().__init__(f"user {username!r} not found", identifier=username)


class AuthError(HnApiError):
    pass


class InvalidCredentials(AuthError):
    def __init__(self, username: Optional[str] = None) -> None:
        message = "bad login"
        if username:
            message = f"bad login for user {username!r}"
        super().__init__(message)
        self.username = username


class Unauthenticated(AuthError):
    """No credential was given, or the site rejected the one that was."""


class UnexpectedAuthResponse(AuthError):
    pass


class VoteError(HnApiError):
    def __init__(self, message: str, story_id: Optional[int] = None) -> None:
        super().__init__(message)
        self.story_id = story_id


class InvalidToken(VoteError):
    """The upvote token is missing, expired, already used or the story is closed."""


class UnexpectedVoteResponse(VoteError):
    pass
