from __future__ import annotations

import logging
from typing import Optional

import httpx

from hnapi.config import BASE_URL
from hnapi.errors import InvalidCredentials, UnexpectedAuthResponse
from hnapi.models import AuthCredential

log = logging.getLogger(__name__)

SESSION_COOKIE = "user"
BAD_LOGIN_MARKER = "Bad login"


def login(
    client: httpx.Client,
    username: str,
    password: str,
    base_url: str = BASE_URL,
) -> AuthCredential:
    """
    Submit the login form and return the session credential.

    The site answers 200 for a bad password too, so the outcome is read
    from the response itself (see classify_login_response).

    The session cookie is not left in `client`'s cookie jar: later requests
    are only authenticated when the credential is passed to them.
    """
    url = f"{base_url.rstrip('/')}/login"
    log.info("Logging in as %s", username)
    try:
        response = client.post(
            url,
            data={"goto": "news", "acct": username, "pw": password},
            follow_redirects=False,
        )
    finally:
        client.cookies.clear()
    credential = classify_login_response(response, username=username)
    log.info("Logged in as %s", username)
    return credential


def classify_login_response(
    response: httpx.Response,
    username: Optional[str] = None,
) -> AuthCredential:
    """
    Decide how a login attempt ended.

    - a session cookie was set: success
    - the login form came back with "Bad login.": InvalidCredentials
    - anything else (captcha page, redirect without cookie, new layout):
      UnexpectedAuthResponse
    """
    token = response.cookies.get(SESSION_COOKIE)
    if token:
        return AuthCredential(token=token)

    if BAD_LOGIN_MARKER in response.text:
        log.info("Login rejected for %s", username)
        raise InvalidCredentials(username)

    raise UnexpectedAuthResponse(
        f"unrecognised login response (HTTP {response.status_code}) for user {username!r}"
    )
