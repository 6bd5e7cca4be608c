import unittest

import httpx

import context  # noqa: F401
import pages

from hnapi.errors import InvalidToken, Unauthenticated, UnexpectedVoteResponse
from hnapi.models import AuthCredential
from hnapi.vote import classify_vote_response, upvote

BASE_URL = "https://news.example.test"
CREDENTIAL = AuthCredential(token="alice&abc123")


class Recorder:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return self.responses.pop(0)

    def client(self):
        return httpx.Client(transport=httpx.MockTransport(self))


def response(status=200, text="", **headers):
    return httpx.Response(status, text=text, headers=headers)


class TestUpvote(unittest.TestCase):
    def test_redirect_back_is_success(self):
        recorder = Recorder(response(302, location="item?id=42"))

        with recorder.client() as client:
            assert upvote(client, 42, "tok", CREDENTIAL, base_url=BASE_URL) is True

        [request] = recorder.requests
        assert request.url.path == "/vote"
        assert dict(request.url.params) == {
            "id": "42",
            "how": "up",
            "auth": "tok",
            "goto": "item?id=42",
        }
        assert request.headers["Cookie"] == "user=alice&abc123"

    def test_rendered_page_without_error_is_success(self):
        page = pages.item_page(header=pages.story_rows(42))
        recorder = Recorder(response(200, page))

        with recorder.client() as client:
            assert upvote(client, 42, "tok", CREDENTIAL, base_url=BASE_URL) is True

    def test_missing_credential_is_unauthenticated(self):
        recorder = Recorder()

        with recorder.client() as client:
            with self.assertRaises(Unauthenticated):
                upvote(client, 42, "tok", None, base_url=BASE_URL)

        assert recorder.requests == []

    def test_missing_token_is_invalid_token(self):
        recorder = Recorder()

        with recorder.client() as client:
            for token in (None, ""):
                with self.assertRaises(InvalidToken) as ctx:
                    upvote(client, 42, token, CREDENTIAL, base_url=BASE_URL)
                assert ctx.exception.story_id == 42

        assert recorder.requests == []

    def test_stale_token_fails_on_second_attempt_without_retry(self):
        recorder = Recorder(
            response(302, location="item?id=42"),
            response(200, "Unknown or expired link."),
        )

        with recorder.client() as client:
            assert upvote(client, 42, "tok", CREDENTIAL, base_url=BASE_URL) is True
            with self.assertRaises(InvalidToken):
                upvote(client, 42, "tok", CREDENTIAL, base_url=BASE_URL)

        assert len(recorder.requests) == 2

    def test_cannot_make_that_vote(self):
        recorder = Recorder(response(200, "Can't make that vote."))

        with recorder.client() as client:
            with self.assertRaises(InvalidToken):
                upvote(client, 42, "tok", CREDENTIAL, base_url=BASE_URL)

    def test_login_form_means_credential_rejected(self):
        recorder = Recorder(response(200, pages.LOGIN_TO_VOTE))

        with recorder.client() as client:
            with self.assertRaises(Unauthenticated):
                upvote(client, 42, "tok", CREDENTIAL, base_url=BASE_URL)

    def test_redirect_to_login_means_credential_rejected(self):
        request = httpx.Request("GET", f"{BASE_URL}/vote")
        redirect = httpx.Response(302, headers={"Location": "login?goto=news"}, request=request)

        with self.assertRaises(Unauthenticated):
            classify_vote_response(redirect, 42)

    def test_absolute_redirect_back_is_success(self):
        request = httpx.Request("GET", f"{BASE_URL}/vote")
        redirect = httpx.Response(302, headers={"Location": f"{BASE_URL}/item?id=42"}, request=request)

        assert classify_vote_response(redirect, 42) is True

    def test_redirect_elsewhere_is_unexpected(self):
        request = httpx.Request("GET", f"{BASE_URL}/vote")

        for location in ("https://evil.example/item?id=42", "x?fnid=abc", "news", "item?id=43", ""):
            redirect = httpx.Response(302, headers={"Location": location}, request=request)
            with self.assertRaises(UnexpectedVoteResponse) as ctx:
                classify_vote_response(redirect, 42)
            assert ctx.exception.story_id == 42

    def test_server_error_is_unexpected(self):
        recorder = Recorder(response(503, "Sorry."))

        with recorder.client() as client:
            with self.assertRaises(UnexpectedVoteResponse):
                upvote(client, 42, "tok", CREDENTIAL, base_url=BASE_URL)

    def test_unrecognised_page_is_never_success(self):
        recorder = Recorder(response(200, "<html><body>Something new</body></html>"))

        with recorder.client() as client:
            with self.assertRaises(UnexpectedVoteResponse) as ctx:
                upvote(client, 42, "tok", CREDENTIAL, base_url=BASE_URL)

        assert ctx.exception.story_id == 42


if __name__ == "__main__":
    unittest.main()
