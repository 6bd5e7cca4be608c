from __future__ import annotations

import argparse
import getpass
import logging
import pydoc
import sys
import webbrowser
from pathlib import Path

import httpx

from hnapi.client import HackerNewsClient
from hnapi.config import ClientConfig
from hnapi.errors import HnApiError, Unauthenticated
from hnapi.format import format_comment, format_story, format_story_details, format_user
from hnapi.models import StoryList
from hnapi.state import Auth, State, default_state_path, read_state, save_state

log = logging.getLogger(__name__)

LIST_COMMANDS = {
    "top": (StoryList.NEWS, "t", "Print top stories (default command)"),
    "new": (StoryList.NEWEST, "n", "Print new stories"),
    "best": (StoryList.BEST, "b", "Print best stories"),
    "ask": (StoryList.ASK, "a", "Print ask stories"),
    "show": (StoryList.SHOW, "s", "Print show stories"),
    "job": (StoryList.JOBS, "j", "Print job stories"),
}
ALIASES = {alias: name for name, (_, alias, _) in LIST_COMMANDS.items()}
ALIASES.update({"d": "details", "o": "open", "u": "user", "l": "login", "v": "upvote"})


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="hn", description="Browse Hacker News from the terminal.")
    parser.add_argument(
        "--state-file",
        type=Path,
        default=None,
        help="Where the last listed stories and the login are kept (default: ~/.hn.json).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log HTTP requests.")
    commands = parser.add_subparsers(dest="command")

    for name, (_, alias, help_text) in LIST_COMMANDS.items():
        sub = commands.add_parser(name, aliases=[alias], help=help_text)
        sub.add_argument("-p", "--page", type=int, default=1, help="Page number")

    for name, alias, help_text in (
        ("details", "d", "Print a story details"),
        ("open", "o", "Open a story's link in the default browser"),
        ("upvote", "v", "Upvote a story"),
    ):
        sub = commands.add_parser(name, aliases=[alias], help=help_text)
        sub.add_argument("index", type=int, metavar="INDEX", help="Story index from the last listing")

    sub = commands.add_parser("user", aliases=["u"], help="Show details about a user")
    sub.add_argument("username", metavar="USER_NAME", help="User name")
    commands.add_parser("login", aliases=["l"], help="Log in and remember the session")
    commands.add_parser("logout", help="Forget the session")

    args = parser.parse_args(argv)
    args.command = ALIASES.get(args.command, args.command) or "top"
    if not hasattr(args, "page"):
        args.page = 1
    return args


def run(args: argparse.Namespace, client: HackerNewsClient, state: State) -> bool:
    """Execute one command. Returns True when the state changed and must be saved."""
    command = args.command
    credential = state.auth.credential() if state.auth else None

    if command in LIST_COMMANDS:
        story_list = LIST_COMMANDS[command][0]
        ranked = client.stories(story_list, page=args.page, credential=credential)
        for rank, story in ranked:
            print(format_story(rank, story))
        state.remember(ranked)
        return True

    if command == "user":
        print(format_user(client.user(args.username)))
        return False

    if command == "login":
        if state.auth:
            print(f"Already signed in as {state.auth.username}.")
            return False
        username = input("Username: ").strip()
        password = getpass.getpass("Password: ")
        login_credential = client.login(username, password)
        state.auth = Auth(username=username, token=login_credential.token)
        print(f"Successfully signed in as {username}.")
        return True

    if command == "logout":
        if state.auth is None:
            print("Not signed in.")
            return False
        state.auth = None
        print("Signed out.")
        return True

    saved = state.get_last_story(args.index)
    if saved is None:
        print("Invalid story index.", file=sys.stderr)
        return False

    if command == "details":
        details = client.story(saved.id, credential=credential)
        parts = [format_story_details(details, client.base_url)]
        parts.extend(format_comment(comment, depth) for depth, comment in details.comments.walk())
        pydoc.pager("\n\n".join(parts))
        return False

    if command == "open":
        if not webbrowser.open(saved.url or f"{client.base_url}/item?id={saved.id}"):
            print("Error while opening the default browser.", file=sys.stderr)
        return False

    if command == "upvote":
        client.upvote(saved.id, saved.upvote_token, credential)
        # a token is good for one vote
        saved.upvote_token = None
        print(f"Upvoted “{saved.title}”.")
        return True

    raise ValueError(f"unknown command {command!r}")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    state_path = args.state_file or default_state_path()
    state = read_state(state_path)

    with HackerNewsClient(ClientConfig.from_env()) as client:
        try:
            changed = run(args, client, state)
        except Unauthenticated as exc:
            # a rejected session is dead, forget it
            if state.auth is not None:
                state.auth = None
                save_state(state, state_path)
            print(f"Error: {exc}. Please log in again.", file=sys.stderr)
            return 1
        except HnApiError as exc:
            log.debug("Command %s failed", args.command, exc_info=True)
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        except httpx.HTTPError as exc:
            print(f"Network error: {exc}", file=sys.stderr)
            return 1

    if changed:
        save_state(state, state_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
