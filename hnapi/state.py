from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional

from hnapi.models import AuthCredential, Story

log = logging.getLogger(__name__)


def default_state_path() -> Path:
    return Path(os.environ.get("HN_STATE_FILE", Path.home() / ".hn.json"))


@dataclass
class SavedStory:
    id: int
    title: str
    url: Optional[str] = None
    upvote_token: Optional[str] = None


@dataclass
class Auth:
    username: str
    token: str

    def credential(self) -> AuthCredential:
        return AuthCredential(token=self.token)


@dataclass
class State:
    """What the CLI remembers between runs: the last listed stories and the login."""

    last_stories: dict[int, SavedStory] = field(default_factory=dict)
    auth: Optional[Auth] = None

    def remember(self, ranked: list[tuple[int, Story]]) -> None:
        for rank, story in ranked:
            self.last_stories[rank] = SavedStory(
                id=story.id,
                title=story.title,
                url=story.url,
                upvote_token=story.upvote_token,
            )

    def get_last_story(self, index: int) -> Optional[SavedStory]:
        return self.last_stories.get(index)

    def to_json(self) -> str:
        data = {
            "last_stories": {str(rank): asdict(s) for rank, s in self.last_stories.items()},
            "auth": asdict(self.auth) if self.auth else None,
        }
        return json.dumps(data, indent=2)

    @classmethod
    def from_json(cls, text: str) -> "State":
        data = json.loads(text)
        stories = {
            int(rank): SavedStory(**saved)
            for rank, saved in (data.get("last_stories") or {}).items()
        }
        auth = Auth(**data["auth"]) if data.get("auth") else None
        return cls(last_stories=stories, auth=auth)


def read_state(path: Path) -> State:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return State()
    try:
        return State.from_json(text)
    except (ValueError, TypeError, KeyError, AttributeError) as exc:
        log.warning("Unable to read state from %s (%s). Starting from a clean state.", path, exc)
        return State()


def save_state(state: State, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(state.to_json(), encoding="utf-8")
