from __future__ import annotations

import textwrap

from hnapi.markup import plain_text
from hnapi.models import Comment, Story, StoryDetails, User

WIDTH = 80


def format_story(rank: int, story: Story) -> str:
    site = f" ({story.url_displayed})" if story.url_displayed else ""
    return f"{rank:2}. ▲ {story.title}{site}\n      {_second_line(story)}"


def format_story_details(details: StoryDetails, base_url: str) -> str:
    story = details.story
    lines = [f"▲ {story.title}", f"  {_second_line(story)}"]
    lines.append(f"  ↳ {story.url or story.item_url(base_url)}")
    if details.html_content:
        lines.append("")
        lines.append(format_text(details.html_content))
    return "\n".join(lines)


def format_comment(comment: Comment, level: int = 0) -> str:
    header = f"{comment.user or '[deleted]'} {comment.posted_ago}".strip()
    return f"{indent(header, level)}\n{format_text(comment.html_content, level)}"


def format_user(user: User) -> str:
    about = format_text(user.about or "").replace("\n", "\n         ")
    return (
        f"user:    {user.id}\n"
        f"created: {user.created:%B} {user.created.day}, {user.created.year}\n"
        f"karma:   {user.karma}\n"
        f"about:   {about}\n"
    )


def indent(text: str, level: int) -> str:
    return "\n".join("  " * level + line for line in text.splitlines())


def format_text(markup: str, level: int = 0) -> str:
    """Render a comment or story body as wrapped plain text."""
    width = max(WIDTH - level * 2, 20)
    paragraphs = [
        textwrap.fill(p.strip(), width) for p in plain_text(markup).split("\n\n") if p.strip()
    ]
    return indent("\n\n".join(paragraphs), level)


def _second_line(story: Story) -> str:
    by = f" by {story.user}" if story.user else ""
    return f"{story.score or 0} points{by} {story.posted_ago} | {story.comment_count or 0} comments"
