"""
Item model for posts read from a feed dump.

Word filters only need an item's text; `Post` is the concrete shape the CLI
reads. Lines of JSON objects (as exported by most feed clients) and plain text
lines are both accepted.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, ValidationError

from .exceptions import ItemError

logger = logging.getLogger(__name__)


class Post(BaseModel):
    """A single text-bearing item from a feed."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    id: int | str | None = None
    author: str | None = None
    text: str


def _parse_json_line(line: str, lineno: int) -> Post:
    try:
        data = json.loads(line)
    except json.JSONDecodeError as exc:
        raise ItemError(f"Line {lineno}: invalid JSON ({exc.msg})") from exc
    if not isinstance(data, dict):
        raise ItemError(f"Line {lineno}: expected a JSON object")
    try:
        return Post.model_validate(data)
    except ValidationError as exc:
        raise ItemError(f"Line {lineno}: not a post ({exc.error_count()} validation errors)") from exc


def load_posts(lines: Iterable[str]) -> Iterator[Post]:
    """
    Turn input lines into posts.

    - Lines starting with `{` are JSON objects with at least a "text" key
    - Any other non-blank line is the text of a post
    - Blank lines are skipped
    """
    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            logger.debug("Skipping blank line %d", lineno)
            continue
        if line.startswith("{"):
            yield _parse_json_line(line, lineno)
        else:
            yield Post(text=line)
