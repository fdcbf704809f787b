"""Plain-text helpers for rendering Productive rich-text fields."""

import datetime as _dt
import re

_TAG_RE = re.compile(r"<[^>]*>")
_MENTION_RE = re.compile(r'@\[\{[^}]*"label"\s*:\s*"([^"]+)"[^}]*\}\]')

_ENTITIES = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
)

ELLIPSIS = "..."


def strip_markup(text: str) -> str:
    """Drop HTML tags, decode the common entities and trim."""
    text = _TAG_RE.sub("", text)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text.strip()


def collapse_mentions(text: str) -> str:
    """Replace ``@[{"type":"person",...,"label":"Ann"}]`` with ``@Ann``."""
    return _MENTION_RE.sub(r"@\1", text)


def truncate(text: str, max_length: int) -> str:
    """Cut ``text`` to exactly ``max_length`` characters ending in an ellipsis.

    ``max_length`` of 3 or less is not guarded: the slice bound goes to zero
    or negative, so the result is the ellipsis appended to a (possibly
    empty) head of the text.
    """
    if len(text) <= max_length:
        return text
    return text[: max_length - len(ELLIPSIS)] + ELLIPSIS


def _parse_timestamp(value: str) -> _dt.datetime:
    ts = _dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=_dt.timezone.utc)
    return ts


def relative_age(timestamp: str, now: _dt.datetime | None = None) -> str:
    """Coarse age label: today, N days ago, N weeks ago, 1 month ago, or a date."""
    ts = _parse_timestamp(timestamp)
    now = now or _dt.datetime.now(_dt.timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=_dt.timezone.utc)
    days = int((now - ts).total_seconds() // 86400)

    if days == 0:
        return "today"
    if days == 1:
        return "1 day ago"
    if days < 7:
        return f"{days} days ago"
    if days < 14:
        return "1 week ago"
    if days < 30:
        return f"{days // 7} weeks ago"
    if days < 60:
        return "1 month ago"
    return ts.astimezone().strftime("%x")
