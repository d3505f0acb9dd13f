from datetime import datetime
from typing import Any, Dict, Optional

import dateparser

from .models import HEARTED_STATE, Comment
from .utils import regex_search


def parse_relative_time(text: str, now: Optional[datetime] = None) -> Optional[int]:
    """
    "2 hours ago (edited)" -> epoch seconds, relative to `now` when given.
    Returns None when dateparser can't make sense of it.
    """
    text = (text or "").split("(")[0].strip()
    if not text:
        return None
    settings = {"RELATIVE_BASE": now} if now is not None else None
    try:
        parsed = dateparser.parse(text, settings=settings)
    except Exception:
        return None
    if parsed is None:
        return None
    return int(parsed.timestamp())


def _count(value: Any) -> int:
    digits = regex_search(str(value or ""), r"^\s*(\d+)", default="0")
    return int(digits)


def normalize_comment(
    payload: Dict[str, Any],
    toolbar_states: Dict[str, Dict[str, Any]],
    payments: Dict[str, str],
    now: Optional[datetime] = None,
) -> Comment:
    properties = payload.get("properties") or {}
    author = payload.get("author") or {}
    toolbar = payload.get("toolbar") or {}
    toolbar_state = toolbar_states.get(properties.get("toolbarStateKey")) or {}

    cid = properties.get("commentId") or ""
    time_text = properties.get("publishedTime") or ""

    return Comment(
        cid=cid,
        text=(properties.get("content") or {}).get("content") or "",
        time=time_text,
        author=author.get("displayName") or "",
        channel=author.get("channelId") or "",
        votes=str(toolbar.get("likeCountNotliked") or "").strip() or "0",
        replies=_count(toolbar.get("replyCount")),
        photo=author.get("avatarThumbnailUrl") or "",
        heart=toolbar_state.get("heartState") == HEARTED_STATE,
        reply="." in cid,
        time_parsed=parse_relative_time(time_text, now=now),
        paid=payments.get(cid),
    )
