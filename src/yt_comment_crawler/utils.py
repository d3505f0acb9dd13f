import re
from typing import Any, Iterator, Optional, Pattern, Union
from urllib.parse import parse_qs, urlparse


def search_dict(partial: Any, search_key: str) -> Iterator[Any]:
    """
    Yield every value bound to `search_key` in a nested dict/list tree.

    Stack based: siblings come out last-in-first-out, so a list is walked
    back to front. A matched value is yielded but not searched further.
    """
    stack = [partial]
    while stack:
        current_item = stack.pop()
        if isinstance(current_item, dict):
            for key, value in current_item.items():
                if key == search_key:
                    yield value
                else:
                    stack.append(value)
        elif isinstance(current_item, list):
            stack.extend(current_item)


def first(iterator: Iterator[Any], default: Any = None) -> Any:
    return next(iterator, default)


def regex_search(
    text: str,
    pattern: Union[str, Pattern[str]],
    group: int = 1,
    default: Optional[str] = None,
) -> Optional[str]:
    match = re.search(pattern, text)
    if match and match.group(group):
        return match.group(group)
    return default


def extract_video_id(url: str) -> str:
    """
    Pull the 11-char video id out of watch/shorts/embed/live/youtu.be URLs.
    A bare id is returned as-is; anything else gives "".
    """
    if not url:
        return ""
    url = url.strip()
    if re.fullmatch(r"[A-Za-z0-9_-]{11}", url):
        return url
    if not url.startswith("http"):
        url = f"https://{url}"

    parsed = urlparse(url)
    if parsed.hostname == "youtu.be":
        return parsed.path.lstrip("/").split("/")[0]

    qs = parse_qs(parsed.query)
    if "v" in qs:
        return qs["v"][0]

    return regex_search(parsed.path, r"/(?:shorts|embed|live|v)/([A-Za-z0-9_-]{11})", default="") or ""
