from typing import Any, List

from .errors import SortingError
from .http_client import YoutubeHttpClient
from .models import Continuation, SessionContext
from .utils import first, search_dict


def comments_enabled(data: Any) -> bool:
    item_section = first(search_dict(data, "itemSectionRenderer"))
    if not item_section:
        return False
    return bool(first(search_dict(item_section, "continuationItemRenderer")))


def find_sort_menu(data: Any) -> List[dict]:
    menu = first(search_dict(data, "sortFilterSubMenuRenderer"))
    if not isinstance(menu, dict):
        return []
    return menu.get("subMenuItems") or []


def pick_sort_continuation(sort_menu: List[dict], sort_by: int) -> Continuation:
    if not sort_menu or sort_by < 0 or sort_by >= len(sort_menu):
        raise SortingError("Failed to set sorting")
    continuation = Continuation.from_endpoint(sort_menu[sort_by].get("serviceEndpoint"))
    if continuation is None:
        raise SortingError("Failed to set sorting")
    return continuation


async def resolve_sort_continuation(
    client: YoutubeHttpClient,
    session: SessionContext,
    data: Any,
    sort_by: int,
    log_callback=None,
) -> Continuation:
    log = log_callback or (lambda msg, lvl="info": None)

    sort_menu = find_sort_menu(data)
    if not sort_menu:
        # No sort menu in the page (community posts); it arrives with the first section page.
        log("no sort menu in initial data, requesting first section page")
        section_list = first(search_dict(data, "sectionListRenderer")) or {}
        endpoint = first(search_dict(section_list, "continuationEndpoint"))
        continuation = Continuation.from_endpoint(endpoint)
        if continuation is not None:
            sort_menu = find_sort_menu(await client.ajax_request(continuation, session) or {})

    return pick_sort_continuation(sort_menu, sort_by)
