import asyncio
from collections import deque
from typing import Any, AsyncIterator, Deque, Dict, Iterable, Optional

import httpx

from .bootstrap import resolve_bootstrap
from .config import PAGE_SLEEP, YOUTUBE_VIDEO_URL
from .errors import ServerError
from .http_client import YoutubeHttpClient
from .models import SORT_BY_RECENT, Comment, Continuation, SessionContext
from .normalizer import normalize_comment
from .sorting import comments_enabled, resolve_sort_continuation
from .utils import first, search_dict


COMMENT_SECTION_TARGETS = (
    "comments-section",
    "engagement-panel-comments-section",
    "shorts-engagement-panel-comments-section",
)
REPLIES_TARGET_PREFIX = "comment-replies-item"


def _continuations(endpoints: Iterable[Any]):
    for endpoint in endpoints:
        continuation = Continuation.from_endpoint(endpoint)
        if continuation is not None:
            yield continuation


def enqueue_continuations(response: dict, queue: Deque[Continuation]) -> None:
    """
    Route the continuations found in one response:
    - comment section pages go to the front (batch keeps its order)
    - "show more replies" buttons go to the back
    """
    actions = list(search_dict(response, "reloadContinuationItemsCommand")) + list(
        search_dict(response, "appendContinuationItemsAction")
    )
    for action in actions:
        target_id = action.get("targetId") or ""
        for item in action.get("continuationItems") or []:
            if target_id in COMMENT_SECTION_TARGETS:
                batch = list(_continuations(search_dict(item, "continuationEndpoint")))
                queue.extendleft(reversed(batch))
            if target_id.startswith(REPLIES_TARGET_PREFIX) and "continuationItemRenderer" in item:
                button = first(search_dict(item, "buttonRenderer")) or {}
                queue.extend(_continuations([button.get("command")]))


def extract_payments(response: dict) -> Dict[str, str]:
    """Paid-promotion chips keyed by surface key, plus the same text keyed by comment id."""
    payments: Dict[str, str] = {}
    for payload in search_dict(response, "commentSurfaceEntityPayload"):
        if "pdgCommentChip" in payload:
            payments[payload.get("key")] = first(search_dict(payload, "simpleText"), "")

    if payments:
        surface_keys: Dict[str, str] = {}
        for vm in search_dict(response, "commentViewModel"):
            vm = (vm or {}).get("commentViewModel") or {}
            if vm.get("commentSurfaceKey") and vm.get("commentId"):
                surface_keys[vm["commentSurfaceKey"]] = vm["commentId"]
        payments.update({surface_keys[key]: text for key, text in payments.items() if key in surface_keys})
    return payments


def extract_toolbar_states(response: dict) -> Dict[str, Dict[str, Any]]:
    return {payload.get("key"): payload for payload in search_dict(response, "engagementToolbarStateEntityPayload")}


class CommentPaginator:
    """
    Drains a queue of continuation tokens against the InnerTube endpoint,
    one POST at a time, yielding normalized comments as pages arrive.
    """

    def __init__(
        self,
        client: YoutubeHttpClient,
        session: SessionContext,
        start: Continuation,
        *,
        sleep: float = PAGE_SLEEP,
        log_callback=None,
    ):
        self.client = client
        self.session = session
        self.sleep = float(sleep)
        self.queue: Deque[Continuation] = deque([start])
        self.pages_fetched = 0
        self._log = log_callback or (lambda msg, lvl="info": None)

    def process_page(self, response: dict) -> Iterable[Comment]:
        error = first(search_dict(response, "externalErrorMessage"))
        if error:
            raise ServerError(str(error))

        enqueue_continuations(response, self.queue)
        payments = extract_payments(response)
        toolbar_states = extract_toolbar_states(response)

        # search_dict walks lists back to front; reversing restores display order.
        for payload in reversed(list(search_dict(response, "commentEntityPayload"))):
            if not isinstance(payload, dict) or not isinstance(payload.get("properties"), dict):
                self._log("skipping malformed comment payload", "warning")
                continue
            if not payload["properties"].get("commentId"):
                self._log("skipping comment payload without commentId", "warning")
                continue
            yield normalize_comment(payload, toolbar_states, payments)

    async def __aiter__(self) -> AsyncIterator[Comment]:
        while self.queue:
            continuation = self.queue.popleft()
            response = await self.client.ajax_request(continuation, self.session)
            if not response:
                break
            self.pages_fetched += 1

            for comment in self.process_page(response):
                yield comment

            await asyncio.sleep(self.sleep)


class YoutubeCommentDownloader:
    """
    Download YouTube comments without the official Data API.

        async with YoutubeCommentDownloader() as downloader:
            async for comment in downloader.get_comments("dQw4w9WgXcQ"):
                ...
    """

    def __init__(
        self,
        *,
        proxy: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        log_callback=None,
        **client_options,
    ):
        self._log = log_callback or (lambda msg, lvl="info": None)
        self.client = YoutubeHttpClient(
            proxy=proxy,
            transport=transport,
            log_callback=self._log,
            **client_options,
        )

    async def close(self):
        await self.client.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    def get_comments(
        self,
        youtube_id: str,
        sort_by: int = SORT_BY_RECENT,
        language: Optional[str] = None,
        sleep: float = PAGE_SLEEP,
    ) -> AsyncIterator[Comment]:
        return self.get_comments_from_url(
            YOUTUBE_VIDEO_URL.format(youtube_id=youtube_id), sort_by=sort_by, language=language, sleep=sleep
        )

    async def get_comments_from_url(
        self,
        youtube_url: str,
        sort_by: int = SORT_BY_RECENT,
        language: Optional[str] = None,
        sleep: float = PAGE_SLEEP,
    ) -> AsyncIterator[Comment]:
        bootstrap = await resolve_bootstrap(self.client, youtube_url, language=language, log_callback=self._log)
        if bootstrap is None:
            return
        session, data = bootstrap

        if not comments_enabled(data):
            self._log(f"comments disabled for {youtube_url}", "warning")
            return

        start = await resolve_sort_continuation(self.client, session, data, sort_by, log_callback=self._log)
        paginator = CommentPaginator(self.client, session, start, sleep=sleep, log_callback=self._log)
        async for comment in paginator:
            yield comment
