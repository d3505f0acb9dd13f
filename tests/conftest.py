"""Offline fixtures: a fake watch page and InnerTube responses served through httpx.MockTransport."""

import asyncio
import json
from typing import Dict, List, Optional

import httpx

from yt_comment_crawler.comment_downloader import YoutubeCommentDownloader


NEXT_API = "/youtubei/v1/next"
WATCH_URL = "https://www.youtube.com/watch?v=abcdefghijk"


def endpoint(token: str, api_url: str = NEXT_API) -> dict:
    return {
        "clickTrackingParams": "ct",
        "commandMetadata": {"webCommandMetadata": {"sendPost": True, "apiUrl": api_url}},
        "continuationCommand": {"token": token, "request": "CONTINUATION_REQUEST_TYPE_WATCH_NEXT"},
    }


def sort_menu(*tokens: str) -> dict:
    return {
        "sortFilterSubMenuRenderer": {
            "subMenuItems": [{"title": f"sort {i}", "serviceEndpoint": endpoint(t)} for i, t in enumerate(tokens)]
        }
    }


def initial_data(with_comments: bool = True, menu: Optional[dict] = None) -> dict:
    section: dict = {"sectionIdentifier": "comment-item-section", "contents": []}
    if with_comments:
        section["contents"].append({"continuationItemRenderer": {"continuationEndpoint": endpoint("section-0")}})
    data = {
        "contents": {
            "twoColumnWatchNextResults": {
                "results": {"results": {"contents": [{"itemSectionRenderer": section}]}}
            }
        }
    }
    if menu is not None:
        data["engagementPanels"] = [{"engagementPanelSectionListRenderer": {"header": menu}}]
    return data


def watch_html(api_key: str = "K", data: Optional[dict] = None) -> str:
    ytcfg = {"INNERTUBE_API_KEY": api_key, "INNERTUBE_CONTEXT": {"client": {"hl": "en", "clientName": "WEB"}}}
    data = initial_data(menu=sort_menu("top", "new")) if data is None else data
    return (
        "<html><head><script>ytcfg.set(" + json.dumps(ytcfg) + ");</script></head>"
        "<body><script>var ytInitialData = " + json.dumps(data) + ";</script></body></html>"
    )


def comment_payload(
    cid: str,
    author: str = "Alice",
    text: str = "hello",
    published: str = "",
    likes: Optional[str] = None,
    replies: Optional[str] = None,
    toolbar_key: str = "",
) -> dict:
    toolbar: dict = {}
    if likes is not None:
        toolbar["likeCountNotliked"] = likes
    if replies is not None:
        toolbar["replyCount"] = replies
    return {
        "key": f"entity-{cid}",
        "properties": {
            "commentId": cid,
            "content": {"content": text},
            "publishedTime": published,
            "toolbarStateKey": toolbar_key,
        },
        "author": {
            "displayName": author,
            "channelId": f"UC-{author}",
            "avatarThumbnailUrl": f"https://yt3.ggpht.com/{author}.jpg",
        },
        "toolbar": toolbar,
    }


def page_response(
    comments: List[dict] = (),
    actions: List[dict] = (),
    extra_mutations: List[dict] = (),
) -> dict:
    mutations = [{"payload": {"commentEntityPayload": c}} for c in comments]
    mutations += [{"payload": m} for m in extra_mutations]
    return {
        "onResponseReceivedEndpoints": list(actions),
        "frameworkUpdates": {"entityBatchUpdate": {"mutations": mutations}},
    }


def append_action(target_id: str, items: List[dict]) -> dict:
    return {"appendContinuationItemsAction": {"targetId": target_id, "continuationItems": items}}


def reload_action(target_id: str, items: List[dict]) -> dict:
    return {"reloadContinuationItemsCommand": {"targetId": target_id, "continuationItems": items}}


class FakeYoutube:
    """Routes GETs to canned HTML and InnerTube POSTs to responses keyed by token."""

    def __init__(
        self,
        html: Optional[str] = None,
        pages: Optional[Dict[str, object]] = None,
    ):
        self.html = watch_html() if html is None else html
        self.pages: Dict[str, object] = pages or {}
        self.posted_tokens: List[str] = []
        self.posted_bodies: List[dict] = []
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET":
            return httpx.Response(200, text=self.html)

        body = json.loads(request.content)
        token = body["continuation"]
        self.posted_tokens.append(token)
        self.posted_bodies.append(body)
        page = self.pages.get(token)
        if page is None:
            return httpx.Response(403)
        if callable(page):
            return page(request)
        if isinstance(page, httpx.Response):
            return page
        return httpx.Response(200, json=page)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def downloader(self, **kwargs) -> YoutubeCommentDownloader:
        kwargs.setdefault("retry_sleep", 0)
        return YoutubeCommentDownloader(transport=self.transport, **kwargs)


def run(coro):
    return asyncio.run(coro)


async def collect(fake: FakeYoutube, url: str = WATCH_URL, limit: int = 0, **kwargs) -> list:
    kwargs.setdefault("sleep", 0)
    out = []
    async with fake.downloader() as downloader:
        stream = downloader.get_comments_from_url(url, **kwargs)
        async for comment in stream:
            out.append(comment)
            if limit and len(out) >= limit:
                await stream.aclose()
                break
    return out

