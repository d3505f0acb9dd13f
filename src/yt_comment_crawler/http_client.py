import asyncio
from typing import Any, Dict, Optional

import httpx

from .config import AJAX_RETRIES, AJAX_RETRY_SLEEP, REQUEST_TIMEOUT, YOUTUBE_BASE_URL
from .models import Continuation, SessionContext


USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/79.0.3945.130 Safari/537.36"
)

# Pre-accepts the cookie banner for most EU locales.
CONSENT_COOKIE = {"CONSENT": "YES+cb"}


class YoutubeHttpClient:
    """
    Owns the httpx client used by one downloader instance:
    - GET/POST for the watch page and the consent form
    - ajax_request() for InnerTube continuation POSTs (retry + backoff)
    """

    def __init__(
        self,
        *,
        proxy: Optional[str] = None,
        timeout: float = REQUEST_TIMEOUT,
        retries: int = AJAX_RETRIES,
        retry_sleep: float = AJAX_RETRY_SLEEP,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        log_callback=None,
    ):
        self._log = log_callback or (lambda msg, lvl="info": None)
        self.retries = int(retries)
        self.retry_sleep = float(retry_sleep)
        self.client = httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            cookies=CONSENT_COOKIE,
            timeout=timeout,
            follow_redirects=True,
            proxy=proxy or None,
            transport=transport,
        )

    async def close(self):
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def get(self, url: str) -> httpx.Response:
        return await self.client.get(url)

    async def post(self, url: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        return await self.client.post(url, params=params)

    async def ajax_request(
        self,
        continuation: Continuation,
        session: SessionContext,
        retries: Optional[int] = None,
        sleep: Optional[float] = None,
    ) -> Optional[dict]:
        """
        POST one continuation token. Returns the decoded JSON, or None when
        the server refuses (403/413) or every attempt failed.
        """
        retries = self.retries if retries is None else retries
        sleep = self.retry_sleep if sleep is None else sleep
        url = f"{YOUTUBE_BASE_URL}{continuation.api_url}"
        body = {"context": session.context, "continuation": continuation.token}

        for attempt in range(retries):
            try:
                resp = await self.client.post(url, params={"key": session.api_key}, json=body)
                if resp.is_success:
                    return resp.json()
                if resp.status_code in (403, 413):
                    self._log(f"http {resp.status_code}: {url[:120]}, giving up", "warning")
                    return None
                self._log(f"http {resp.status_code}: {url[:120]} (attempt {attempt + 1}/{retries})", "warning")
            except httpx.TimeoutException:
                self._log(f"timeout: {url[:120]} (attempt {attempt + 1}/{retries})", "warning")
            except (httpx.TransportError, ValueError) as e:
                self._log(f"request error: {e} (attempt {attempt + 1}/{retries})", "error")

            if attempt < retries - 1:
                await asyncio.sleep(sleep)
        return None
