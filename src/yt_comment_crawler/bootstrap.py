import json
import re
from typing import Any, Dict, Optional, Tuple

import httpx

from .config import YOUTUBE_CONSENT_URL
from .http_client import YoutubeHttpClient
from .models import SessionContext
from .utils import regex_search


YT_CFG_RE = r"ytcfg\.set\s*\(\s*({.+?})\s*\)\s*;"
YT_INITIAL_DATA_RE = (
    r"(?:window\s*\[\s*[\"']ytInitialData[\"']\s*\]|ytInitialData)\s*=\s*({.+?})\s*;\s*(?:var\s+meta|</script|\n)"
)
YT_HIDDEN_INPUT_RE = (
    r'<input\s+type="hidden"\s+name="([A-Za-z0-9_]+)"\s+value="([A-Za-z0-9_\-\.]*)"\s*(?:required|)\s*>'
)


def extract_consent_params(html: str) -> Dict[str, str]:
    return dict(re.findall(YT_HIDDEN_INPUT_RE, html))


def _load_blob(html: str, pattern: str) -> Optional[Any]:
    raw = regex_search(html, pattern, default="")
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return None


def parse_bootstrap(html: str, language: Optional[str] = None, log_callback=None) -> Optional[Tuple[SessionContext, dict]]:
    """Pull (session context, ytInitialData) out of a watch page. None on any failure."""
    log = log_callback or (lambda msg, lvl="info": None)

    ytcfg = _load_blob(html, YT_CFG_RE)
    session = SessionContext.from_ytcfg(ytcfg) if isinstance(ytcfg, dict) else None
    if session is None:
        log("unable to extract youtube configuration", "error")
        return None

    data = _load_blob(html, YT_INITIAL_DATA_RE)
    if not isinstance(data, dict):
        log("unable to extract initial data", "error")
        return None

    return session.with_language(language), data


async def resolve_bootstrap(
    client: YoutubeHttpClient,
    youtube_url: str,
    language: Optional[str] = None,
    log_callback=None,
) -> Optional[Tuple[SessionContext, dict]]:
    log = log_callback or (lambda msg, lvl="info": None)
    try:
        resp = await client.get(youtube_url)
        params: Dict[str, Any] = extract_consent_params(resp.text) if "consent" in str(resp.url) else {}
        if params:
            # Redirected to the cookie consent form; accept it and use the page it returns.
            log("consent page detected, submitting consent form", "warning")
            params.update({"continue": youtube_url, "set_eom": "false", "set_ytc": "true", "set_apyt": "true"})
            resp = await client.post(YOUTUBE_CONSENT_URL, params=params)
    except httpx.HTTPError as e:
        log(f"failed to fetch page {youtube_url}: {e}", "error")
        return None

    return parse_bootstrap(resp.text, language=language, log_callback=log)
