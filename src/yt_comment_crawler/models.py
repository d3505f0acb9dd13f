import copy
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


SORT_BY_POPULAR = 0
SORT_BY_RECENT = 1

HEARTED_STATE = "TOOLBAR_HEART_STATE_HEARTED"


@dataclass(frozen=True)
class Continuation:
    api_url: str  # e.g. "/youtubei/v1/next"
    token: str

    @classmethod
    def from_endpoint(cls, endpoint: Any) -> Optional["Continuation"]:
        """
        Build from a raw InnerTube endpoint/command:
        {"commandMetadata": {"webCommandMetadata": {"apiUrl": ...}},
         "continuationCommand": {"token": ...}}
        Returns None when either field is missing.
        """
        if not isinstance(endpoint, dict):
            return None
        meta = (endpoint.get("commandMetadata") or {}).get("webCommandMetadata") or {}
        api_url = meta.get("apiUrl")
        token = (endpoint.get("continuationCommand") or {}).get("token")
        if not isinstance(api_url, str) or not isinstance(token, str) or not token:
            return None
        return cls(api_url=api_url, token=token)


@dataclass(frozen=True)
class SessionContext:
    api_key: str
    context: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_ytcfg(cls, ytcfg: Dict[str, Any]) -> Optional["SessionContext"]:
        api_key = ytcfg.get("INNERTUBE_API_KEY")
        context = ytcfg.get("INNERTUBE_CONTEXT")
        if not isinstance(api_key, str) or not isinstance(context, dict):
            return None
        return cls(api_key=api_key, context=context)

    def with_language(self, language: Optional[str]) -> "SessionContext":
        if not language:
            return self
        context = copy.deepcopy(self.context)
        context.setdefault("client", {})["hl"] = language
        return SessionContext(api_key=self.api_key, context=context)


@dataclass(frozen=True)
class Comment:
    cid: str
    text: str
    time: str
    author: str
    channel: str
    votes: str
    replies: int
    photo: str
    heart: bool
    reply: bool
    time_parsed: Optional[int] = None
    paid: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        if self.time_parsed is None:
            out.pop("time_parsed")
        if self.paid is None:
            out.pop("paid")
        return out
