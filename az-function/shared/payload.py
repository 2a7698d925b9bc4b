from dataclasses import dataclass, field
from typing import Any, Dict

OPTIONAL_FIELDS = ("size", "before", "after")


class PayloadError(ValueError):
    pass


@dataclass(frozen=True)
class BridgePayload:
    """Normalized search request forwarded to the bridge.

    Optional fields only appear in ``extras`` when the caller sent them, so an
    omitted field stays omitted upstream while an explicit ``null`` is kept.
    """

    subreddit: str
    query: str
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_body(cls, body: Any) -> "BridgePayload":
        if not isinstance(body, dict):
            raise PayloadError("body is not a JSON object")
        subreddit = body.get("subreddit")
        query = body.get("query")
        if not isinstance(subreddit, str) or not isinstance(query, str):
            raise PayloadError("subreddit and query must be strings")
        # Passed through as-is, no coercion or bounds checks.
        extras = {name: body[name] for name in OPTIONAL_FIELDS if name in body}
        return cls(subreddit=subreddit, query=query, extras=extras)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"subreddit": self.subreddit, "query": self.query}
        data.update(self.extras)
        return data
