"""Response error extraction for load test observability.

Parses Storefront API error responses into human-readable messages.
Handles two response shapes:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "...", "type": "..."}]}
- Storefront errors (403/404/409/422/503): {"error": "OutOfStock", "messages": {"field": ["msg"]}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from requests.exceptions import JSONDecodeError

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a compact error message suitable for Locust failure messages and log lines."""
    try:
        body = response.json()
    except JSONDecodeError:
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if isinstance(body, dict) and isinstance(body.get("detail"), list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    if isinstance(body, dict) and "error" in body:
        messages = body.get("messages") or {}
        if isinstance(messages, dict) and messages:
            details = " | ".join(f"{k}: {'; '.join(map(str, v))}" for k, v in messages.items())
            return f"{body['error']}: {details}"
        return str(body["error"])

    return str(body)[:300]
