"""Response error extraction for load test observability.

Every Storefront API error uses the response envelope
``{"success": false, "message": "...", "data": null}``; validation failures
included.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    Gracefully handles unparseable bodies and missing fields.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON, return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if isinstance(body, dict) and "message" in body:
        return str(body["message"])

    # Unknown shape, stringify and truncate
    return str(body)[:300]


def data_of(response: Response) -> dict:
    """Return the ``data`` member of a successful envelope."""
    return response.json()["data"]
