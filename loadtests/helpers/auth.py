"""Bearer tokens for load test users.

The API has no sign-up endpoint, so tokens are issued out of band
(``python src/manage.py seed-demo``) and passed in through the environment:

    LOADTEST_SHOPPER_TOKENS   comma-separated shopper tokens
    LOADTEST_ADMIN_TOKEN      one admin token
"""

import itertools
import os

_shopper_tokens = [token.strip() for token in os.environ.get("LOADTEST_SHOPPER_TOKENS", "").split(",") if token]
_next_shopper = itertools.cycle(_shopper_tokens) if _shopper_tokens else None


def shopper_headers() -> dict[str, str]:
    """Headers for the next shopper token, round-robin across Locust users."""
    if _next_shopper is None:
        raise RuntimeError("Set LOADTEST_SHOPPER_TOKENS to one or more shopper bearer tokens")
    return {"Authorization": f"Bearer {next(_next_shopper)}"}


def admin_headers() -> dict[str, str]:
    token = os.environ.get("LOADTEST_ADMIN_TOKEN")
    if not token:
        raise RuntimeError("Set LOADTEST_ADMIN_TOKEN to an admin bearer token")
    return {"Authorization": f"Bearer {token}"}
