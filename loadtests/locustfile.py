"""Storefront Load Testing: Locust entry point.

Discovers all user classes from the scenarios package.
Run specific scenarios with Locust's class selection.

Usage:
    # Issue tokens first (prints a shopper and an admin token):
    python src/manage.py seed-demo
    export LOADTEST_SHOPPER_TOKENS=<shopper token> LOADTEST_ADMIN_TOKEN=<admin token>

    # All scenarios (web UI):
    locust -f loadtests/locustfile.py --host http://localhost:8000

    # Stock contention only, headless:
    locust -f loadtests/locustfile.py LastUnitRushUser --headless \
           -u 50 -r 10 -t 60s --host http://localhost:8000 --csv=results/contention
"""

import logging
import time

import requests
from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import data_of, extract_error_detail
from loadtests.scenarios.catalogue import BrowsingUser  # noqa: F401
from loadtests.scenarios.checkout import LastUnitRushUser, ShopperUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Fires globally for all scenarios, no per-task wiring needed.
    Extracts the envelope message so you see "Insufficient stock for X"
    instead of just "400".
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Log a marker when load test begins."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Print the hot product's remaining stock; it must never be negative."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    from loadtests.scenarios.checkout import _hot_product

    if not _hot_product:
        return
    try:
        resp = requests.get(f"{environment.host}/products/{_hot_product['id']}", timeout=5)
        print(f"[LOADTEST] Hot product stock after test: {data_of(resp)['stock']}\n")
    except requests.RequestException as e:
        print(f"[LOADTEST] Could not fetch hot product: {e}\n")
