"""Human-facing order numbers.

``ORD`` + UTC timestamp to the millisecond + six random hex digits. The
orders table carries a unique constraint, and the store regenerates the
number when an insert collides.
"""

import secrets
from datetime import UTC, datetime

ORDER_NUMBER_PREFIX = "ORD"


def generate_order_number(now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    stamp = now.strftime("%Y%m%d%H%M%S") + f"{now.microsecond // 1000:03d}"
    return f"{ORDER_NUMBER_PREFIX}{stamp}{secrets.token_hex(3).upper()}"
