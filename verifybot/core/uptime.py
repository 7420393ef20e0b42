"""Process uptime tracking for /info and the health endpoint."""

import time

PROCESS_STARTED_AT = time.monotonic()


def get_uptime_seconds() -> float:
    """Seconds since this process imported VerifyBot."""
    return time.monotonic() - PROCESS_STARTED_AT
