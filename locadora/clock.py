import time

MILLIS_PER_DAY = 24 * 60 * 60 * 1000


def now_ms():
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)
