import time


def get_current_timestamp() -> int:
    """Wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)
