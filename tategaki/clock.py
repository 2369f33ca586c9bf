import time
from datetime import datetime, timezone


def now_ms() -> int:
    return int(time.time() * 1000)


def from_ms(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
