"""Wall clock in epoch milliseconds — the only place the app reads the time for tokens."""

import time

from pizzeria.core.domain_types import EpochMillis


def now_ms() -> EpochMillis:
    return EpochMillis(int(time.time() * 1000))
