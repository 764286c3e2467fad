from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

PROGRESS_EVERY = 10

_log = logging.getLogger("rsabench.bench.runner")


def run(
    operation: Callable[[], object],
    iterations: int,
    *,
    name: Optional[str] = None,
    clock: Callable[[], int] = time.perf_counter_ns,
) -> List[int]:
    """Call ``operation`` ``iterations`` times and return per-call durations in ns.

    Calls are strictly sequential; samples are returned in call order. Any setup
    the operation needs must be bound before calling so it stays out of the
    timed region.
    """
    if iterations < 0:
        raise ValueError("iterations must be non-negative")
    label = name or getattr(operation, "__name__", "operation")
    _log.debug("benchmark start: %s, iterations=%d", label, iterations)
    samples: List[int] = []
    for i in range(iterations):
        start = clock()
        operation()
        samples.append(clock() - start)
        if (i + 1) % PROGRESS_EVERY == 0:
            _log.debug("  %s: iteration %d/%d", label, i + 1, iterations)
    return samples
