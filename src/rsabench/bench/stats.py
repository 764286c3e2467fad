from __future__ import annotations

import math
from typing import Sequence

from pydantic import BaseModel

from rsabench.core.errors import EmptySampleSetError


class StatSummary(BaseModel):
    """Summary of a benchmark run; every duration field is in nanoseconds."""

    model_config = {"frozen": True}

    mean: float
    std_dev: float
    min: float
    max: float
    total: float
    count: int


def summarize(samples: Sequence[float]) -> StatSummary:
    if len(samples) == 0:
        raise EmptySampleSetError("cannot summarize an empty sample set")
    values = [float(s) for s in samples]
    count = len(values)
    total = 0.0
    for v in values:
        total += v
    mean = total / count

    # population variance: divide by count, not count - 1
    variance = 0.0
    for v in values:
        variance += (v - mean) * (v - mean)
    variance /= count

    lo = hi = values[0]
    for v in values:
        if v < lo:
            lo = v
        if v > hi:
            hi = v

    return StatSummary(
        mean=mean,
        std_dev=math.sqrt(variance),
        min=lo,
        max=hi,
        total=total,
        count=count,
    )
