import math

import pytest
from pydantic import ValidationError

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("value,count", [(1500, 1), (42, 7), (0, 3), (123456789, 100)])
def test_constant_samples(value: int, count: int):
    from rsabench.bench.stats import summarize

    s = summarize([value] * count)
    assert s.mean == value
    assert s.std_dev == 0
    assert s.min == value
    assert s.max == value
    assert s.total == value * count
    assert s.count == count


def test_population_standard_deviation():
    from rsabench.bench.stats import summarize

    s = summarize([2, 4, 4, 4, 5, 5, 7, 9])
    assert s.mean == 5
    # population variance is 4; the sample variance would be 32/7
    assert math.isclose(s.std_dev, 2.0)
    assert s.min == 2
    assert s.max == 9
    assert s.total == 40


def test_min_max_any_order():
    from rsabench.bench.stats import summarize

    s = summarize([30, 10, 50, 20])
    assert (s.min, s.max) == (10, 50)


def test_empty_sample_set_raises():
    from rsabench.bench.stats import summarize
    from rsabench.core.errors import EmptySampleSetError

    with pytest.raises(EmptySampleSetError):
        summarize([])
    assert issubclass(EmptySampleSetError, ValueError)


def test_summary_is_frozen():
    from rsabench.bench.stats import summarize

    s = summarize([1, 2, 3])
    with pytest.raises(ValidationError):
        s.mean = 0  # type: ignore[misc]
