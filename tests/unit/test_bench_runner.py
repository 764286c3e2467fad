import logging

import pytest

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("n", [0, 1, 5, 17])
def test_run_returns_exactly_n_samples(n: int):
    from rsabench.bench.runner import run

    calls = []
    samples = run(lambda: calls.append(1), n)
    assert len(samples) == n
    assert len(calls) == n
    assert all(s >= 0 for s in samples)


def test_run_samples_in_call_order_with_injected_clock():
    from rsabench.bench.runner import run

    ticks = iter([0, 5, 10, 12, 100, 130])
    samples = run(lambda: None, 3, clock=lambda: next(ticks))
    assert samples == [5, 2, 30]


def test_run_rejects_negative_iterations():
    from rsabench.bench.runner import run

    with pytest.raises(ValueError):
        run(lambda: None, -1)


def test_run_logs_progress_every_ten(caplog: pytest.LogCaptureFixture):
    from rsabench.bench.runner import run

    with caplog.at_level(logging.DEBUG, logger="rsabench.bench.runner"):
        run(lambda: None, 25, name="noop")
    progress = [r for r in caplog.records if "iteration " in r.getMessage()]
    assert [r.getMessage().strip() for r in progress] == [
        "noop: iteration 10/25",
        "noop: iteration 20/25",
    ]


def test_run_propagates_operation_errors():
    from rsabench.bench.runner import run

    def boom() -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        run(boom, 3)
