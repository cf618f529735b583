import pytest

from solprobe.models import Evaluation, NodeHealthSnapshot
from solprobe.scheduler import RefreshScheduler
from solprobe.state import ApplicationState


class CountingEvaluator:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> Evaluation:
        self.calls += 1
        return Evaluation(node_health=NodeHealthSnapshot(is_responsive=True, current_slot=self.calls))


@pytest.fixture
def evaluator():
    return CountingEvaluator()


@pytest.fixture
def scheduler(evaluator, clock):
    return RefreshScheduler(evaluator, interval=5, clock=clock)


def test_first_tick_runs_immediately(scheduler, evaluator):
    state = ApplicationState()

    assert scheduler.is_due()
    assert scheduler.tick(state) is True
    assert evaluator.calls == 1
    assert state.node_health.current_slot == 1
    assert scheduler.refreshed_at is not None


def test_tick_waits_for_full_interval(scheduler, evaluator, clock):
    state = ApplicationState()
    scheduler.tick(state)

    clock.advance(4.5)
    assert scheduler.tick(state) is False
    assert scheduler.seconds_until_due() == pytest.approx(0.5)

    clock.advance(0.5)
    assert scheduler.tick(state) is True
    assert evaluator.calls == 2


def test_manual_refresh_resets_cadence(scheduler, evaluator, clock):
    state = ApplicationState()
    scheduler.tick(state)

    clock.advance(4.0)
    scheduler.refresh_now(state)
    assert evaluator.calls == 2

    clock.advance(2)
    assert scheduler.tick(state) is False
    clock.advance(2.5)
    assert scheduler.tick(state) is False
    clock.advance(0.5)
    assert scheduler.tick(state) is True
    assert evaluator.calls == 3


def test_complete_applies_a_separately_computed_evaluation(scheduler, clock):
    state = ApplicationState()
    evaluation = scheduler.evaluate()

    assert state.node_health.current_slot is None
    scheduler.complete(state, evaluation)

    assert state.node_health.current_slot == 1
    assert scheduler.refresh_count == 1
    assert not scheduler.is_due()


def test_refresh_overwrites_previous_values(clock):
    results = iter(
        [
            Evaluation(node_health=NodeHealthSnapshot(is_responsive=True, version="1.14.0")),
            Evaluation(),
        ]
    )
    scheduler = RefreshScheduler(lambda: next(results), interval=1, clock=clock)
    state = ApplicationState()

    scheduler.tick(state)
    assert state.node_health.version == "1.14.0"

    clock.advance(1)
    scheduler.tick(state)
    assert state.node_health.version is None
    assert state.node_health.is_responsive is False


@pytest.mark.parametrize("interval", [0, -1])
def test_rejects_non_positive_interval(interval):
    with pytest.raises(ValueError):
        RefreshScheduler(Evaluation, interval=interval)
