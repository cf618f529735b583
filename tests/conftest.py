import pytest

from solprobe.services.rpc import EpochInfo, PerformanceSample, RpcError, VoteAccounts


class FakeClock:
    """Monotonic clock whose sleep advances simulated time."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeSource:
    """Metrics source with canned answers; a query listed in ``failing`` raises RpcError."""

    def __init__(self, **overrides) -> None:
        self.healthy = True
        self.node_version = "1.14.0"
        self.slots = [100, 100, 101]
        self.epoch = EpochInfo(epoch=42, absolute_slot=100, slot_index=10, slots_in_epoch=432000)
        self.nodes = 7
        self.sample = PerformanceSample(
            slot=99, num_transactions=3000, num_slots=4, sample_period_secs=2
        )
        self.votes = VoteAccounts(current=10, delinquent=3)
        self.blocks = [100, 101, 102]
        self.accounts = [{"address": "a", "lamports": 1}, {"address": "b", "lamports": 2}]
        self.failing: set[str] = set()
        self.slot_delay = 0.0
        self.clock: FakeClock | None = None
        self.calls: list[str] = []
        for name, value in overrides.items():
            setattr(self, name, value)

    def _check(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failing:
            raise RpcError(f"{name}: boom")

    def health(self) -> bool:
        self._check("health")
        return self.healthy

    def version(self) -> str:
        self._check("version")
        return self.node_version

    def current_slot(self) -> int:
        self._check("current_slot")
        if self.clock is not None and self.slot_delay:
            self.clock.advance(self.slot_delay)
        # Later calls keep returning the last slot
        if len(self.slots) > 1:
            return self.slots.pop(0)
        return self.slots[0]

    def epoch_info(self) -> EpochInfo:
        self._check("epoch_info")
        return self.epoch

    def cluster_node_count(self) -> int:
        self._check("cluster_node_count")
        return self.nodes

    def recent_performance_sample(self, n: int = 1) -> PerformanceSample | None:
        self._check("recent_performance_sample")
        return self.sample

    def vote_accounts(self) -> VoteAccounts:
        self._check("vote_accounts")
        return self.votes

    def recent_blocks(self, from_slot: int, limit: int = 100) -> list[int]:
        self._check("recent_blocks")
        return self.blocks

    def top_accounts_by_balance(self) -> list[dict]:
        self._check("top_accounts_by_balance")
        return self.accounts


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def source(clock):
    fake = FakeSource()
    fake.clock = clock
    return fake


@pytest.fixture
def make_source():
    return FakeSource
