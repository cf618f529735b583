import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Protocol

from solprobe.models import (
    Evaluation,
    NetworkPerformanceSnapshot,
    NodeHealthSnapshot,
    TroubleshootSnapshot,
)
from solprobe.services.rpc import EpochInfo, PerformanceSample, RpcError, VoteAccounts

logger = logging.getLogger(__name__)

EXPECTED_VERSION = "1.14.0"
HIGH_LATENCY_SECONDS = 0.5
CONGESTION_TPS = 1500.0
CONFIRMATION_TIMEOUT_SECONDS = 30.0
CONFIRMATION_POLL_SECONDS = 0.1
RECENT_BLOCKS_LIMIT = 100


class ConfirmationTimeout(Exception):
    """The slot height did not advance within the confirmation budget."""


class MetricsSource(Protocol):
    def health(self) -> bool: ...

    def version(self) -> str: ...

    def current_slot(self) -> int: ...

    def epoch_info(self) -> EpochInfo: ...

    def cluster_node_count(self) -> int: ...

    def recent_performance_sample(self, n: int = 1) -> PerformanceSample | None: ...

    def vote_accounts(self) -> VoteAccounts: ...

    def recent_blocks(self, from_slot: int, limit: int = 100) -> List[int]: ...

    def top_accounts_by_balance(self) -> List[Dict[str, Any]]: ...


@dataclass(frozen=True)
class NodeMetrics:
    """Raw values gathered in one pass over the metrics source; None means the query failed."""

    healthy: bool = False
    version: str | None = None
    current_slot: int | None = None
    slot_latency: float | None = None
    current_epoch: int | None = None
    total_nodes: int | None = None
    sample: PerformanceSample | None = None
    confirmation_time: float | None = None
    delinquent_validators: int | None = None
    recent_blocks: int | None = None
    large_accounts: int | None = None


def compute_tps(sample: PerformanceSample) -> float:
    if sample.sample_period_secs <= 0:
        return 0.0
    return sample.num_transactions / sample.sample_period_secs


def compute_avg_block_time(sample: PerformanceSample) -> float | None:
    if sample.num_slots <= 0:
        return None
    return sample.sample_period_secs / sample.num_slots


def is_version_mismatch(version: str | None, expected: str = EXPECTED_VERSION) -> bool:
    # Only a version that was actually retrieved can mismatch
    return version is not None and version != expected


def is_high_latency(latency: float | None) -> bool:
    return latency is not None and latency > HIGH_LATENCY_SECONDS


def is_congested(tps: float) -> bool:
    return tps > CONGESTION_TPS


def measure_confirmation_time(
    source: MetricsSource,
    timeout: float = CONFIRMATION_TIMEOUT_SECONDS,
    poll_interval: float = CONFIRMATION_POLL_SECONDS,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> float:
    """Seconds until the node's slot height advances past the slot seen at call time.

    Blocks the caller. Raises ConfirmationTimeout when no advance is observed
    within ``timeout`` seconds and lets RpcError from the slot queries through.
    """
    start = clock()
    start_slot = source.current_slot()
    while clock() - start <= timeout:
        if source.current_slot() > start_slot:
            # An advance seen after the budget ran out still counts as a timeout
            elapsed = clock() - start
            if elapsed <= timeout:
                return elapsed
            break
        sleep(poll_interval)
    raise ConfirmationTimeout(f"slot {start_slot} did not advance within {timeout:g}s")


def _query(label: str, call: Callable[..., Any], *args: Any) -> Any:
    try:
        return call(*args)
    except RpcError as exc:
        logger.debug("%s failed: %s", label, exc)
        return None


def collect(
    source: MetricsSource,
    confirmation_timeout: float = CONFIRMATION_TIMEOUT_SECONDS,
    poll_interval: float = CONFIRMATION_POLL_SECONDS,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> NodeMetrics:
    """Query every metric once. A failing query leaves its field None and never aborts the pass."""
    healthy = bool(_query("health", source.health))
    version = _query("version", source.version)

    # The slot fetch doubles as the single latency probe
    started = clock()
    current_slot = _query("current_slot", source.current_slot)
    slot_latency = clock() - started if current_slot is not None else None

    epoch = _query("epoch_info", source.epoch_info)
    total_nodes = _query("cluster_node_count", source.cluster_node_count)
    sample = _query("recent_performance_sample", source.recent_performance_sample, 1)
    votes = _query("vote_accounts", source.vote_accounts)

    blocks = None
    if current_slot is not None:
        blocks = _query(
            "recent_blocks", source.recent_blocks, current_slot, RECENT_BLOCKS_LIMIT
        )
    accounts = _query("top_accounts_by_balance", source.top_accounts_by_balance)

    confirmation_time = None
    try:
        confirmation_time = measure_confirmation_time(
            source, confirmation_timeout, poll_interval, clock, sleep
        )
    except ConfirmationTimeout as exc:
        logger.warning("No confirmation time available: %s", exc)
    except RpcError as exc:
        logger.debug("confirmation probe failed: %s", exc)

    return NodeMetrics(
        healthy=healthy,
        version=version,
        current_slot=current_slot,
        slot_latency=slot_latency,
        current_epoch=epoch.epoch if epoch is not None else None,
        total_nodes=total_nodes,
        sample=sample,
        confirmation_time=confirmation_time,
        delinquent_validators=votes.delinquent if votes is not None else None,
        recent_blocks=len(blocks) if blocks is not None else None,
        large_accounts=len(accounts) if accounts is not None else None,
    )


def evaluate(metrics: NodeMetrics, expected_version: str = EXPECTED_VERSION) -> Evaluation:
    """Derive the three snapshots and the health flags. No I/O."""
    sample = metrics.sample
    tps = compute_tps(sample) if sample is not None else 0.0
    avg_block_time = compute_avg_block_time(sample) if sample is not None else None

    return Evaluation(
        node_health=NodeHealthSnapshot(
            is_responsive=metrics.healthy,
            version=metrics.version,
            current_slot=metrics.current_slot,
            current_epoch=metrics.current_epoch,
            total_nodes=metrics.total_nodes,
        ),
        network_performance=NetworkPerformanceSnapshot(
            tps=tps,
            avg_block_time=avg_block_time,
            confirmation_time=metrics.confirmation_time,
        ),
        troubleshoot=TroubleshootSnapshot(
            connection_status=metrics.healthy,
            version_mismatch=is_version_mismatch(metrics.version, expected_version),
            high_latency=is_high_latency(metrics.slot_latency),
            network_congestion=sample is not None and is_congested(tps),
            delinquent_validators=metrics.delinquent_validators or 0,
            empty_blocks=metrics.recent_blocks or 0,
            large_accounts=metrics.large_accounts or 0,
        ),
    )


def run_diagnostics(
    source: MetricsSource, expected_version: str = EXPECTED_VERSION, **collect_options: Any
) -> Evaluation:
    return evaluate(collect(source, **collect_options), expected_version)
