"""Point-in-time snapshots produced by each refresh.

A snapshot is never merged with its predecessor: every refresh replaces it
whole, so a query that failed shows up as ``None`` (or the zero default for
counts) instead of the last value that was seen.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class NodeHealthSnapshot:
    is_responsive: bool = False
    version: str | None = None
    current_slot: int | None = None
    current_epoch: int | None = None
    total_nodes: int | None = None


@dataclass(frozen=True)
class NetworkPerformanceSnapshot:
    tps: float = 0.0
    avg_block_time: float | None = None
    confirmation_time: float | None = None


@dataclass(frozen=True)
class TroubleshootSnapshot:
    connection_status: bool = False
    version_mismatch: bool = False
    high_latency: bool = False
    network_congestion: bool = False
    delinquent_validators: int = 0
    empty_blocks: int = 0
    large_accounts: int = 0


@dataclass(frozen=True)
class Evaluation:
    node_health: NodeHealthSnapshot = field(default_factory=NodeHealthSnapshot)
    network_performance: NetworkPerformanceSnapshot = field(
        default_factory=NetworkPerformanceSnapshot
    )
    troubleshoot: TroubleshootSnapshot = field(default_factory=TroubleshootSnapshot)
