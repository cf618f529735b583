from dataclasses import dataclass, field
from enum import IntEnum

from solprobe.models import (
    Evaluation,
    NetworkPerformanceSnapshot,
    NodeHealthSnapshot,
    TroubleshootSnapshot,
)


class Tab(IntEnum):
    NODE_HEALTH = 0
    NETWORK_PERFORMANCE = 1
    TROUBLESHOOT = 2
    MONITOR = 3

    @property
    def title(self) -> str:
        return TAB_TITLES[self]


TAB_TITLES = {
    Tab.NODE_HEALTH: "Node Health",
    Tab.NETWORK_PERFORMANCE: "Network Performance",
    Tab.TROUBLESHOOT: "Troubleshoot",
    Tab.MONITOR: "Monitor",
}


@dataclass
class ApplicationState:
    """The single mutable object of a session.

    Owned by the control loop; only the refresh scheduler and the input
    router write to it. Tab navigation clamps at both ends.
    """

    node_health: NodeHealthSnapshot = field(default_factory=NodeHealthSnapshot)
    network_performance: NetworkPerformanceSnapshot = field(
        default_factory=NetworkPerformanceSnapshot
    )
    troubleshoot: TroubleshootSnapshot = field(default_factory=TroubleshootSnapshot)
    selected_tab: Tab = Tab.NODE_HEALTH

    def apply(self, evaluation: Evaluation) -> None:
        """Replace every snapshot with the new evaluation; nothing carries over."""
        self.node_health = evaluation.node_health
        self.network_performance = evaluation.network_performance
        self.troubleshoot = evaluation.troubleshoot

    def select(self, index: int) -> None:
        self.selected_tab = Tab(min(max(index, Tab.NODE_HEALTH), Tab.MONITOR))

    def select_previous(self) -> None:
        self.select(self.selected_tab - 1)

    def select_next(self) -> None:
        self.select(self.selected_tab + 1)
