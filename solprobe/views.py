from dataclasses import dataclass
from typing import Protocol, Union

from packaging.version import InvalidVersion, Version

from solprobe.diagnostics import EXPECTED_VERSION
from solprobe.state import ApplicationState, Tab

RECOMMENDATIONS = (
    "Investigate delinquent validators if count is high",
    "Check for network congestion if many empty blocks",
    "Optimize large accounts to improve performance",
)


@dataclass(frozen=True)
class StatusLine:
    title: str
    online: bool

    @property
    def text(self) -> str:
        return "Online" if self.online else "Offline"


@dataclass(frozen=True)
class Field:
    title: str
    value: str


@dataclass(frozen=True)
class Gauge:
    """A 0-100 bar. The value is shown as-is; anything outside the range is clamped."""

    title: str
    value: float
    color: str

    @property
    def percent(self) -> int:
        return min(100, max(0, int(self.value)))


@dataclass(frozen=True)
class ItemList:
    title: str
    items: tuple[str, ...]


Widget = Union[StatusLine, Field, Gauge, ItemList]


@dataclass(frozen=True)
class TabBar:
    titles: tuple[str, ...]
    selected: int


@dataclass(frozen=True)
class View:
    tab: Tab
    widgets: tuple[Widget, ...]


@dataclass(frozen=True)
class ViewModel:
    tabs: TabBar
    body: View


class Renderer(Protocol):
    def draw(self, view_model: ViewModel) -> None: ...


def _format_seconds(value: float) -> str:
    return f"{value:.3f}s"


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def describe_version(version: str, expected: str = EXPECTED_VERSION) -> str:
    try:
        reported, baseline = Version(version), Version(expected)
    except InvalidVersion:
        return f"{version} (expected {expected})"
    if reported == baseline:
        return f"{version} matches {expected}"
    relation = "newer" if reported > baseline else "older"
    return f"{version} is {relation} than {expected}"


def tps_gauge(state: ApplicationState) -> Gauge:
    return Gauge("TPS", state.network_performance.tps, "blue")


def tps_field(state: ApplicationState) -> Field:
    return Field("Transactions per Second", f"{state.network_performance.tps:.2f}")


def delinquent_gauge(state: ApplicationState) -> Gauge:
    return Gauge("Delinquent Validators", state.troubleshoot.delinquent_validators, "red")


def node_health_view(state: ApplicationState) -> View:
    health = state.node_health
    widgets: list[Widget] = [StatusLine("Node Status", health.is_responsive)]
    if health.current_slot is not None:
        widgets.append(Field("Current Slot", str(health.current_slot)))
    if health.version is not None:
        widgets.append(Field("Version", health.version))
    if health.current_epoch is not None:
        widgets.append(Field("Current Epoch", str(health.current_epoch)))
    if health.total_nodes is not None:
        widgets.append(Field("Total Nodes", str(health.total_nodes)))
    return View(Tab.NODE_HEALTH, tuple(widgets))


def network_performance_view(state: ApplicationState) -> View:
    performance = state.network_performance
    widgets: list[Widget] = [tps_gauge(state), tps_field(state)]
    if performance.avg_block_time is not None:
        widgets.append(Field("Avg Block Time", _format_seconds(performance.avg_block_time)))
    if performance.confirmation_time is not None:
        widgets.append(Field("Confirmation Time", _format_seconds(performance.confirmation_time)))
    return View(Tab.NETWORK_PERFORMANCE, tuple(widgets))


def troubleshoot_view(state: ApplicationState, expected_version: str = EXPECTED_VERSION) -> View:
    results = state.troubleshoot
    checks = [
        f"Connection Status: {'OK' if results.connection_status else 'Failed'}",
        f"Version Mismatch: {_yes_no(results.version_mismatch)}",
        f"High Latency: {_yes_no(results.high_latency)}",
        f"Network Congestion: {_yes_no(results.network_congestion)}",
    ]
    if state.node_health.version is not None:
        checks.append(f"Version: {describe_version(state.node_health.version, expected_version)}")
    widgets: tuple[Widget, ...] = (
        delinquent_gauge(state),
        Field("Empty Blocks", str(results.empty_blocks)),
        Field("Large Accounts", str(results.large_accounts)),
        ItemList("Checks", tuple(checks)),
        ItemList("Recommendations", RECOMMENDATIONS),
    )
    return View(Tab.TROUBLESHOOT, widgets)


def monitor_view(state: ApplicationState) -> View:
    widgets: list[Widget] = [
        StatusLine("Node Status", state.node_health.is_responsive),
        tps_gauge(state),
    ]
    if state.node_health.current_slot is not None:
        widgets.append(Field("Current Slot", str(state.node_health.current_slot)))
    if state.network_performance.avg_block_time is not None:
        widgets.append(
            Field("Avg Block Time", _format_seconds(state.network_performance.avg_block_time))
        )
    widgets.append(Field("Delinquent Validators", str(state.troubleshoot.delinquent_validators)))
    return View(Tab.MONITOR, tuple(widgets))


VIEW_BUILDERS = {
    Tab.NODE_HEALTH: node_health_view,
    Tab.NETWORK_PERFORMANCE: network_performance_view,
    Tab.TROUBLESHOOT: troubleshoot_view,
    Tab.MONITOR: monitor_view,
}


def project(state: ApplicationState) -> ViewModel:
    """Build what one frame shows. Reads the state, never writes it."""
    tab = Tab(state.selected_tab)
    tabs = TabBar(tuple(t.title for t in Tab), int(tab))
    return ViewModel(tabs, VIEW_BUILDERS[tab](state))
