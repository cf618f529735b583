import asyncio
import logging
import math

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, VerticalScroll
from textual.widgets import Footer, Header, Static

from solprobe import __version__ as SOLPROBE_VERSION
from solprobe.input import POLL_TIMEOUT_SECONDS, Action, InputRouter
from solprobe.render import render_tab_bar, render_view
from solprobe.scheduler import RefreshScheduler
from solprobe.state import ApplicationState
from solprobe.views import ViewModel, project

logger = logging.getLogger(__name__)


class StatusBar(Static):
    """One-line footer with node status, endpoint and refresh timing."""

    def __init__(self, url: str, interval: float) -> None:
        super().__init__(id="status-bar")
        self.url = url
        self.interval = interval
        self.node_status = "unknown"
        self.last_update = "-"
        self.next_refresh: float | None = None
        self.refreshing = False

    def render(self) -> str:
        line = (
            f"Node: {self.node_status} | RPC: {self.url} | "
            f"Every: {self.interval:g}s | Updated: {self.last_update}"
        )
        if self.refreshing:
            line += " | refreshing..."
        elif self.next_refresh is not None:
            line += f" | Next: {math.ceil(self.next_refresh)}s"
        return line


class TabStrip(Static):
    def __init__(self) -> None:
        super().__init__(id="tab-bar")
        self.border_title = f"SolProbe {SOLPROBE_VERSION}"


class ViewPanel(VerticalScroll):
    def __init__(self) -> None:
        super().__init__(id="view")
        self._content = Static("... loading")

    def compose(self) -> ComposeResult:
        yield self._content

    def show(self, title: str, content: object) -> None:
        """Replace the panel title and body."""
        self.border_title = title
        self._content.update(content)


class SolProbeApp(App):
    """Live dashboard for one RPC node.

    The app is the control loop: a frame timer redraws the current state and
    starts a scheduled refresh when one is due, and every key binding goes
    through the input router.
    """

    BINDINGS = [
        Binding("q", "route('q')", "Quit", priority=True),
        Binding("left", "route('left')", "Prev tab", priority=True),
        Binding("right", "route('right')", "Next tab", priority=True),
        Binding("r", "route('r')", "Refresh", priority=True),
    ]

    CSS = """
    Screen {
        layout: vertical;
    }
    #body {
        height: 1fr;
        padding: 0 1;
    }
    #tab-bar {
        height: 3;
        border: round #666;
    }
    #view {
        height: 1fr;
        border: round #666;
    }
    #status-bar {
        height: 1;
    }
    """

    def __init__(
        self,
        scheduler: RefreshScheduler,
        state: ApplicationState | None = None,
        url: str = "",
    ) -> None:
        super().__init__()
        self.scheduler = scheduler
        self.state = state if state is not None else ApplicationState()
        self.router = InputRouter(self.state)
        self.title = "SolProbe"
        self.sub_title = url
        self.tab_bar = TabStrip()
        self.view_panel = ViewPanel()
        self.status_bar = StatusBar(url, scheduler.interval)
        self._refreshing = False

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Container(id="body"):
            yield self.tab_bar
            yield self.view_panel
        yield self.status_bar
        yield Footer()

    def on_mount(self) -> None:
        """Draw the first frame and start the frame timer."""
        self.draw(project(self.state))
        self.set_interval(POLL_TIMEOUT_SECONDS, self._frame)

    def draw(self, view_model: ViewModel) -> None:
        """Push one view-model to the widgets."""
        self.tab_bar.update(render_tab_bar(view_model.tabs))
        self.view_panel.show(view_model.body.tab.title, render_view(view_model.body))
        if self.scheduler.refreshed_at is not None:
            self.status_bar.node_status = "online" if self.state.node_health.is_responsive else "offline"
            self.status_bar.last_update = self.scheduler.refreshed_at.strftime("%H:%M:%S UTC")
            self.status_bar.next_refresh = self.scheduler.seconds_until_due()
        self.status_bar.refreshing = self._refreshing
        self.status_bar.refresh()

    def _frame(self) -> None:
        """Start a refresh when one is due, then redraw."""
        if self.scheduler.is_due():
            self._start_refresh()
        self.draw(project(self.state))

    def _start_refresh(self) -> None:
        """Run one refresh in a worker unless one is already in flight."""
        if self._refreshing:
            return
        self._refreshing = True
        self.run_worker(self.refresh_data(), group="refresh")

    async def refresh_data(self) -> None:
        """Evaluate off the event loop, then apply the result on it."""
        try:
            evaluation = await asyncio.get_event_loop().run_in_executor(
                None, self.scheduler.evaluate
            )
        finally:
            self._refreshing = False
        self.scheduler.complete(self.state, evaluation)
        logger.debug("Refresh %d applied", self.scheduler.refresh_count)
        self.draw(project(self.state))

    def action_route(self, key: str) -> None:
        """Handle a bound key through the input router."""
        action = self.router.route(key)
        if action is Action.QUIT:
            self.exit()
            return
        if action is Action.REFRESH:
            logger.info("Manual refresh requested")
            self._start_refresh()
        self.draw(project(self.state))
