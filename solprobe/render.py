from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from solprobe.views import Field, Gauge, ItemList, StatusLine, TabBar, View, ViewModel, Widget


def render_tab_bar(tabs: TabBar) -> Text:
    line = Text(style="white")
    for index, title in enumerate(tabs.titles):
        if index:
            line.append(" | ")
        style = "bold yellow" if index == tabs.selected else ""
        line.append(f" {title} ", style=style)
    return line


def render_widget(widget: Widget) -> RenderableType:
    if isinstance(widget, StatusLine):
        color = "green" if widget.online else "red"
        return Panel(Text(widget.text, style=color), title=widget.title, title_align="left")
    if isinstance(widget, Field):
        return Panel(Text(widget.value), title=widget.title, title_align="left")
    if isinstance(widget, Gauge):
        grid = Table.grid(expand=True, padding=(0, 1))
        grid.add_column(ratio=1)
        grid.add_column(width=4, justify="right")
        grid.add_row(
            ProgressBar(total=100, completed=widget.percent, complete_style=widget.color),
            f"{widget.percent}%",
        )
        return Panel(grid, title=widget.title, title_align="left")
    if isinstance(widget, ItemList):
        items = Text("\n".join(f"- {item}" for item in widget.items))
        return Panel(items, title=widget.title, title_align="left")
    raise TypeError(f"Unknown widget {widget!r}")


def render_view(view: View) -> Group:
    return Group(*(render_widget(widget) for widget in view.widgets))


def render_view_model(view_model: ViewModel) -> Group:
    tab_bar = Panel(render_tab_bar(view_model.tabs), title="SolProbe", title_align="left")
    return Group(tab_bar, render_view(view_model.body))


class ConsoleRenderer:
    """Prints each view-model once to a Rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def draw(self, view_model: ViewModel) -> None:
        self.console.print(render_view_model(view_model))
