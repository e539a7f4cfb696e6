"""Textual fuzzy picker used to choose a project."""

from __future__ import annotations

from collections.abc import Callable

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.fuzzy import Matcher
from textual.widgets import Header, Input, OptionList, Static
from textual.widgets.option_list import Option

from tmuxer.errors import SelectionCancelledError
from tmuxer.models import Project

Chooser = Callable[[list[str], list[str]], int | None]


def rank(query: str, labels: list[str]) -> list[int]:
    """Return indexes of *labels* matching *query*, best match first.

    An empty query keeps every label in its original order.
    """
    if not query:
        return list(range(len(labels)))
    matcher = Matcher(query)
    scored = []
    for i, label in enumerate(labels):
        score = matcher.match(label)
        if score > 0:
            scored.append((-score, i))
    scored.sort()
    return [i for _score, i in scored]


class ProjectPicker(App[int | None]):
    """Type to filter, Enter to pick, Escape to cancel."""

    TITLE = "tmuxer"
    CSS = """
    Screen {
        layout: vertical;
    }

    #query {
        dock: top;
        margin: 0 1;
    }

    #main {
        height: 1fr;
    }

    #matches {
        width: 1fr;
        border: solid $accent;
    }

    #preview {
        width: 1fr;
        border: solid $accent;
        padding: 0 1;
    }

    #status-bar {
        height: 1;
        dock: bottom;
        background: $surface;
        color: $text-muted;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", priority=True),
        Binding("down", "cursor_down", "Down", show=False, priority=True),
        Binding("up", "cursor_up", "Up", show=False, priority=True),
        Binding("ctrl+n", "cursor_down", "Down", show=False, priority=True),
        Binding("ctrl+p", "cursor_up", "Up", show=False, priority=True),
    ]

    def __init__(self, labels: list[str], previews: list[str]) -> None:
        super().__init__()
        self.labels = labels
        self.previews = previews
        self.matches: list[int] = []
        self.preview_index: int | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield Input(placeholder="Search projects...", id="query")
        with Horizontal(id="main"):
            yield OptionList(id="matches")
            yield Static("", id="preview")
        yield Static("", id="status-bar")

    def on_mount(self) -> None:
        self._refilter("")
        self.query_one("#query", Input).focus()

    def _refilter(self, query: str) -> None:
        self.matches = rank(query, self.labels)
        matcher = Matcher(query) if query else None

        option_list = self.query_one("#matches", OptionList)
        option_list.clear_options()
        option_list.add_options(
            Option(
                matcher.highlight(self.labels[i]) if matcher else Text(self.labels[i]),
                id=str(i),
            )
            for i in self.matches
        )
        if self.matches:
            option_list.highlighted = 0
        self._show_preview(self.matches[0] if self.matches else None)
        self.query_one("#status-bar", Static).update(
            f"{len(self.matches)}/{len(self.labels)} projects"
        )

    def _show_preview(self, index: int | None) -> None:
        self.preview_index = index
        text = "" if index is None else self.previews[index]
        self.query_one("#preview", Static).update(Text(text))

    def _highlighted_index(self) -> int | None:
        option_list = self.query_one("#matches", OptionList)
        if option_list.highlighted is None or not self.matches:
            return None
        option = option_list.get_option_at_index(option_list.highlighted)
        return int(option.id)

    def on_input_changed(self, event: Input.Changed) -> None:
        self._refilter(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        index = self._highlighted_index()
        if index is not None:
            self.exit(index)

    def on_option_list_option_highlighted(self, event: OptionList.OptionHighlighted) -> None:
        self._show_preview(int(event.option.id))

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.exit(int(event.option.id))

    def action_cursor_down(self) -> None:
        self.query_one("#matches", OptionList).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#matches", OptionList).action_cursor_up()

    def action_cancel(self) -> None:
        self.exit(None)


def fuzzy_select(labels: list[str], previews: list[str]) -> int | None:
    """Run the picker; return the chosen index or None if cancelled."""
    return ProjectPicker(labels, previews).run()


def pick_project(projects: list[Project], chooser: Chooser | None = None) -> Project:
    """Let the user choose one of *projects*. Raises SelectionCancelledError."""
    if chooser is None:
        chooser = fuzzy_select
    index = chooser([p.name for p in projects], [p.preview() for p in projects])
    if index is None:
        raise SelectionCancelledError()
    return projects[index]
