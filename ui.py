# ui.py
from typing import Dict, Iterable, Optional, Sequence, Tuple

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Button, DataTable, Input, Label, Markdown, RichLog, Static

from models import SelectionPhase
from projections import ExploreCategory, NowPlayingView, unique_keys

Row = Tuple[str, Optional[str], Sequence[str]]


def tile_rows(tiles: Iterable) -> list:
    """Rows for a list of projection tiles, keyed so repeated ids stay distinct."""
    tiles = list(tiles)
    keys = unique_keys([t.id for t in tiles])
    return [(key, t.id, (t.title, t.artist)) for key, t in zip(keys, tiles)]


class SearchControls(Static):
    """Widget for the search input and button."""
    class SearchRequested(Message):
        def __init__(self, query: str) -> None:
            self.query = query
            super().__init__()

    def compose(self) -> ComposeResult:
        yield Label("Search YouTube Music (submit empty to go back to categories):")
        yield Input(id="search-input")
        yield Button("Search", variant="primary", id="search-button")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.post_search_message()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.post_search_message()

    def post_search_message(self) -> None:
        self.post_message(self.SearchRequested(self.query_one(Input).value.strip()))


class CategoryBar(Horizontal):
    """One button per explore category."""
    class CategoryChosen(Message):
        def __init__(self, category: ExploreCategory) -> None:
            self.category = category
            super().__init__()

    def compose(self) -> ComposeResult:
        for category in ExploreCategory:
            yield Button(category.value, id=f"category-{category.name.lower()}")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        name = (event.button.id or "").removeprefix("category-").upper()
        self.post_message(self.CategoryChosen(ExploreCategory[name]))

    def highlight(self, active: ExploreCategory) -> None:
        for category in ExploreCategory:
            button = self.query_one(f"#category-{category.name.lower()}", Button)
            button.variant = "primary" if category is active else "default"


class VideoTable(DataTable):
    """A results table whose rows map back to a playable video id."""
    class VideoChosen(Message):
        def __init__(self, video_id: str) -> None:
            self.video_id = video_id
            super().__init__()

    def __init__(self, *column_labels: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._headings = column_labels or ("Title", "Channel")
        self._video_ids: Dict[str, Optional[str]] = {}

    def on_mount(self) -> None:
        self.add_columns(*self._headings)
        self.cursor_type = "row"

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        event.stop()
        video_id = self._video_ids.get(event.row_key.value)
        if video_id:
            self.post_message(self.VideoChosen(video_id))

    def update_rows(self, rows: Iterable[Row]) -> None:
        self.clear()
        self._video_ids = {}
        for key, video_id, cells in rows:
            self._video_ids[key] = video_id
            self.add_row(*cells, key=key)


class NowPlayingPane(Static):
    """Widget to display the current item and its related videos."""
    def compose(self) -> ComposeResult:
        yield Markdown(id="now-playing-details")
        yield Label("Related")
        yield VideoTable("Title", "Channel", id="related-table")

    def on_mount(self) -> None:
        self.query_one(Markdown).update("## Now Playing\n\n*No music selected.*")

    def update_view(self, view: NowPlayingView) -> None:
        item = view.item
        if item is None:
            if view.status is SelectionPhase.LOADING:
                content = "## Now Playing\n\n*Loading music...*"
            elif view.error:
                content = f"## Error loading music\n\n{view.error}"
            else:
                content = "## Now Playing\n\n*No music selected.*"
        else:
            content = (
                f"## {item.title}\n\n- **Channel**: {item.channel_title}\n- **Views**: {view.views}"
                f"\n- **Duration**: {view.duration}\n- **Link**: `{item.watch_url}`"
            )
            if view.status is SelectionPhase.LOADING:
                content += "\n\n*Loading next selection...*"
            elif view.error:
                content += f"\n\n**Error**: {view.error}"
        self.query_one(Markdown).update(content)
        self.query_one(VideoTable).update_rows(tile_rows(view.related))


class LogPane(RichLog):
    """A dedicated widget for logging application events."""
    def add_message(self, message: str) -> None:
        self.write(message)
