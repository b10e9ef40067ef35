# main.py
import logging
import webbrowser
try:
    import pyperclip
except ImportError:
    pyperclip = None

from textual.app import App, ComposeResult
from textual.containers import Container, Vertical
from textual.logging import TextualHandler
from textual.reactive import reactive
from textual.widgets import Footer, Header, Input, Label, TabbedContent, TabPane

from config import Config
from errors import ConfigError
from models import AppState
from playback import PlaybackCoordinator, PlayerState
from projections import ExploreCategory, explore_view, home_feed, library_playlists, now_playing
from services import YouTubeDataSource
from store import MusicStore
from ui import CategoryBar, LogPane, NowPlayingPane, SearchControls, VideoTable, tile_rows


class YTMusicBrowserApp(App):
    BINDINGS = [
        ("q", "quit", "Quit"),
        ("c", "copy_link", "Copy Link"),
        ("o", "open_in_browser", "Open in Browser"),
        ("x", "clear_selection", "Stop"),
        ("r", "refresh", "Refresh"),
    ]
    CSS = """
    #app-body { height: 1fr; }
    #status { height: 1; color: $warning; }
    #log { height: 8; border-top: solid $accent; }
    CategoryBar { height: auto; }
    SearchControls { height: auto; }
    VideoTable { height: 1fr; }
    NowPlayingPane Markdown { height: auto; }
    """

    app_state = reactive(AppState(), always_update=True, init=False)

    def __init__(self, store: MusicStore, coordinator: PlaybackCoordinator, config: Config):
        super().__init__()
        self.store = store
        self.coordinator = coordinator
        self.config = config
        self.explore_category = ExploreCategory.FOR_YOU
        self.explore_query = ""
        self.library_query = ""
        self._unsubscribe = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="app-body"):
            yield Label("", id="status")
            with TabbedContent(initial="home"):
                with TabPane("Home", id="home"):
                    with Vertical():
                        yield Label("Recently Played")
                        yield VideoTable("Title", "Channel", id="recently-played")
                        yield Label("Made For You")
                        yield VideoTable("Mix", "About", id="made-for-you")
                        yield Label("Trending Now")
                        yield VideoTable("Title", "Channel", id="trending-now")
                with TabPane("Explore", id="explore"):
                    yield SearchControls()
                    yield CategoryBar()
                    yield Label("", id="explore-title")
                    yield VideoTable("Title", "Description", id="explore-results")
                with TabPane("Library", id="library"):
                    yield Input(placeholder="Filter playlists", id="library-filter")
                    yield VideoTable("Playlist", "Songs", id="library-playlists")
                with TabPane("Now Playing", id="now-playing"):
                    yield NowPlayingPane()
        yield LogPane(id="log", wrap=True, highlight=True, markup=True)
        yield Footer()

    def on_mount(self) -> None:
        log = self.query_one(LogPane)
        if pyperclip:
            log.add_message("[green]✅ Clipboard found.[/green]")
        else:
            log.add_message("[yellow]⚠️ 'pyperclip' not installed.[/yellow]")
        self._unsubscribe = self.store.subscribe(self._on_store_change)
        self.app_state = self.store.state
        self.action_refresh()

    async def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
        await self.store.source.aclose()

    def _on_store_change(self, state: AppState) -> None:
        self.app_state = state

    def watch_app_state(self, old_state: AppState, new_state: AppState) -> None:
        status = self.query_one("#status", Label)
        if new_state.is_loading:
            status.update("Loading...")
        elif new_state.last_error:
            status.update(f"Error: {new_state.last_error}")
        else:
            status.update("")
        self.render_home(new_state)
        self.render_explore(new_state)
        self.render_library(new_state)
        self.query_one(NowPlayingPane).update_view(now_playing(new_state))

    def render_home(self, state: AppState) -> None:
        feed = home_feed(state)
        self.query_one("#recently-played", VideoTable).update_rows(tile_rows(feed.recently_played))
        self.query_one("#made-for-you", VideoTable).update_rows(
            (card.id, None, (card.title, f"{card.subtitle}: {card.description}")) for card in feed.made_for_you
        )
        self.query_one("#trending-now", VideoTable).update_rows(tile_rows(feed.trending_now))

    def render_explore(self, state: AppState) -> None:
        view = explore_view(state, self.explore_category, self.explore_query)
        self.query_one("#explore-title", Label).update(view.title)
        self.query_one(CategoryBar).highlight(self.explore_category)
        self.query_one("#explore-results", VideoTable).update_rows(
            (item.key, item.original_id, (item.title, item.description)) for item in view.items
        )

    def render_library(self, state: AppState) -> None:
        self.query_one("#library-playlists", VideoTable).update_rows(
            (p.id, p.videos[0].id if p.videos else None, (p.title, f"{p.songs} songs"))
            for p in library_playlists(state, self.library_query)
        )

    def action_refresh(self) -> None:
        self.query_one(LogPane).add_message("🎵 Loading trending and popular music...")
        self.run_worker(self.load_home(), group="home_worker", exclusive=True)

    async def load_home(self) -> None:
        await self.store.initialize()
        state = self.store.state
        self.query_one(LogPane).add_message(
            f"🎶 {len(state.trending)} trending, {len(state.popular_music)} popular music videos."
        )
        await self.coordinator.auto_select()

    def on_search_controls_search_requested(self, message: SearchControls.SearchRequested) -> None:
        self.explore_query = message.query
        if not message.query:
            self.render_explore(self.app_state)
            return
        self.query_one(LogPane).add_message(f"🔎 Searching for '{message.query}'...")
        self.workers.cancel_group(self, "search_worker")
        self.run_worker(self.perform_search(message.query), group="search_worker", exclusive=True)

    async def perform_search(self, query: str) -> None:
        results = await self.store.search(query)
        log = self.query_one(LogPane)
        if self.store.state.last_error:
            log.add_message(f"[red]❌ {self.store.state.last_error}[/red]")
        elif not results:
            log.add_message(f"🤷 No music found for '{query}'.")
        else:
            log.add_message(f"🎶 Found {len(results)} results.")

    def on_category_bar_category_chosen(self, message: CategoryBar.CategoryChosen) -> None:
        self.explore_category = message.category
        self.render_explore(self.app_state)

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "library-filter":
            self.library_query = event.value
            self.render_library(self.app_state)

    def on_video_table_video_chosen(self, message: VideoTable.VideoChosen) -> None:
        self.query_one(TabbedContent).active = "now-playing"
        self.run_worker(self.perform_play(message.video_id), group="play_worker")

    async def perform_play(self, video_id: str) -> None:
        log = self.query_one(LogPane)
        detail = await self.coordinator.play(video_id)
        if detail:
            log.add_message(f"▶️ Now playing '[b]{detail.title}[/b]'.")
        elif self.store.state.last_error:
            log.add_message(f"[red]❌ {self.store.state.last_error}[/red]")

    def action_copy_link(self) -> None:
        log = self.query_one(LogPane)
        if not pyperclip:
            log.add_message("[red]❌ 'pyperclip' not installed.[/red]")
            return
        item = self.coordinator.current_item
        if item:
            pyperclip.copy(item.watch_url)
            log.add_message(f"📋 Copied link for '[b]{item.title}[/b]'.")
        else:
            log.add_message("[yellow]⚠️ No song selected.[/yellow]")

    def action_open_in_browser(self) -> None:
        log = self.query_one(LogPane)
        item = self.coordinator.current_item
        if not item:
            log.add_message("[yellow]⚠️ No song selected.[/yellow]")
            return
        if webbrowser.open(item.embed_url):
            self.coordinator.on_player_state(PlayerState.PLAYING)
            log.add_message(f"▶️ Opened '[b]{item.title}[/b]' in the browser.")
            return
        fallback = self.coordinator.on_player_state(PlayerState.ERROR)
        log.add_message(f"[red]❌ Could not start the player. Watch it at {fallback}[/red]")

    def action_clear_selection(self) -> None:
        self.coordinator.stop()
        self.query_one(LogPane).add_message("⏹️ Playback stopped.")


def main() -> None:
    app_config = Config.from_env()
    try:
        app_config.validate()
    except ConfigError as exc:
        raise SystemExit(f"Configuration error: {exc}")
    logging.basicConfig(level=app_config.LOG_LEVEL.upper(), handlers=[TextualHandler()])

    data_source = YouTubeDataSource(app_config)
    store = MusicStore(data_source, app_config)
    coordinator = PlaybackCoordinator(store)

    app = YTMusicBrowserApp(store, coordinator, app_config)
    app.run()


if __name__ == "__main__":
    main()
