import pytest

from models import AppState, SelectionPhase
from projections import (
    MADE_FOR_YOU_FALLBACK_COVERS,
    ExploreCategory,
    explore_view,
    format_duration,
    format_view_count,
    home_feed,
    library_playlists,
    now_playing,
    unique_keys,
)


def test_library_groups_trending_by_channel_in_first_seen_order(make_video):
    state = AppState(trending=[
        make_video("a1", channel="A"),
        make_video("a2", channel="A"),
        make_video("b1", channel="B"),
    ])

    playlists = library_playlists(state)

    assert [(p.title, p.songs) for p in playlists] == [("A Mix", 2), ("B Mix", 1)]
    assert [p.id for p in playlists] == ["trending-0", "trending-1"]
    assert playlists[0].image == "https://img.test/a1.jpg"
    assert [v.id for v in playlists[0].videos] == ["a1", "a2"]


def test_library_falls_back_to_placeholder_playlists():
    playlists = library_playlists(AppState())
    assert [(p.title, p.songs, p.image) for p in playlists] == [
        ("Summer Vibes 2023", 45, None),
        ("Workout Motivation", 32, None),
    ]


def test_library_filter_is_case_insensitive(make_video):
    state = AppState(trending=[make_video("a1", channel="Adele"), make_video("b1", channel="Blur")])
    assert [p.title for p in library_playlists(state, "  blur ")] == ["Blur Mix"]


def test_unique_keys_suffix_repeats_with_position():
    assert unique_keys(["v1", "v1", "v2"]) == ["v1", "v1_1", "v2"]
    assert unique_keys(["a", "b", "a", "a"]) == ["a", "b", "a_2", "a_3"]


def test_explore_search_results_deduplicate_keys_but_keep_original_ids(make_video):
    state = AppState(search_results=[make_video("v1"), make_video("v1"), make_video("v2")])

    view = explore_view(state, ExploreCategory.CHARTS, "lofi")

    assert view.searching is True
    assert view.title == 'Results for "lofi"'
    assert [i.key for i in view.items] == ["v1", "v1_1", "v2"]
    assert [i.original_id for i in view.items] == ["v1", "v1", "v2"]


def test_explore_ignores_category_while_searching(make_video):
    state = AppState(trending=[make_video("t1")], search_results=[make_video("s1")])
    for category in ExploreCategory:
        assert [i.original_id for i in explore_view(state, category, "q").items] == ["s1"]


def test_explore_shows_empty_results_for_active_query(make_video):
    state = AppState(trending=[make_video("t1")])
    assert explore_view(state, ExploreCategory.FOR_YOU, "nothing").items == []


@pytest.fixture
def browse_state(make_video):
    return AppState(
        trending=[make_video(f"t{i}") for i in range(5)],
        popular_music=[make_video(f"p{i}") for i in range(5)],
    )


def test_explore_for_you_mixes_first_three_of_each(browse_state):
    view = explore_view(browse_state, ExploreCategory.FOR_YOU, "   ")
    assert view.searching is False
    assert view.title == "For You Playlists"
    assert [i.original_id for i in view.items] == ["t0", "t1", "t2", "p0", "p1", "p2"]


def test_explore_charts_and_new(browse_state):
    assert [i.key for i in explore_view(browse_state, ExploreCategory.CHARTS).items] == [f"t{i}" for i in range(5)]
    assert [i.key for i in explore_view(browse_state, ExploreCategory.NEW).items] == [f"p{i}" for i in range(5)]


def test_explore_genres_falls_back_to_for_you_mix(browse_state):
    view = explore_view(browse_state, ExploreCategory.GENRES)
    assert view.title == "Genres Playlists"
    assert len(view.items) == 6


def test_explore_for_you_deduplicates_across_collections(make_video):
    state = AppState(trending=[make_video("same")], popular_music=[make_video("same")])
    assert [i.key for i in explore_view(state).items] == ["same", "same_1"]


def test_home_feed_uses_popular_covers_for_made_for_you(make_video):
    state = AppState(
        trending=[make_video("t1", channel="T")],
        popular_music=[make_video("p1", channel="P"), make_video("p2")],
    )

    feed = home_feed(state)

    assert [t.id for t in feed.recently_played] == ["p1", "p2"]
    assert feed.recently_played[0].artist == "P"
    assert [t.id for t in feed.trending_now] == ["t1"]
    assert [c.cover for c in feed.made_for_you] == ["https://img.test/p1.jpg", "https://img.test/p2.jpg"]


def test_home_feed_falls_back_to_fixed_covers(make_video):
    feed = home_feed(AppState(popular_music=[make_video("p1")]))
    assert feed.made_for_you[0].cover == "https://img.test/p1.jpg"
    assert feed.made_for_you[1].cover == MADE_FOR_YOU_FALLBACK_COVERS[1]
    assert [c.title for c in feed.made_for_you] == ["TRENDING", "DISCOVERY"]


@pytest.mark.parametrize(
    "duration, expected",
    [
        ("PT4M13S", "4:13"),
        ("PT1H2M3S", "1:02:03"),
        ("PT45S", "0:45"),
        ("PT10M", "10:00"),
        ("PT0S", "0:00"),
        (None, "0:00"),
        ("garbage", "0:00"),
    ],
)
def test_format_duration(duration, expected):
    assert format_duration(duration) == expected


@pytest.mark.parametrize(
    "count, expected",
    [(None, "0 views"), (0, "0 views"), (999, "999 views"), (1500, "1.5K views"), (2_340_000, "2.3M views")],
)
def test_format_view_count(count, expected):
    assert format_view_count(count) == expected


def test_now_playing_reports_failure_without_dropping_item(make_video):
    state = AppState(
        current_item=make_video("X", duration_iso8601="PT3M", view_count=12),
        selection_phase=SelectionPhase.FAILED,
        last_error="Video not found",
    )

    view = now_playing(state)

    assert view.item.id == "X"
    assert view.error == "Video not found"
    assert view.duration == "3:00"
    assert view.views == "12 views"


def test_now_playing_idle():
    view = now_playing(AppState())
    assert view.status is SelectionPhase.IDLE
    assert view.item is None
    assert view.error is None
