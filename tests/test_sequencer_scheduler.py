from domain.models import PatternEvent, SongPattern
from domain.store import PatternStore
from sequencer.scheduler import EVENT_DUE_WINDOW_MS, Scheduler


def test_unknown_track_uses_default_pattern(scheduler: Scheduler, store: PatternStore):
    loaded = scheduler.load_for_track("never-recorded")

    assert loaded.from_default is True
    assert list(loaded.events) == store.library.default_pattern


def test_known_track_uses_stored_pattern(scheduler: Scheduler, store: PatternStore, example_pattern: SongPattern):
    store.upsert_song(example_pattern)
    loaded = scheduler.load_for_track("A")

    assert loaded.from_default is False
    assert list(loaded.events) == example_pattern.events


def test_tick_applies_event_once(scheduler, store, example_pattern, callbacks):
    store.upsert_song(example_pattern)
    scheduler.load_for_track("A")

    assert scheduler.tick(5_200, True) == [0]
    assert callbacks.intensities == [7]

    assert scheduler.tick(5_600, True) == []
    assert callbacks.intensities == [7]


def test_tick_requires_playing_and_loaded_pattern(scheduler, store, example_pattern, callbacks):
    assert scheduler.tick(5_200, True) == []

    store.upsert_song(example_pattern)
    scheduler.load_for_track("A")
    assert scheduler.tick(5_200, False) == []
    assert callbacks.intensities == []


def test_due_window_is_half_open(scheduler, store, example_pattern, callbacks):
    store.upsert_song(example_pattern)
    scheduler.load_for_track("A")

    assert scheduler.tick(4_999, True) == []
    assert scheduler.tick(5_000 + EVENT_DUE_WINDOW_MS, True) == []
    assert scheduler.tick(12_000 + EVENT_DUE_WINDOW_MS - 1, True) == [1]
    assert callbacks.intensities == []
    assert callbacks.messages == ["PUSH IT!"]


def test_multiple_due_events_fire_in_index_order(scheduler, store, callbacks):
    store.upsert_song(
        SongPattern(
            track_id="T",
            events=[
                PatternEvent.message(2_400, "late"),
                PatternEvent.intensity(2_000, 4),
                PatternEvent.message(2_100, "early"),
            ],
        )
    )
    scheduler.load_for_track("T")

    assert scheduler.tick(2_500, True) == [0, 1, 2]
    assert callbacks.messages == ["late", "early"]
    assert callbacks.intensities == [4]


def test_monotonic_ticks_apply_each_event_at_most_once(scheduler, store, callbacks):
    events = [PatternEvent.intensity(ts, 1 + (ts // 1_000) % 10) for ts in range(0, 20_000, 700)]
    store.upsert_song(SongPattern(track_id="T", events=events))
    scheduler.load_for_track("T")

    applied = []
    for position in range(0, 21_000, 250):
        applied.extend(scheduler.tick(position, True))

    assert sorted(applied) == list(range(len(events)))
    assert len(callbacks.intensities) == len(events)


def test_skipped_window_is_not_applied_retroactively(scheduler, store, example_pattern, callbacks):
    store.upsert_song(example_pattern)
    scheduler.load_for_track("A")

    scheduler.tick(4_000, True)
    scheduler.tick(8_000, True)
    scheduler.tick(13_500, True)

    assert callbacks.intensities == []
    assert callbacks.messages == []


def test_seeking_back_into_unreached_window_fires(scheduler, store, example_pattern, callbacks):
    store.upsert_song(example_pattern)
    scheduler.load_for_track("A")

    scheduler.tick(4_000, True)
    scheduler.tick(8_000, True)
    assert callbacks.intensities == []

    scheduler.tick(5_500, True)
    assert callbacks.intensities == [7]


def test_backward_seek_does_not_refire_until_reload(scheduler, store, example_pattern, callbacks):
    store.upsert_song(example_pattern)
    scheduler.load_for_track("A")

    scheduler.tick(5_100, True)
    scheduler.tick(5_050, True)
    assert callbacks.intensities == [7]

    scheduler.load_for_track("A")
    scheduler.tick(5_050, True)
    assert callbacks.intensities == [7, 7]


def test_reset_applied_rearms_events(scheduler, store, example_pattern, callbacks):
    store.upsert_song(example_pattern)
    scheduler.load_for_track("A")
    scheduler.tick(5_100, True)

    scheduler.reset_applied()
    assert scheduler.applied_indices == set()
    scheduler.tick(5_200, True)
    assert callbacks.intensities == [7, 7]


def test_unload_stops_replay(scheduler, store, example_pattern, callbacks):
    store.upsert_song(example_pattern)
    scheduler.load_for_track("A")
    scheduler.unload()

    assert scheduler.loaded is None
    assert scheduler.tick(5_100, True) == []


def test_additional_callbacks_are_invoked(scheduler, callbacks):
    extra = []
    scheduler.add_intensity_callback(extra.append)
    scheduler.add_message_callback(extra.append)

    scheduler.emit(PatternEvent.intensity(0, 9))
    scheduler.emit(PatternEvent.message(0, "POWER", "p"))

    assert extra == [9, "POWER"]
    assert callbacks.intensities == [9]
    assert callbacks.messages == ["POWER"]


def test_default_pattern_replays_on_schedule(scheduler, callbacks):
    scheduler.load_for_track("unknown")
    for position in (0, 30_000, 60_500, 90_000, 120_999):
        scheduler.tick(position, True)

    assert callbacks.intensities == [5, 7, 3]
