import random

import pytest

from crowdwatch.alerts import CRITICAL_ALERT_MESSAGE
from crowdwatch.config import ConsoleSettings
from crowdwatch.console import OperatorConsole
from crowdwatch.errors import ConsoleClosedError
from crowdwatch.models import (
    AnalysisState,
    DensitySnapshot,
    NoSource,
    RemoteUrl,
    Severity,
    UploadedFile,
    ZoneCount,
)
from crowdwatch.scheduler import ManualScheduler

MIB = 1024 * 1024


def _new_entries(console, before):
    return [e for e in console.entries if e.id > before]


def _last_id(console):
    return console.entries[-1].id if console.entries else 0


def test_push_55_events_keeps_last_50(console):
    for i in range(1, 56):
        console.push_event(f"event #{i}", Severity.INFO)

    assert len(console.entries) == 50
    assert console.entries[0].message == "event #6"
    assert console.entries[-1].message == "event #55"


def test_send_alert_does_not_touch_alert_state(console):
    entry = console.send_alert()
    assert entry.message == "ALERT: Manual alert triggered by Jane Smith"
    assert entry.severity is Severity.ERROR
    assert not console.alert_active


def test_critical_alert_forces_follow(console, scheduler):
    console.scroll_sampled(scroll_top=0, scroll_height=2000, client_height=300)
    assert not console.is_at_bottom

    entry = console.send_critical_alert()
    assert entry.message == CRITICAL_ALERT_MESSAGE
    assert entry.severity is Severity.ERROR
    assert console.is_at_bottom
    assert console.alert_active
    assert not console.snapshot().new_messages_available


def test_critical_alert_times_out_after_quiet_window(console, scheduler):
    console.send_critical_alert()
    scheduler.advance(4.0)
    console.send_critical_alert()
    scheduler.advance(4.0)
    assert console.alert_active

    scheduler.advance(1.0)
    assert not console.alert_active


def test_chat_message(console):
    before = _last_id(console)
    assert console.send_chat_message("Gate 2 clear")
    assert [e.message for e in _new_entries(console, before)] == ["Jane Smith: Gate 2 clear"]


def test_empty_chat_message_is_rejected(console):
    before = _last_id(console)
    assert not console.send_chat_message("   ")
    new = _new_entries(console, before)
    assert len(new) == 1
    assert new[0].severity is Severity.ERROR


def test_append_while_detached_does_not_follow(console):
    scrolls = []
    console.follow.on_auto_scroll = lambda: scrolls.append(True)
    console.scroll_sampled(0, 2000, 300)

    console.push_event("Motion detected in Zone A")
    assert not console.is_at_bottom
    assert console.snapshot().new_messages_available
    assert scrolls == []

    console.jump_to_latest()
    assert console.is_at_bottom
    assert scrolls == [True]


def test_oversize_file_leaves_source_unchanged(console):
    console.select_remote_source("https://youtu.be/abc123")
    before = _last_id(console)

    assert not console.select_file_source(b"x", "video/mp4", 101 * MIB, "big.mp4")

    new = _new_entries(console, before)
    assert len(new) == 1
    assert new[0].severity is Severity.ERROR
    assert console.media_source == RemoteUrl("https://youtu.be/abc123")


def test_valid_file_clears_remote_url(console):
    console.select_remote_source("https://youtu.be/abc123")
    assert console.select_file_source(b"video-bytes", "video/mp4", 50 * MIB, "lobby.mp4")

    source = console.media_source
    assert isinstance(source, UploadedFile)
    assert source.file_name == "lobby.mp4"
    assert console.snapshot().source.raw_input is None


def test_start_without_source_fails(console):
    before = _last_id(console)
    assert not console.start_analysis()
    assert console.analysis_state is AnalysisState.IDLE
    new = _new_entries(console, before)
    assert len(new) == 1
    assert new[0].severity is Severity.ERROR


def test_start_with_invalid_url_fails(console):
    console.select_remote_source("https://example.com/video")
    assert not console.start_analysis()
    assert console.analysis_state is AnalysisState.IDLE


def test_start_and_stop_with_valid_url(console):
    console.select_remote_source("https://youtu.be/abc123")

    before = _last_id(console)
    assert console.start_analysis()
    started = _new_entries(console, before)
    assert len(started) == 2
    assert all(e.severity is Severity.INFO for e in started)
    assert console.analysis_state is AnalysisState.RUNNING

    before = _last_id(console)
    assert console.stop_analysis()
    stopped = _new_entries(console, before)
    assert len(stopped) == 1
    assert stopped[0].severity is Severity.INFO
    assert console.analysis_state is AnalysisState.IDLE
    assert console.media_source == RemoteUrl("https://youtu.be/abc123")

    # Restart without re-selecting
    assert console.start_analysis()


def test_stop_while_idle_is_a_no_op(console):
    before = _last_id(console)
    assert not console.stop_analysis()
    assert _new_entries(console, before) == []


def test_clear_source_rejected_while_running(console):
    console.select_file_source(b"v", "video/mp4", 1, "clip.mp4")
    console.start_analysis()
    assert not console.clear_source()
    assert isinstance(console.media_source, UploadedFile)

    console.stop_analysis()
    assert console.clear_source()
    assert isinstance(console.media_source, NoSource)


def test_density_only_while_running(console, scheduler):
    scheduler.advance(20.0)
    assert console.density is None

    console.select_remote_source("https://youtu.be/abc123")
    console.start_analysis()
    scheduler.advance(5.0)
    snap = console.density
    assert snap is not None
    assert snap.total_count == sum(z.count for z in snap.zones)
    assert [z.zone_label for z in snap.zones] == ["Zone A", "Zone B", "Zone C"]

    console.stop_analysis()
    scheduler.advance(30.0)
    assert console.density == snap


def test_narrative_events_only_while_running(console, scheduler):
    narrative = {"Motion detected in Zone A", "Person entered restricted area",
                 "High density detected in Zone B", "Crowd dispersing in Zone C",
                 "Loitering detected near entrance", "Unattended object flagged in Zone A"}

    scheduler.advance(12.0)
    assert not any(e.message in narrative for e in console.entries)

    console.select_remote_source("https://youtu.be/abc123")
    console.start_analysis()
    before = _last_id(console)
    scheduler.advance(9.0)
    assert sum(e.message in narrative for e in _new_entries(console, before)) == 3


def test_health_events_run_unconditionally(settings):
    scheduler = ManualScheduler()
    console = OperatorConsole(scheduler, settings=settings, rng=random.Random(1))
    scheduler.advance(settings.health_interval_sec * 3)
    assert len(console.entries) == 3
    console.close()


def test_push_density_notifies_listeners(console):
    calls = []
    console.subscribe(lambda: calls.append(True))
    snap = DensitySnapshot(total_count=3, zones=(ZoneCount(zone_label="Zone A", count=3),))
    console.push_density(snap)
    assert console.density == snap
    assert calls == [True]


def test_snapshot_reflects_state(console):
    console.select_remote_source("https://youtu.be/abc123")
    console.send_critical_alert()
    snap = console.snapshot()

    assert snap.operator_name == "Jane Smith"
    assert snap.alert_active
    assert snap.alert_activated_at is not None
    assert snap.source.kind == "remote_url"
    assert snap.source.parsed_id == "abc123"
    assert snap.analysis_state is AnalysisState.IDLE
    assert snap.entries[-1].message == CRITICAL_ALERT_MESSAGE


def test_close_cancels_timers_and_releases_file(settings):
    scheduler = ManualScheduler()
    console = OperatorConsole(scheduler, settings=settings)
    console.select_file_source(b"v", "video/mp4", 1, "clip.mp4")
    upload = console.media_source
    console.start_analysis()
    console.send_critical_alert()

    console.close()

    assert scheduler.pending == 0
    assert upload.handle.released
    assert not console.alert_active
    assert console.closed

    count = len(console.entries)
    scheduler.advance(60.0)
    assert len(console.entries) == count


def test_context_manager_closes(settings):
    scheduler = ManualScheduler()
    with OperatorConsole(scheduler, settings=settings) as console:
        console.push_event("hello")
    assert console.closed
    assert scheduler.pending == 0


def test_custom_capacity():
    scheduler = ManualScheduler()
    console = OperatorConsole(scheduler, settings=ConsoleSettings(log_capacity=3))
    for i in range(5):
        console.push_event(str(i))
    assert [e.message for e in console.entries] == ["2", "3", "4"]
    console.close()


def test_closed_console_refuses_actions_and_schedules_nothing(settings):
    scheduler = ManualScheduler()
    console = OperatorConsole(scheduler, settings=settings)
    console.push_event("before close")
    console.close()
    count = len(console.entries)

    with pytest.raises(ConsoleClosedError):
        console.select_remote_source("https://youtu.be/abc123")
    with pytest.raises(ConsoleClosedError):
        console.start_analysis()
    with pytest.raises(ConsoleClosedError):
        console.send_critical_alert()
    with pytest.raises(ConsoleClosedError):
        console.push_event("after close")
    with pytest.raises(ConsoleClosedError):
        console.push_density(DensitySnapshot(total_count=0, zones=()))

    assert scheduler.pending == 0
    scheduler.advance(30.0)
    assert len(console.entries) == count
    assert console.density is None
    assert not console.alert_active


def test_select_local_file_adopts_video(console, tmp_path):
    clip = tmp_path / "lobby.mp4"
    clip.write_bytes(b"\x00\x00\x00\x18ftyp")

    assert console.select_local_file(clip) is True
    source = console.media_source
    assert isinstance(source, UploadedFile)
    assert source.file_name == "lobby.mp4"
    assert source.content_type == "video/mp4"
    assert source.size_bytes == 8
    assert source.handle.read() == b"\x00\x00\x00\x18ftyp"


def test_unreadable_local_file_becomes_one_error_entry(console, tmp_path):
    console.select_remote_source("https://youtu.be/abc123")

    assert console.select_local_file(tmp_path / "gone.mp4") is False
    assert len(console.entries) == 1
    entry = console.entries[-1]
    assert entry.severity is Severity.ERROR
    assert entry.message.startswith("Could not read gone.mp4")
    assert isinstance(console.media_source, RemoteUrl)


def test_oversized_local_file_is_not_loaded(scheduler, tmp_path):
    console = OperatorConsole(scheduler, settings=ConsoleSettings(max_upload_bytes=4))
    clip = tmp_path / "big.mp4"
    clip.write_bytes(b"\x00" * 16)

    assert console.select_local_file(clip) is False
    assert console.entries[-1].message == "File size must be less than 4 bytes"
    assert isinstance(console.media_source, NoSource)
    console.close()
