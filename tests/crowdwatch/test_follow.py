import pytest

from crowdwatch.follow import FollowStateTracker
from crowdwatch.log_buffer import LogBuffer
from crowdwatch.models import FollowMode


@pytest.fixture
def tracker():
    return FollowStateTracker(threshold_px=10)


def test_starts_following(tracker):
    assert tracker.mode is FollowMode.FOLLOWING
    assert tracker.is_at_bottom
    assert not tracker.new_messages_available


@pytest.mark.parametrize("scroll_top,expected", [
    (800, True),   # exactly at bottom
    (790, True),   # 10px away, within threshold
    (789, False),  # 11px away
    (0, False),
])
def test_sample_threshold(tracker, scroll_top, expected):
    tracker.sample(scroll_top=scroll_top, scroll_height=1000, client_height=200)
    assert tracker.is_at_bottom is expected


def test_detach_then_scroll_back(tracker):
    tracker.sample(0, 1000, 200)
    assert tracker.mode is FollowMode.DETACHED
    tracker.sample(795, 1000, 200)
    assert tracker.mode is FollowMode.FOLLOWING


def test_append_while_detached_keeps_detached():
    buf = LogBuffer()
    scrolls = []
    tracker = FollowStateTracker(on_auto_scroll=lambda: scrolls.append(True))
    buf.subscribe(tracker.on_append)

    tracker.sample(0, 1000, 200)
    buf.append("first")
    buf.append("second")

    assert not tracker.is_at_bottom
    assert tracker.new_messages_available
    assert scrolls == []


def test_append_while_following_auto_scrolls():
    buf = LogBuffer()
    scrolls = []
    tracker = FollowStateTracker(on_auto_scroll=lambda: scrolls.append(True))
    buf.subscribe(tracker.on_append)

    buf.append("first")
    buf.append("second")

    assert len(scrolls) == 2
    assert not tracker.new_messages_available


def test_jump_to_latest_resumes_following(tracker):
    tracker.sample(0, 1000, 200)
    tracker.on_append(None)
    assert tracker.new_messages_available

    tracker.jump_to_latest()
    assert tracker.is_at_bottom
    assert not tracker.new_messages_available


def test_reaching_bottom_clears_new_messages(tracker):
    tracker.sample(0, 1000, 200)
    tracker.on_append(None)
    tracker.sample(800, 1000, 200)
    assert not tracker.new_messages_available


def test_negative_threshold_rejected():
    with pytest.raises(ValueError):
        FollowStateTracker(threshold_px=-1)
