from datetime import timedelta

import pytest

from crowdwatch.alerts import AlertController
from crowdwatch.errors import ConsoleClosedError
from crowdwatch.scheduler import ManualScheduler


@pytest.fixture
def scheduler():
    return ManualScheduler()


def test_trigger_then_expire(scheduler):
    changes = []
    alert = AlertController(scheduler, duration=5.0, on_change=changes.append)

    alert.trigger()
    assert alert.active
    assert alert.activated_at == scheduler.now()
    assert alert.deadline == scheduler.now() + timedelta(seconds=5)

    scheduler.advance(4.0)
    assert alert.active

    scheduler.advance(1.0)
    assert not alert.active
    assert alert.activated_at is None
    assert changes == [True, False]


def test_retrigger_restarts_window(scheduler):
    alert = AlertController(scheduler, duration=5.0)

    alert.trigger()
    scheduler.advance(3.0)
    alert.trigger()

    scheduler.advance(4.0)  # 7s after the first trigger
    assert alert.active

    scheduler.advance(1.0)  # 5s after the second trigger
    assert not alert.active


def test_retrigger_keeps_single_timer(scheduler):
    alert = AlertController(scheduler, duration=5.0)
    for _ in range(3):
        alert.trigger()
        scheduler.advance(1.0)
    assert scheduler.pending == 1


def test_close_cancels_pending_timer(scheduler):
    alert = AlertController(scheduler)
    alert.trigger()
    alert.close()
    assert not alert.active
    assert scheduler.pending == 0


def test_duration_must_be_positive(scheduler):
    with pytest.raises(ValueError):
        AlertController(scheduler, duration=0)


def test_trigger_after_close_is_refused(scheduler):
    alert = AlertController(scheduler)
    alert.close()
    with pytest.raises(ConsoleClosedError):
        alert.trigger()
    assert scheduler.pending == 0
    assert not alert.active
