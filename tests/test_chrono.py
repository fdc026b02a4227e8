import pytest

from typetutor.core.chrono import SessionClock
from typetutor.core.models import SessionPhase


@pytest.fixture
def clock(fake_clock):
    c = SessionClock(time_limit_ms=3000, now_fn=fake_clock)
    yield c
    c.reset()


def test_starts_once(clock, fake_clock):
    assert clock.phase is SessionPhase.NOT_STARTED
    assert clock.elapsed_ms() == 0
    assert clock.start()
    assert clock.phase is SessionPhase.ACTIVE
    assert clock.timers_running()
    assert not clock.start()


def test_pause_excludes_paused_interval(clock, fake_clock):
    clock.start()
    fake_clock.advance(1000)
    assert clock.pause()
    assert not clock.timers_running()
    fake_clock.advance(5000)
    assert clock.elapsed_ms() == 1000
    assert clock.resume()
    assert clock.timers_running()
    fake_clock.advance(500)
    assert clock.elapsed_ms() == 1500
    assert clock.paused_accumulated_ms == 5000


def test_pause_and_resume_only_from_matching_phase(clock):
    assert not clock.pause()
    assert not clock.resume()
    clock.start()
    assert not clock.resume()


def test_finish_freezes_total_and_is_idempotent(clock, fake_clock):
    clock.start()
    fake_clock.advance(2000)
    assert clock.finish()
    assert clock.phase is SessionPhase.COMPLETE
    assert not clock.timers_running()
    fake_clock.advance(9000)
    assert clock.elapsed_ms() == 2000
    assert clock.total_ms == 2000
    assert not clock.finish()


def test_finish_while_paused_excludes_pause(clock, fake_clock):
    clock.start()
    fake_clock.advance(700)
    clock.pause()
    fake_clock.advance(3000)
    assert clock.finish()
    assert clock.total_ms == 700


def test_finish_before_start_is_ignored(clock):
    assert not clock.finish()
    assert clock.phase is SessionPhase.NOT_STARTED


def test_countdown_expires_at_zero(clock, fake_clock):
    expired = []
    remaining = []
    clock.expired.connect(lambda: expired.append(True))
    clock.remainingChanged.connect(remaining.append)
    clock.start()
    for _ in range(2):
        fake_clock.advance(1000)
        clock._on_countdown()
    assert not expired
    fake_clock.advance(1000)
    clock._on_countdown()
    assert remaining == [2000, 1000, 0]
    assert expired == [True]
    assert not clock.timers_running()


def test_late_timeouts_are_ignored(clock):
    ticks = []
    clock.ticked.connect(ticks.append)
    clock.start()
    clock.pause()
    clock._on_tick()
    clock._on_countdown()
    assert ticks == []
    assert clock.remaining_ms == 3000


def test_tick_reports_active_elapsed(clock, fake_clock):
    ticks = []
    clock.ticked.connect(ticks.append)
    clock.start()
    fake_clock.advance(500)
    clock._on_tick()
    assert ticks == [500]


def test_untimed_clock_runs_no_countdown(fake_clock):
    c = SessionClock(now_fn=fake_clock)
    c.start()
    assert c.remaining_ms is None
    assert not c._countdown.isActive()
    assert c._tick.isActive()
    c.finish()


def test_reset_returns_to_not_started(clock, fake_clock):
    clock.start()
    fake_clock.advance(100)
    clock.reset(5000)
    assert clock.phase is SessionPhase.NOT_STARTED
    assert clock.remaining_ms == 5000
    assert clock.elapsed_ms() == 0
    assert not clock.timers_running()


def test_remaining_follows_active_time_across_pauses(clock, fake_clock):
    clock.start()
    fake_clock.advance(400)
    clock.pause()
    assert clock.remaining_ms == 2600
    fake_clock.advance(5000)
    clock.resume()
    assert clock._countdown.interval() == 600

    fake_clock.advance(600)
    clock._on_countdown()
    assert clock.remaining_ms == 2000
    assert clock._countdown.interval() == 1000


def test_default_clock_measures_real_time():
    c = SessionClock(time_limit_ms=1000)
    c.start()
    assert 0 <= c.elapsed_ms() < 1000
    c.finish()
