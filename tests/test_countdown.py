from datetime import date, datetime, timedelta, timezone

from dashboard.countdown import CountdownRegistry, CountdownTimer
from dashboard.recurrence import TimeLeft


class Clock:

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


def test_tick_reports_time_left():
    clock = Clock(datetime(2024, 3, 1, 22, 0, tzinfo=timezone.utc))
    ticks = []
    timer = CountdownTimer(date(2024, 3, 2), ticks.append, clock=clock)
    timer.tick()
    clock.now += timedelta(minutes=30)
    timer.tick()
    assert ticks == [TimeLeft(hours=2), TimeLeft(hours=1, minutes=30)]


def test_run_stops_when_cancelled():
    ticks = []
    timer = CountdownTimer(date(2024, 3, 2), ticks.append,
                           clock=Clock(datetime(2024, 3, 1, tzinfo=timezone.utc)))

    def sleep(interval):
        if len(ticks) == 3:
            timer.cancel()

    timer._sleep = sleep
    timer.run()
    assert len(ticks) == 3
    assert timer.cancelled


def _registry():
    spawned = []
    registry = CountdownRegistry(spawn=spawned.append,
                                 clock=Clock(datetime(2024, 3, 1, tzinfo=timezone.utc)))
    return registry, spawned


def test_watch_replaces_existing_timer():
    registry, spawned = _registry()
    first = registry.watch('sid-1', 'b1', date(2024, 3, 5), lambda t: None)
    second = registry.watch('sid-1', 'b1', date(2024, 3, 6), lambda t: None)
    assert first.cancelled
    assert not second.cancelled
    assert registry.active('sid-1') == ['b1']
    assert len(spawned) == 2


def test_cancel_owner_only_touches_that_owner():
    registry, _ = _registry()
    mine = registry.watch('sid-1', 'b1', date(2024, 3, 5), lambda t: None)
    registry.watch('sid-1', 'b2', date(2024, 3, 6), lambda t: None)
    theirs = registry.watch('sid-2', 'b1', date(2024, 3, 5), lambda t: None)

    assert registry.cancel_owner('sid-1') == 2
    assert mine.cancelled
    assert not theirs.cancelled
    assert registry.active() == ['b1']


def test_timers_are_independent():
    registry, _ = _registry()
    seen = {'b1': [], 'b2': []}
    t1 = registry.watch('sid-1', 'b1', date(2024, 3, 2), seen['b1'].append)
    t2 = registry.watch('sid-1', 'b2', date(2024, 3, 3), seen['b2'].append)
    t1.tick()
    registry.cancel('sid-1', 'b1')
    t2.tick()
    assert seen['b1'] == [TimeLeft(days=1)]
    assert seen['b2'] == [TimeLeft(days=2)]
    assert registry.active() == ['b2']


def test_cancel_all():
    registry, _ = _registry()
    timers = [registry.watch(f'sid-{i}', 'b1', date(2024, 3, 5), lambda t: None) for i in range(3)]
    registry.cancel_all()
    assert all(t.cancelled for t in timers)
    assert registry.active() == []
