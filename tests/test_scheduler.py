import pytest

from collision_guard.runtime.scheduler import TickScheduler


class FakeClock:
    def __init__(self):
        self.t = 0.0

    def now(self):
        return self.t

    def sleep(self, dt):
        self.t += dt


def test_runs_fixed_number_of_ticks_on_interval():
    clock = FakeClock()
    seen = []
    sched = TickScheduler(interval_s=0.2, clock=clock.now, sleep=clock.sleep)

    stats = sched.run(lambda i: seen.append((i, clock.t)), max_ticks=5)

    assert stats.ticks == 5
    assert stats.skipped == 0
    assert [i for i, _ in seen] == [0, 1, 2, 3, 4]
    assert [t for _, t in seen] == pytest.approx([0.0, 0.2, 0.4, 0.6, 0.8])


def test_overrunning_ticks_are_skipped_not_queued():
    clock = FakeClock()
    sched = TickScheduler(interval_s=1.0, clock=clock.now, sleep=clock.sleep)

    def slow(_):
        clock.t += 2.5

    stats = sched.run(slow, max_ticks=2)
    assert stats.ticks == 2
    assert stats.skipped == 4


def test_stop_from_inside_tick():
    clock = FakeClock()
    sched = TickScheduler(interval_s=0.2, clock=clock.now, sleep=clock.sleep)

    def tick(i):
        if i == 2:
            sched.stop()

    stats = sched.run(tick)
    assert stats.ticks == 3
    assert sched.stopped


def test_tick_errors_propagate():
    clock = FakeClock()
    sched = TickScheduler(clock=clock.now, sleep=clock.sleep)

    def boom(_):
        raise RuntimeError("sink failed")

    with pytest.raises(RuntimeError):
        sched.run(boom, max_ticks=3)


def test_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        TickScheduler(interval_s=0)
