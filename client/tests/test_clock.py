from nothingbox_core.clock import SessionClock


def make_clock(scheduler, ticks, period=1.0):
    return SessionClock(scheduler, lambda: ticks.append(scheduler.now),
                        period_sec=period, monotonic=scheduler.monotonic)


def test_one_tick_per_second(scheduler):
    ticks = []
    clock = make_clock(scheduler, ticks)
    clock.start()
    scheduler.advance(5.5)
    assert ticks == [1.0, 2.0, 3.0, 4.0, 5.0]
    assert clock.ticks == 5


def test_late_callbacks_do_not_accumulate_drift(scheduler):
    ticks = []
    clock = make_clock(scheduler, ticks)
    clock.start()
    # Every callback runs 300ms late; a chained 1s delay would lose ~23 ticks here
    scheduler.advance(100.5, lateness=0.3)
    assert clock.ticks == 100
    assert abs(ticks[-1] - 100.3) < 1e-6


def test_stop_cancels_pending_timer(scheduler):
    ticks = []
    clock = make_clock(scheduler, ticks)
    clock.start()
    scheduler.advance(2.5)
    clock.stop()
    assert not clock.running
    assert scheduler.pending == 0
    scheduler.advance(10)
    assert len(ticks) == 2


def test_start_twice_keeps_a_single_timer(scheduler):
    ticks = []
    clock = make_clock(scheduler, ticks)
    clock.start()
    clock.start()
    assert scheduler.pending == 1
    scheduler.advance(3.5)
    assert len(ticks) == 3


def test_stop_is_idempotent(scheduler):
    clock = make_clock(scheduler, [])
    clock.stop()
    clock.start()
    clock.stop()
    clock.stop()
    assert scheduler.pending == 0


def test_failing_tick_handler_keeps_clock_running(scheduler):
    calls = []

    def on_tick():
        calls.append(1)
        raise RuntimeError("boom")

    clock = SessionClock(scheduler, on_tick, monotonic=scheduler.monotonic)
    clock.start()
    scheduler.advance(3.5)
    assert len(calls) == 3
    assert clock.running


def test_handler_can_stop_the_clock(scheduler):
    holder = {}

    def on_tick():
        holder["clock"].stop()

    clock = SessionClock(scheduler, on_tick, monotonic=scheduler.monotonic)
    holder["clock"] = clock
    clock.start()
    scheduler.advance(5)
    assert clock.ticks == 1
    assert scheduler.pending == 0


def test_stalled_loop_drops_missed_ticks(scheduler):
    ticks = []
    clock = make_clock(scheduler, ticks)
    clock.start()
    scheduler.advance(1.5)

    # Main loop blocked for two minutes: the overdue timer fires once and the
    # clock picks up on the next boundary instead of replaying 120 ticks.
    scheduler.now += 120
    scheduler.advance(0.5)
    assert ticks == [1.0, 121.5, 122.0]

    scheduler.advance(2)
    assert clock.ticks == 5
    assert ticks[-1] == 124.0
