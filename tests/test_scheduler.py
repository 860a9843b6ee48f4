"""Tests for keyed delayed callbacks."""


def test_new_schedule_supersedes_pending(scheduler, timers):
    fired = []
    scheduler.schedule("search", 0.5, lambda: fired.append("a"))
    scheduler.schedule("search", 0.5, lambda: fired.append("ab"))

    assert timers[0].cancelled
    timers[0].fire()
    timers[1].fire()

    assert fired == ["ab"]
    assert not scheduler.pending("search")


def test_keys_are_independent(scheduler, timers):
    fired = []
    scheduler.schedule("a", 1, lambda: fired.append("a"))
    scheduler.schedule("b", 1, lambda: fired.append("b"))

    for timer in timers:
        timer.fire()
    assert sorted(fired) == ["a", "b"]


def test_cancel(scheduler, timers):
    fired = []
    scheduler.schedule("a", 1, lambda: fired.append("a"))

    assert scheduler.pending("a")
    assert scheduler.cancel("a") is True
    assert scheduler.cancel("a") is False
    timers[0].fire()
    assert fired == []


def test_cancel_all(scheduler, timers):
    scheduler.schedule("a", 1, lambda: None)
    scheduler.schedule("b", 1, lambda: None)
    scheduler.cancel_all()

    assert all(timer.cancelled for timer in timers)
    assert not scheduler.pending("a")


def test_timers_are_daemons(scheduler, timers):
    scheduler.schedule("a", 1, lambda: None)
    assert timers[0].daemon is True
    assert timers[0].started is True
    assert timers[0].interval == 1
