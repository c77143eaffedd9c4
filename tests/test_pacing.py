"""Tests for trendideas/pacing.py: Pacer."""

from trendideas.pacing import Pacer


class FakeClock:
    def __init__(self):
        self.now = 100.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class TestPacer:
    def test_first_call_does_not_wait(self):
        clock = FakeClock()
        Pacer(2.0, clock=clock, sleep=clock.sleep).wait()
        assert clock.sleeps == []

    def test_back_to_back_calls_are_spaced(self):
        clock = FakeClock()
        pacer = Pacer(2.0, clock=clock, sleep=clock.sleep)
        pacer.wait()
        clock.now += 0.5
        pacer.wait()
        assert clock.sleeps == [1.5]

    def test_no_wait_after_interval_elapsed(self):
        clock = FakeClock()
        pacer = Pacer(2.0, clock=clock, sleep=clock.sleep)
        pacer.wait()
        clock.now += 3.0
        pacer.wait()
        assert clock.sleeps == []

    def test_reset(self):
        clock = FakeClock()
        pacer = Pacer(2.0, clock=clock, sleep=clock.sleep)
        pacer.wait()
        pacer.reset()
        pacer.wait()
        assert clock.sleeps == []

    def test_zero_interval_never_sleeps(self):
        clock = FakeClock()
        pacer = Pacer(0, clock=clock, sleep=clock.sleep)
        for _ in range(3):
            pacer.wait()
        assert clock.sleeps == []
