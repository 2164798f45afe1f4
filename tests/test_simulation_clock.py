import threading
import time

import pytest

from BremsLabSim.core import SimulationClock


class Recorder:
    def __init__(self):
        self.frames = 0
        self.doses = 0

    def frame(self):
        self.frames += 1

    def dose(self):
        self.doses += 1


@pytest.fixture
def calls():
    return Recorder()


@pytest.fixture
def clock(calls, fake_time):
    return SimulationClock(
        calls.frame, calls.dose,
        frame_period=0.25, dose_period=0.5,
        time_source=fake_time, sleep=fake_time.sleep
    )


def test_drivers_fire_at_their_own_periods(clock, calls):
    clock.start(now=0.0)
    for i in range(5):
        clock.poll(i * 0.25)
    assert calls.frames == 5
    assert calls.doses == 3


def test_first_firing_is_immediate(clock, calls):
    clock.start(now=0.0)
    assert clock.poll(0.0) == 2
    assert clock.poll(0.1) == 0


def test_start_and_stop_are_idempotent(clock, calls):
    clock.start(now=0.0)
    clock.poll(0.0)
    clock.start(now=0.1)
    assert clock.frame_driver.next_due == 0.25

    clock.stop()
    clock.stop()
    assert not clock.running
    assert clock.poll(10.0) == 0
    assert clock.time_until_next() is None
    assert (calls.frames, calls.doses) == (1, 1)


def test_missed_periods_are_skipped(clock, calls):
    clock.start(now=0.0)
    clock.poll(0.0)
    assert clock.poll(10.0) == 2
    assert calls.frames == 2
    assert clock.frame_driver.next_due == pytest.approx(10.25)


def test_callback_may_stop_clock(fake_time):
    fired = []
    holder = {}

    def frame():
        fired.append('frame')
        holder['clock'].stop()

    clock = SimulationClock(frame, lambda: fired.append('dose'), time_source=fake_time)
    holder['clock'] = clock
    clock.start()
    assert clock.poll() == 1
    assert fired == ['frame']


def test_run_for_duration(clock, calls, fake_time):
    clock.run(duration=1.0)
    assert calls.frames == 4
    assert calls.doses == 2
    assert fake_time.now == pytest.approx(1.0)
    assert not clock.running


@pytest.mark.parametrize("frame_period, dose_period", [(0.0, 0.5), (0.1, -1.0)])
def test_rejects_non_positive_periods(calls, frame_period, dose_period):
    with pytest.raises(ValueError):
        SimulationClock(calls.frame, calls.dose, frame_period, dose_period)


def test_stop_from_another_thread_halts_callbacks(calls):
    clock = SimulationClock(calls.frame, calls.dose, frame_period=0.005, dose_period=0.02)
    worker = threading.Thread(target=clock.run)
    worker.start()
    time.sleep(0.1)
    clock.stop()
    frames_at_stop = calls.frames
    worker.join(timeout=2.0)

    assert not worker.is_alive()
    assert frames_at_stop > 0
    assert calls.frames == frames_at_stop
