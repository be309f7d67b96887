"""Shared fakes for the device ports and the scheduler clock."""

from __future__ import annotations

import pytest

from alarmed.ports import Navigator, Notifier, SoundError, SoundPlayer, Vibrator
from alarmed.timer import Scheduler


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self) -> None:
        self.t = 0.0

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += seconds


class FakeSound(SoundPlayer):
    def __init__(self, fail_on: str = "") -> None:
        self.calls: list[str] = []
        self.volume = 0.0
        self.playing = False
        self.fail_on = fail_on

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name == self.fail_on:
            raise SoundError(f"{name} failed")

    def load(self, sound: str, volume: float, loop: bool = True) -> None:
        self._record("load")
        self.volume = volume

    def play(self) -> None:
        self._record("play")
        self.playing = True

    def stop(self) -> None:
        self._record("stop")
        self.playing = False

    def set_volume(self, volume: float) -> None:
        self._record("set_volume")
        self.volume = volume

    def unload(self) -> None:
        self._record("unload")


class FakeVibrator(Vibrator):
    def __init__(self) -> None:
        self.vibrating = False

    def start(self, pattern: tuple[int, ...]) -> None:
        self.vibrating = True

    def cancel(self) -> None:
        self.vibrating = False


class FakeNavigator(Navigator):
    def __init__(self) -> None:
        self.ringing: list[int] = []
        self.ended = 0

    def alarm_ringing(self, alarm_id: int) -> None:
        self.ringing.append(alarm_id)

    def session_ended(self) -> None:
        self.ended += 1


class FakeNotifier(Notifier):
    def __init__(self) -> None:
        self.reminders: list[int] = []

    def remind_keep_running(self, active_count: int) -> None:
        self.reminders.append(active_count)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def scheduler(clock: FakeClock) -> Scheduler:
    return Scheduler(clock=clock)


@pytest.fixture()
def sound() -> FakeSound:
    return FakeSound()


@pytest.fixture()
def vibrator() -> FakeVibrator:
    return FakeVibrator()


@pytest.fixture()
def navigator() -> FakeNavigator:
    return FakeNavigator()


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def broken_sound() -> FakeSound:
    return FakeSound(fail_on="play")
