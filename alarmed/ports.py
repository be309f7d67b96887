"""Ports for the collaborators the alarm core talks to but does not own."""

from __future__ import annotations

from abc import ABC, abstractmethod


class SoundError(RuntimeError):
    """Raised by a SoundPlayer when a sound cannot be loaded or played."""


class SoundPlayer(ABC):
    """Plays the looping alarm sound."""

    @abstractmethod
    def load(self, sound: str, volume: float, loop: bool = True) -> None:
        """Prepare ``sound`` at the given initial volume."""

    @abstractmethod
    def play(self) -> None: ...

    @abstractmethod
    def stop(self) -> None: ...

    @abstractmethod
    def set_volume(self, volume: float) -> None: ...

    @abstractmethod
    def unload(self) -> None: ...


class Vibrator(ABC):
    """Device vibration."""

    @abstractmethod
    def start(self, pattern: tuple[int, ...]) -> None:
        """Vibrate repeatedly using ``pattern`` (milliseconds)."""

    @abstractmethod
    def cancel(self) -> None: ...


class Navigator(ABC):
    """Screen transitions are owned by the front end; the core only signals."""

    @abstractmethod
    def alarm_ringing(self, alarm_id: int) -> None:
        """An alarm started ringing: show the challenge."""

    @abstractmethod
    def session_ended(self) -> None:
        """The ringing session is over: go back to the alarm list."""


class Notifier(ABC):
    """Advisory notifications. Nothing in the core depends on the outcome."""

    @abstractmethod
    def remind_keep_running(self, active_count: int) -> None:
        """Tell the user alarms only fire while the app is running."""


class NullVibrator(Vibrator):
    """For hosts without a vibration motor."""

    def start(self, pattern: tuple[int, ...]) -> None:
        pass

    def cancel(self) -> None:
        pass
