"""
Hardware boundary interfaces (protocols).

These define the contracts every hardware backend must follow. The core
only ever talks to the board, the pins and the encoders through them, so
a mock and a real board are interchangeable.
"""

from typing import Callable, Protocol


# Blocking sleep in seconds, time.sleep on real hardware
Sleeper = Callable[[float], None]


class MotorBoard(Protocol):
    """
    Interface for the 4-channel motor driver chip.

    Writes are fire-and-forget: transport errors propagate to the caller,
    nothing is retried.
    """

    def write_channel_duty(self, channel: int, percent: int) -> None:
        """
        Drive one motor channel.

        Args:
            channel: Motor channel 1..4 (M1..M4)
            percent: Signed duty -100..100, sign is rotation direction
        """
        ...

    def write_all_off(self) -> None:
        """
        Release every output at once.

        May use a cheaper broadcast path than writing 0 to each channel.
        """
        ...


class PinReader(Protocol):
    """Interface for digital input pins"""

    def read_digital_pin(self, pin: int) -> int:
        """
        Read a digital pin level.

        Args:
            pin: Pin id as wired on the board

        Returns:
            0 or 1
        """
        ...


class EncoderCounters(Protocol):
    """
    Interface for the two hardware pulse counters.

    Only the left (M1) and right (M2) wheels carry encoders.
    """

    def reset(self) -> None:
        """Zero both counters"""
        ...

    def count_left(self) -> int:
        """Current left counter value"""
        ...

    def count_right(self) -> int:
        """Current right counter value"""
        ...
