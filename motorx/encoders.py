"""
Encoder Reader - Pass-through access to the two wheel pulse counters.
"""

import logging

from .interfaces import EncoderCounters
from .types import WheelId


logger = logging.getLogger(__name__)


# Wheels with a physical encoder; everything else reads the sentinel 0
_LEFT_ENCODER = WheelId.FRONT_LEFT     # M1, also WheelId.LEFT
_RIGHT_ENCODER = WheelId.FRONT_RIGHT   # M2, also WheelId.RIGHT


class EncoderReader:
    """
    Reads and resets the hardware counters.

    No filtering, accumulation or overflow handling beyond what the
    counter backend provides.
    """

    def __init__(self, counters: EncoderCounters) -> None:
        self.counters = counters

    def reset(self, wheel: WheelId = WheelId.ALL) -> None:
        """
        Zero both counters.

        The counters can only be reset together, so the wheel selector is
        accepted for symmetry with count() and otherwise ignored.
        """
        selector = "ALL" if wheel == WheelId.ALL else f"M{int(wheel)}"
        logger.debug(f"Encoder reset ({selector})")
        self.counters.reset()

    def count(self, wheel: WheelId) -> int:
        """
        Read the counter wired to a wheel.

        Args:
            wheel: Wheel to read

        Returns:
            Pulse count, or 0 for a wheel without an encoder (including ALL).
            The 0 is a sentinel, not a reading.
        """
        if wheel == _LEFT_ENCODER:
            return self.counters.count_left()
        if wheel == _RIGHT_ENCODER:
            return self.counters.count_right()
        return 0
