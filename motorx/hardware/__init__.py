"""
Mock hardware - For testing without a robot.

Records motor writes instead of driving a board, returns scripted line
sensor levels and settable encoder counts. Real backends live in
motorx.hardware.pca9685 (smbus2) and motorx.hardware.gpio (lgpio) and
are imported explicitly, so this package loads on any machine.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from motorx.types import SensorConfig, SensorPattern


logger = logging.getLogger(__name__)


class MockMotorBoard:
    """
    Mock motor board.

    Logs writes instead of sending them and keeps the full history.
    """

    def __init__(self) -> None:
        # ("duty", channel, percent) or ("all_off", 0, 0), in call order
        self.writes: List[Tuple[str, int, int]] = []
        self.duty: Dict[int, int] = {channel: 0 for channel in range(1, 5)}

    def write_channel_duty(self, channel: int, percent: int) -> None:
        """Record a channel write"""
        self.writes.append(("duty", channel, percent))
        self.duty[channel] = percent
        logger.debug(f"[MOCK] Motor M{channel} -> Speed {percent}")

    def write_all_off(self) -> None:
        """Record a broadcast stop"""
        self.writes.append(("all_off", 0, 0))
        for channel in self.duty:
            self.duty[channel] = 0
        logger.debug("[MOCK] Stop All")

    @property
    def all_off_count(self) -> int:
        """Number of broadcast stops (for testing)"""
        return sum(1 for kind, _, _ in self.writes if kind == "all_off")

    @property
    def vector(self) -> Tuple[int, int, int, int]:
        """Current duty on M1..M4 (for testing)"""
        return tuple(self.duty[channel] for channel in range(1, 5))

    def clear(self) -> None:
        """Forget the write history, keep current duties"""
        self.writes.clear()


class MockPins:
    """
    Mock digital pins.

    Returns fixed levels set with set_level(), or steps through a script of
    sensor patterns, one pattern per full read of the 4 sensors.
    """

    def __init__(
        self,
        levels: Optional[Dict[int, int]] = None,
        script: Optional[Sequence[SensorPattern]] = None,
        sensor_config: Optional[SensorConfig] = None,
    ) -> None:
        """
        Initialize mock pins.

        Args:
            levels: Fixed pin levels, unset pins read off the line
            script: Sensor patterns to play back in sequence. The last
                   pattern repeats once the script runs out.
            sensor_config: Wiring used to turn patterns into pin levels
        """
        self._levels: Dict[int, int] = dict(levels or {})
        self._script: List[SensorPattern] = list(script or [])
        self._config = sensor_config or SensorConfig()
        self._index = 0
        self._reads = 0
        if self._script:
            self._load(self._script[0])

    def read_digital_pin(self, pin: int) -> int:
        """Return the current level, advancing the script every 4 reads"""
        level = self._levels.get(pin, 1 - int(self._config.color))
        self._reads += 1
        if self._script and self._reads % len(self._config.pins) == 0:
            self._index = min(self._index + 1, len(self._script) - 1)
            self._load(self._script[self._index])
        return level

    def set_level(self, pin: int, level: int) -> None:
        self._levels[pin] = 1 if level else 0

    def set_pattern(self, pattern: SensorPattern) -> None:
        """Set pin levels so the sensors report a pattern"""
        self._load(pattern)

    def _load(self, pattern: SensorPattern) -> None:
        # The script is written in line-detected terms for the configured color
        on_line = int(self._config.color)
        for sensor, active in zip(self._config.pattern_order, pattern.as_tuple()):
            pin = self._config.pins[sensor]
            self._levels[pin] = on_line if active else 1 - on_line


class MockEncoders:
    """Mock encoder counters with settable counts"""

    def __init__(self, left: int = 0, right: int = 0) -> None:
        self.left = left
        self.right = right
        self.reset_count = 0

    def reset(self) -> None:
        self.left = 0
        self.right = 0
        self.reset_count += 1
        logger.debug("[MOCK] Reset Enc")

    def count_left(self) -> int:
        return self.left

    def count_right(self) -> int:
        return self.right


class SensorScripts:
    """Pre-defined line sensor scripts (outer_left, left, right, outer_right)"""

    @staticmethod
    def straight_track() -> List[SensorPattern]:
        """Line stays centred"""
        return [SensorPattern.from_bits(0, 1, 1, 0)] * 5

    @staticmethod
    def left_curve() -> List[SensorPattern]:
        """Line drifts out to the left and comes back"""
        return [
            SensorPattern.from_bits(0, 1, 1, 0),
            SensorPattern.from_bits(0, 1, 0, 0),
            SensorPattern.from_bits(1, 1, 0, 0),
            SensorPattern.from_bits(1, 0, 0, 0),
            SensorPattern.from_bits(1, 1, 0, 0),
            SensorPattern.from_bits(0, 1, 1, 0),
        ]

    @staticmethod
    def right_curve() -> List[SensorPattern]:
        """Line drifts out to the right and comes back"""
        return [
            SensorPattern.from_bits(0, 1, 1, 0),
            SensorPattern.from_bits(0, 0, 1, 0),
            SensorPattern.from_bits(0, 0, 1, 1),
            SensorPattern.from_bits(0, 0, 0, 1),
            SensorPattern.from_bits(0, 0, 1, 1),
            SensorPattern.from_bits(0, 1, 1, 0),
        ]

    @staticmethod
    def gap_and_crossing() -> List[SensorPattern]:
        """Line breaks off, then an intersection"""
        return [
            SensorPattern.from_bits(0, 1, 1, 0),
            SensorPattern.from_bits(0, 0, 0, 0),
            SensorPattern.from_bits(0, 0, 0, 0),
            SensorPattern.from_bits(1, 1, 1, 1),
            SensorPattern.from_bits(0, 1, 1, 0),
        ]

    @classmethod
    def load(cls, name: str) -> List[SensorPattern]:
        """
        Load a script by name.

        Args:
            name: Script name (straight, left_curve, right_curve, gap)

        Raises:
            KeyError: Unknown script name
        """
        script_map = {
            "straight": cls.straight_track,
            "left_curve": cls.left_curve,
            "right_curve": cls.right_curve,
            "gap": cls.gap_and_crossing,
        }
        return script_map[name]()


__all__ = [
    "MockMotorBoard",
    "MockPins",
    "MockEncoders",
    "SensorScripts",
]
