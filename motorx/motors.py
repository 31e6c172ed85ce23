"""
Motor Channel Driver - Per-wheel speed writes with clamping and broadcast.

Every value that reaches the board passes through here and is clamped
into [-100, 100] first. Out-of-range speeds saturate, they are never
rejected.
"""

import logging
from typing import Dict, Union

from .interfaces import MotorBoard
from .types import DrivetrainTopology, WheelCommand, WheelId, clamp_speed


logger = logging.getLogger(__name__)


class MotorChannelDriver:
    """
    Writes wheel speeds to the motor board for one drivetrain.

    Multi-wheel writes are sequential, one channel at a time. A reader
    observing the board mid-sequence may see a partial update.
    """

    def __init__(self, board: MotorBoard, topology: DrivetrainTopology) -> None:
        """
        Initialize driver.

        Args:
            board: Motor board backend
            topology: Drivetrain, decides which wheels ALL expands to
        """
        self.board = board
        self.topology = topology
        self._last_speeds: Dict[WheelId, int] = {wheel: 0 for wheel in topology.wheels}

    def set_wheel_speed(self, wheel: WheelId, speed: Union[int, float]) -> None:
        """
        Set one wheel, or every wheel with WheelId.ALL.

        Args:
            wheel: Wheel to drive, or ALL to broadcast
            speed: Signed percentage, clamped into [-100, 100]
        """
        if wheel == WheelId.ALL:
            for each in self.topology.wheels:
                self._write(each, speed)
            return
        self._write(wheel, speed)

    def stop(self, wheel: WheelId = WheelId.ALL) -> None:
        """Stop one wheel, or the whole board with ALL"""
        if wheel == WheelId.ALL:
            self.stop_all()
        else:
            self._write(wheel, 0)

    def stop_all(self) -> None:
        """Hardware broadcast stop"""
        logger.debug("Stop all")
        self.board.write_all_off()
        for wheel in self._last_speeds:
            self._last_speeds[wheel] = 0

    def apply(self, command: WheelCommand) -> None:
        """Write a mapped vector in channel order"""
        for wheel in sorted(command.speeds):
            self._write(wheel, command.speeds[wheel])

    @property
    def last_speeds(self) -> Dict[WheelId, int]:
        """Last speed written per wheel (0 after stop_all)"""
        return dict(self._last_speeds)

    def _write(self, wheel: WheelId, speed: Union[int, float]) -> None:
        label = self.topology.wheel_label(wheel)
        if wheel not in self._last_speeds:
            raise ValueError(f"Wheel {label} is not wired on a {self.topology.value} chassis")

        clamped = clamp_speed(speed)
        if clamped != speed:
            logger.debug(f"Clamped {label} speed {speed} -> {clamped}")

        logger.debug(f"M{int(wheel)} -> {clamped:+4d}")
        self.board.write_channel_duty(int(wheel), clamped)
        self._last_speeds[wheel] = clamped
