"""
MotionController - The command surface exposed to the host program.

Owns every piece of mutable state (the guard's motion class and the
sensor array's line color), so two controllers never share anything.
The host calls one command per control cycle; nothing here runs on its
own.
"""

import logging
from typing import Optional

from .encoders import EncoderReader
from .guard import AntiReversalGuard
from .interfaces import EncoderCounters, MotorBoard, PinReader, Sleeper
from .line import LineFollower, LineSensorArray
from .mapper import KinematicMapper
from .motors import MotorChannelDriver
from .types import (
    Direction,
    DrivetrainTopology,
    GuardConfig,
    LineColor,
    LineFollowConfig,
    LineSensor,
    MotionClass,
    SensorConfig,
    WheelCommand,
    WheelId,
)


logger = logging.getLogger(__name__)


class MotionController:
    """
    Wires driver, mapper, guard, line follower and encoders together.

    Not thread-safe: callers from more than one thread must serialize
    access themselves.
    """

    def __init__(
        self,
        board: MotorBoard,
        pins: PinReader,
        encoders: EncoderCounters,
        topology: DrivetrainTopology = DrivetrainTopology.MECANUM,
        guard_config: Optional[GuardConfig] = None,
        line_config: Optional[LineFollowConfig] = None,
        sensor_config: Optional[SensorConfig] = None,
        sleep: Optional[Sleeper] = None,
    ) -> None:
        """
        Initialize controller.

        Args:
            board: Motor board backend
            pins: Digital pin backend for the line sensors
            encoders: Encoder counter backend
            topology: Drivetrain variant, fixed for the controller's lifetime
            guard_config: Settle delay configuration
            line_config: Line-following constants and mode
            sensor_config: Line sensor wiring and initial color
            sleep: Blocking sleep in seconds (default: time.sleep)
        """
        self.topology = topology
        self.driver = MotorChannelDriver(board, topology)
        self.mapper = KinematicMapper(topology)
        self.guard = AntiReversalGuard(
            self.mapper,
            self.driver,
            guard_config or GuardConfig(),
            sleep=sleep,
        )
        self.sensors = LineSensorArray(pins, sensor_config or SensorConfig())
        self.line_follower = LineFollower(
            self.sensors,
            self.mapper,
            self.driver,
            line_config or LineFollowConfig(),
            guard=self.guard,
        )
        self.encoders = EncoderReader(encoders)

        logger.info(f"Motion controller ready ({topology.value})")

    # Wheels

    def set_speed(self, wheel: WheelId, speed: float) -> None:
        """Set one wheel's speed, or every wheel with WheelId.ALL"""
        self.driver.set_wheel_speed(wheel, speed)

    def stop(self, wheel: WheelId = WheelId.ALL) -> None:
        """
        Stop one wheel, or everything with WheelId.ALL.

        A full stop also resets the guard, so the next move starts
        without a settle delay.
        """
        if wheel == WheelId.ALL:
            self.guard.stop()
        else:
            self.driver.stop(wheel)

    # Motion

    def move(self, direction: Direction, speed: float) -> WheelCommand:
        """Move in a direction through the anti-reversal guard"""
        return self.guard.move(direction, speed)

    def spin(self, left: bool, speed: float) -> WheelCommand:
        """Spin in place through the anti-reversal guard"""
        return self.guard.spin(left, speed)

    @property
    def motion(self) -> MotionClass:
        """Last commanded motion class"""
        return self.guard.last_commanded

    # Line following

    def follow_line(self, speed: int) -> WheelCommand:
        """Run one line-following control cycle"""
        return self.line_follower.tick(speed)

    def set_line_color(self, color: LineColor) -> None:
        self.sensors.set_line_color(color)

    def is_line_detected(self, sensor: LineSensor) -> bool:
        return self.sensors.is_line_detected(sensor)

    def sensor_value(self, sensor: LineSensor) -> int:
        return self.sensors.raw_value(sensor)

    # Encoders

    def encoder_reset(self, wheel: WheelId = WheelId.ALL) -> None:
        self.encoders.reset(wheel)

    def encoder_count(self, wheel: WheelId) -> int:
        return self.encoders.count(wheel)
