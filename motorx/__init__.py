"""
motorx - Motion control and line following for a 4-channel motor board.

This package contains the core logic for driving 2-wheel, 4-wheel and
mecanum robot chassis:
- Types: Wheel ids, directions, sensor patterns, configuration
- Interfaces: Protocols for the hardware boundary (board, pins, encoders)
- Mapper: Transforms directions into per-wheel speed vectors
- Guard: Anti-reversal state machine, stop and settle on direction changes
- Line: Sensor normalization and the steering decision engine
- Controller: The command surface the host program calls
"""

from .types import (
    Direction,
    DrivetrainTopology,
    GuardConfig,
    LineColor,
    LineFollowConfig,
    LineFollowMode,
    LineSensor,
    MotionClass,
    SensorConfig,
    SensorPattern,
    SteeringOutcome,
    WheelCommand,
    WheelId,
)
from .interfaces import (
    EncoderCounters,
    MotorBoard,
    PinReader,
)
from .mapper import KinematicMapper, UnsupportedMotionError
from .guard import AntiReversalGuard
from .line import DEFAULT_RULES, LineFollower, LineSensorArray, SteeringRule
from .controller import MotionController

__all__ = [
    "Direction",
    "DrivetrainTopology",
    "GuardConfig",
    "LineColor",
    "LineFollowConfig",
    "LineFollowMode",
    "LineSensor",
    "MotionClass",
    "SensorConfig",
    "SensorPattern",
    "SteeringOutcome",
    "WheelCommand",
    "WheelId",
    "EncoderCounters",
    "MotorBoard",
    "PinReader",
    "KinematicMapper",
    "UnsupportedMotionError",
    "AntiReversalGuard",
    "DEFAULT_RULES",
    "LineFollower",
    "LineSensorArray",
    "SteeringRule",
    "MotionController",
]
