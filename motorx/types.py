"""
Core data types for the motorx control library.

Wheel ids, drivetrains, directions, line sensor patterns and the
configuration dataclasses that flow through the system, fully typed.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, List, Tuple


SPEED_MIN = -100
SPEED_MAX = 100


def clamp_speed(speed: float) -> int:
    """Clamp a speed into [-100, 100] and round to an int percentage"""
    return int(round(max(SPEED_MIN, min(SPEED_MAX, speed))))


class WheelId(IntEnum):
    """Motor channels M1..M4 on the driver board"""
    FRONT_LEFT = 1
    FRONT_RIGHT = 2
    REAR_LEFT = 3
    REAR_RIGHT = 4
    # 2-wheel variants drive M1 and M2 only
    LEFT = 1
    RIGHT = 2
    # Broadcast selector, never stored
    ALL = 99


class DrivetrainTopology(Enum):
    """Chassis variants"""
    TWO_WHEEL = "2wd"        # Differential, M1 left, M2 right
    FOUR_WHEEL = "4wd"       # Differential "tank", front+rear per side
    MECANUM = "mecanum"      # 4-wheel omni-drive

    @property
    def wheels(self) -> List[WheelId]:
        """Wheels wired on this chassis, in channel order"""
        if self is DrivetrainTopology.TWO_WHEEL:
            return [WheelId.LEFT, WheelId.RIGHT]
        return [
            WheelId.FRONT_LEFT,
            WheelId.FRONT_RIGHT,
            WheelId.REAR_LEFT,
            WheelId.REAR_RIGHT,
        ]

    @property
    def left_group(self) -> List[WheelId]:
        """Wheels on the left side, always driven together"""
        if self is DrivetrainTopology.TWO_WHEEL:
            return [WheelId.LEFT]
        return [WheelId.FRONT_LEFT, WheelId.REAR_LEFT]

    @property
    def right_group(self) -> List[WheelId]:
        """Wheels on the right side, always driven together"""
        if self is DrivetrainTopology.TWO_WHEEL:
            return [WheelId.RIGHT]
        return [WheelId.FRONT_RIGHT, WheelId.REAR_RIGHT]

    @property
    def is_differential(self) -> bool:
        return self is not DrivetrainTopology.MECANUM

    def wheel_label(self, wheel: WheelId) -> str:
        """Wheel name as this chassis calls it (LEFT/RIGHT on 2-wheel)"""
        if self is DrivetrainTopology.TWO_WHEEL and wheel in (WheelId.LEFT, WheelId.RIGHT):
            return "LEFT" if wheel == WheelId.LEFT else "RIGHT"
        return wheel.name


class Direction(Enum):
    """Symbolic move directions"""
    FORWARD = "forward"
    BACK = "back"
    LEFT = "left"
    RIGHT = "right"
    LEFT_FRONT = "left_front"
    RIGHT_FRONT = "right_front"
    LEFT_BACK = "left_back"
    RIGHT_BACK = "right_back"


class MotionClass(Enum):
    """
    Coarse category of what the robot is doing.

    Used by the anti-reversal guard to decide whether a new command is an
    abrupt change. Speed is not part of the class.
    """
    FORWARD = "forward"
    BACK = "back"
    LEFT = "left"
    RIGHT = "right"
    LEFT_FRONT = "left_front"
    RIGHT_FRONT = "right_front"
    LEFT_BACK = "left_back"
    RIGHT_BACK = "right_back"
    SPIN_LEFT = "spin_left"
    SPIN_RIGHT = "spin_right"
    STOP = "stop"

    @classmethod
    def for_direction(cls, direction: Direction) -> "MotionClass":
        return cls(direction.value)

    @classmethod
    def for_spin(cls, left: bool) -> "MotionClass":
        return cls.SPIN_LEFT if left else cls.SPIN_RIGHT


class LineColor(IntEnum):
    """
    Line polarity.

    The value is the raw pin level that means "sensor sees the line".
    """
    BLACK = 0     # Black line on white ground, sensor reads low on the line
    WHITE = 1     # White line on black ground


class LineSensor(IntEnum):
    """Line sensor sockets X1..X4 on the driver board"""
    X1 = 0
    X2 = 1
    X3 = 2
    X4 = 3


class LineFollowMode(Enum):
    """Whether line following goes through the anti-reversal guard"""
    FAST = "fast"              # Write every tick directly, no settle delay
    PROTECTED = "protected"    # Stop and settle before any wheel reverses


@dataclass(frozen=True)
class SensorPattern:
    """
    Normalized snapshot of the 4 line sensors for one decision cycle.

    True means the sensor sees the line.
    """
    outer_left: bool
    left: bool
    right: bool
    outer_right: bool

    @classmethod
    def from_bits(cls, s1: int, s2: int, s3: int, s4: int) -> "SensorPattern":
        """Build a pattern from 0/1 flags ordered outer-left to outer-right"""
        return cls(bool(s1), bool(s2), bool(s3), bool(s4))

    def as_tuple(self) -> Tuple[bool, bool, bool, bool]:
        return (self.outer_left, self.left, self.right, self.outer_right)

    @property
    def active_count(self) -> int:
        return sum(self.as_tuple())

    def __str__(self) -> str:
        return "".join("1" if s else "0" for s in self.as_tuple())


@dataclass
class WheelCommand:
    """
    Per-wheel speed vector.

    This is the output of the KinematicMapper and input to the
    MotorChannelDriver. Values are ready for transmission.
    """
    speeds: Dict[WheelId, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate ranges"""
        for wheel, speed in self.speeds.items():
            assert wheel != WheelId.ALL, "ALL is a selector, not a wheel"
            assert SPEED_MIN <= speed <= SPEED_MAX, f"{wheel.name} speed out of range: {speed}"

    @property
    def is_stop(self) -> bool:
        """Check if this commands every wheel to zero"""
        return all(speed == 0 for speed in self.speeds.values())

    def as_tuple(self) -> Tuple[int, ...]:
        """Speeds in channel order"""
        return tuple(self.speeds[wheel] for wheel in sorted(self.speeds))

    def __getitem__(self, wheel: WheelId) -> int:
        return self.speeds[wheel]


@dataclass(frozen=True)
class SteeringOutcome:
    """Side-group speeds chosen by the line-following engine"""
    left_speed: int
    right_speed: int
    rule: str = ""


@dataclass
class GuardConfig:
    """Configuration for the AntiReversalGuard"""
    settle_ms: int = 100               # Pause after a forced stop

    def __post_init__(self) -> None:
        assert self.settle_ms >= 0, f"settle_ms must be >= 0: {self.settle_ms}"

    @property
    def settle_seconds(self) -> float:
        return self.settle_ms / 1000.0


@dataclass
class LineFollowConfig:
    """Configuration for the LineFollower"""
    mild_speed: int = 20               # Inner group speed on a mild drift
    hard_speed: int = -40              # Inner group speed on a hard drift
    mode: LineFollowMode = LineFollowMode.FAST

    def __post_init__(self) -> None:
        assert SPEED_MIN <= self.mild_speed <= SPEED_MAX, f"mild_speed out of range: {self.mild_speed}"
        assert SPEED_MIN <= self.hard_speed <= SPEED_MAX, f"hard_speed out of range: {self.hard_speed}"


@dataclass
class SensorConfig:
    """Configuration for the LineSensorArray"""
    # Pin ids for X1..X4 (P12..P15 on the reference board)
    pins: Tuple[int, int, int, int] = (12, 13, 14, 15)
    # Pin level 1 means "on the line" until set_line_color() says otherwise
    color: LineColor = LineColor.WHITE
    # Sockets feeding (outer_left, left, right, outer_right). The reference
    # sensor bar is mounted mirrored: X3 is outermost left, X1 outermost right.
    pattern_order: Tuple[LineSensor, LineSensor, LineSensor, LineSensor] = (
        LineSensor.X3, LineSensor.X4, LineSensor.X2, LineSensor.X1,
    )

    def __post_init__(self) -> None:
        assert len(self.pins) == len(LineSensor), f"expected {len(LineSensor)} pins, got {len(self.pins)}"
        assert sorted(self.pattern_order) == list(LineSensor), f"pattern_order must use each sensor once: {self.pattern_order}"
