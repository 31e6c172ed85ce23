"""
Line following - Sensor normalization and the steering decision engine.

The steering policy is an ordered list of named rules, evaluated top to
bottom, first match wins. It is a hand-tuned heuristic, not a controller:
there is no PID and no memory between ticks.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .guard import AntiReversalGuard
from .interfaces import PinReader
from .mapper import KinematicMapper
from .motors import MotorChannelDriver
from .types import (
    LineColor,
    LineFollowConfig,
    LineFollowMode,
    LineSensor,
    SensorConfig,
    SensorPattern,
    SteeringOutcome,
    WheelCommand,
    clamp_speed,
)


logger = logging.getLogger(__name__)


class LineSensorArray:
    """Reads the 4 line sensors and normalizes them against the line color"""

    def __init__(self, pins: PinReader, config: SensorConfig) -> None:
        """
        Initialize sensor array.

        Args:
            pins: Digital pin backend
            config: Pin wiring and initial line color
        """
        self.pins = pins
        self.config = config
        self._color = config.color

    @property
    def line_color(self) -> LineColor:
        return self._color

    def set_line_color(self, color: LineColor) -> None:
        """Change polarity for every following read"""
        if color != self._color:
            logger.info(f"Line color: {self._color.name} -> {color.name}")
        self._color = LineColor(color)

    def raw_value(self, sensor: LineSensor) -> int:
        """Raw pin level of one sensor (0 or 1)"""
        pin = self.config.pins[LineSensor(sensor)]
        return 1 if self.pins.read_digital_pin(pin) else 0

    def is_line_detected(self, sensor: LineSensor) -> bool:
        """Check if one sensor sees the line"""
        return self.raw_value(sensor) == int(self._color)

    def read_pattern(self) -> SensorPattern:
        """Read all sensors into a fresh pattern"""
        outer_left, left, right, outer_right = (
            self.is_line_detected(sensor) for sensor in self.config.pattern_order
        )
        return SensorPattern(outer_left, left, right, outer_right)


@dataclass(frozen=True)
class SteeringRule:
    """
    One row of the steering table.

    outcome receives (base_speed, config) and returns (left, right).
    """
    name: str
    predicate: Callable[[SensorPattern], bool]
    outcome: Callable[[int, LineFollowConfig], tuple]

    def matches(self, pattern: SensorPattern) -> bool:
        return self.predicate(pattern)


def _only_left(p: SensorPattern) -> bool:
    return p.left and not (p.outer_left or p.right or p.outer_right)


def _only_right(p: SensorPattern) -> bool:
    return p.right and not (p.outer_left or p.left or p.outer_right)


DEFAULT_RULES: Sequence[SteeringRule] = (
    SteeringRule(
        "straight",
        lambda p: (p.left and p.right) or _only_left(p) or _only_right(p),
        lambda speed, cfg: (speed, speed),
    ),
    SteeringRule(
        "mild_left",
        lambda p: p.left and not p.right,
        lambda speed, cfg: (cfg.mild_speed, speed),
    ),
    SteeringRule(
        "hard_left",
        lambda p: p.outer_left,
        lambda speed, cfg: (cfg.hard_speed, speed),
    ),
    SteeringRule(
        "mild_right",
        lambda p: p.right and not p.left,
        lambda speed, cfg: (speed, cfg.mild_speed),
    ),
    SteeringRule(
        "hard_right",
        lambda p: p.outer_right,
        lambda speed, cfg: (speed, cfg.hard_speed),
    ),
)

# Lost line (nothing active) or intersection: keep going
FALLBACK_RULE = SteeringRule(
    "fallback",
    lambda p: True,
    lambda speed, cfg: (speed, speed),
)


class LineFollower:
    """
    Converts sensor patterns into wheel-group speeds.

    One engine for every drivetrain: the mapper's wheel groups decide
    which physical wheels a side speed lands on.
    """

    def __init__(
        self,
        sensors: LineSensorArray,
        mapper: KinematicMapper,
        driver: MotorChannelDriver,
        config: LineFollowConfig,
        guard: Optional[AntiReversalGuard] = None,
        rules: Sequence[SteeringRule] = DEFAULT_RULES,
    ) -> None:
        """
        Initialize line follower.

        Args:
            sensors: Line sensor array
            mapper: Expands side speeds onto wheel groups
            driver: Writes wheel speeds
            config: Steering constants and mode
            guard: Required in protected mode
            rules: Ordered steering rules, fallback is appended implicitly
        """
        if config.mode == LineFollowMode.PROTECTED and guard is None:
            raise ValueError("Protected line following needs an AntiReversalGuard")

        self.sensors = sensors
        self.mapper = mapper
        self.driver = driver
        self.config = config
        self.guard = guard
        self.rules = tuple(rules)

    def decide(self, pattern: SensorPattern, speed: int) -> SteeringOutcome:
        """
        Pick the steering outcome for a pattern.

        Pure: reads no hardware and writes nothing.
        """
        for rule in self.rules + (FALLBACK_RULE,):
            if rule.matches(pattern):
                left, right = rule.outcome(speed, self.config)
                return SteeringOutcome(left_speed=left, right_speed=right, rule=rule.name)
        raise AssertionError("fallback rule always matches")

    def tick(self, speed: int) -> WheelCommand:
        """
        Run one control cycle: read, decide, write.

        Args:
            speed: Base forward speed, clamped into 0..100

        Returns:
            The wheel vector that was written
        """
        speed = max(0, clamp_speed(speed))
        pattern = self.sensors.read_pattern()
        outcome = self.decide(pattern, speed)
        command = self.mapper.map_groups(outcome.left_speed, outcome.right_speed)

        logger.debug(
            f"Line {pattern} -> {outcome.rule}: "
            f"L={command[self.mapper.topology.left_group[0]]:+4d} "
            f"R={command[self.mapper.topology.right_group[0]]:+4d}"
        )

        if self.config.mode == LineFollowMode.PROTECTED:
            self.guard.admit_steering(self.driver.last_speeds, command.speeds)

        self.driver.apply(command)
        return command
