"""
Anti-Reversal Guard - Break-before-make protection for the H-bridges.

Wheels commanded to reverse abruptly draw a current spike that can brown
out the control electronics. The guard remembers the last commanded
motion class and, on any change away from a moving class, forces a stop
and waits a fixed settle period before the new command is written. A
command that keeps the class but would flip a spinning wheel's sign is
stopped and settled the same way.

This is safety-critical code.
"""

import logging
import time
from typing import Any, Callable, Mapping, Optional

from .interfaces import Sleeper
from .mapper import KinematicMapper
from .motors import MotorChannelDriver
from .types import (
    Direction,
    GuardConfig,
    MotionClass,
    WheelCommand,
    WheelId,
)


logger = logging.getLogger(__name__)


class AntiReversalGuard:
    """
    Motion class state machine sitting in front of the motor driver.

    The settle wait blocks the calling thread; once started it always
    completes before any wheel speed is written.
    """

    def __init__(
        self,
        mapper: KinematicMapper,
        driver: MotorChannelDriver,
        config: GuardConfig,
        sleep: Optional[Sleeper] = None,
    ) -> None:
        """
        Initialize guard.

        Args:
            mapper: Computes wheel vectors
            driver: Writes wheel vectors
            config: Guard configuration (settle delay)
            sleep: Blocking sleep in seconds (default: time.sleep)
        """
        self.mapper = mapper
        self.driver = driver
        self.config = config
        self._sleep = sleep if sleep is not None else time.sleep

        self.last_commanded = MotionClass.STOP

        # State change callbacks
        self._state_callbacks: list[Callable[[MotionClass, MotionClass], Any]] = []

    def add_state_callback(self, callback: Callable[[MotionClass, MotionClass], Any]) -> None:
        """
        Register callback for motion class changes.

        Callback signature: callback(old_class, new_class)

        Args:
            callback: Function to call on class change
        """
        self._state_callbacks.append(callback)

    def move(self, direction: Direction, speed: float) -> WheelCommand:
        """
        Move in a direction, settling first if the motion class changes.

        Returns:
            The wheel vector that was written
        """
        motion = MotionClass.for_direction(direction)
        command = self.mapper.map_motion(motion, speed)
        self._admit(motion, command)
        self.driver.apply(command)
        return command

    def spin(self, left: bool, speed: float) -> WheelCommand:
        """Spin in place, settling first if the motion class changes"""
        motion = MotionClass.for_spin(left)
        command = self.mapper.map_motion(motion, speed)
        self._admit(motion, command)
        self.driver.apply(command)
        return command

    def stop(self) -> None:
        """Stop everything. Stopping never needs a settle delay."""
        self.driver.stop_all()
        self._transition_to(MotionClass.STOP)

    def admit_steering(
        self,
        current: Mapping[WheelId, int],
        target: Mapping[WheelId, int],
    ) -> bool:
        """
        Protect a line-following step against wheel reversal.

        If any wheel would flip between two non-zero speeds of opposite
        sign, stop and settle before the step is written. Line following
        counts as forward travel afterwards.

        Args:
            current: Speeds currently on the wheels
            target: Speeds about to be written

        Returns:
            True if a forced stop was issued
        """
        forced = self._settle_if_reversing(current, target)
        self._transition_to(MotionClass.FORWARD)
        return forced

    def _admit(self, motion: MotionClass, command: WheelCommand) -> None:
        """
        Force a stop and settle if leaving a different moving class.

        Within one class the wheels can still be spinning the other way
        (after line following or direct wheel writes), so the speeds on
        the wheels are checked for sign flips as well.
        """
        if motion != self.last_commanded and self.last_commanded != MotionClass.STOP:
            logger.warning(
                f"Motion change {self.last_commanded.value} -> {motion.value}: forcing stop"
            )
            self._settle()
        else:
            self._settle_if_reversing(self.driver.last_speeds, command.speeds)
        self._transition_to(motion)

    def _settle_if_reversing(
        self,
        current: Mapping[WheelId, int],
        target: Mapping[WheelId, int],
    ) -> bool:
        reversed_wheels = [
            wheel for wheel, speed in target.items()
            if speed * current.get(wheel, 0) < 0
        ]
        if not reversed_wheels:
            return False

        label = self.driver.topology.wheel_label
        names = ", ".join(label(wheel) for wheel in reversed_wheels)
        logger.warning(f"Reversing {names}: forcing stop")
        self._settle()
        return True

    def _settle(self) -> None:
        self.driver.stop_all()
        self._sleep(self.config.settle_seconds)

    def _transition_to(self, new_class: MotionClass) -> None:
        """
        Record the new motion class.

        Args:
            new_class: Class being entered
        """
        if new_class == self.last_commanded:
            return

        old_class = self.last_commanded
        logger.info(f"Motion transition: {old_class.value} -> {new_class.value}")
        self.last_commanded = new_class

        # Notify callbacks
        for callback in self._state_callbacks:
            try:
                callback(old_class, new_class)
            except Exception as e:
                logger.error(f"Error in state callback: {e}", exc_info=True)

