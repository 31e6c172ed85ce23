"""
Mapper - Transforms symbolic directions into per-wheel speed vectors.

Pure kinematics, no state. Every direction and spin is a sign pattern
looked up in a table and scaled by one speed magnitude:
- Mecanum: one sign per wheel (FL, FR, RL, RR)
- Differential (2W and 4W): one sign per side group (left, right)
"""

from typing import Dict, Tuple

from .types import (
    Direction,
    DrivetrainTopology,
    MotionClass,
    WheelCommand,
    WheelId,
    clamp_speed,
)


class UnsupportedMotionError(ValueError):
    """The drivetrain cannot perform the requested motion"""


# (front_left, front_right, rear_left, rear_right)
MECANUM_SIGNS: Dict[MotionClass, Tuple[int, int, int, int]] = {
    MotionClass.FORWARD: (1, 1, 1, 1),
    MotionClass.BACK: (-1, -1, -1, -1),
    MotionClass.LEFT: (-1, 1, 1, -1),
    MotionClass.RIGHT: (1, -1, -1, 1),
    MotionClass.LEFT_FRONT: (0, 1, 1, 0),
    MotionClass.RIGHT_FRONT: (1, 0, 0, 1),
    MotionClass.LEFT_BACK: (-1, 0, 0, -1),
    MotionClass.RIGHT_BACK: (0, -1, -1, 0),
    MotionClass.SPIN_LEFT: (-1, 1, -1, 1),
    MotionClass.SPIN_RIGHT: (1, -1, 1, -1),
}

# (left_group, right_group). Differential chassis cannot strafe, so LEFT
# and RIGHT are missing; diagonals pivot on the wheel of the named side.
DIFFERENTIAL_SIGNS: Dict[MotionClass, Tuple[int, int]] = {
    MotionClass.FORWARD: (1, 1),
    MotionClass.BACK: (-1, -1),
    MotionClass.LEFT_FRONT: (0, 1),
    MotionClass.RIGHT_FRONT: (1, 0),
    MotionClass.LEFT_BACK: (0, -1),
    MotionClass.RIGHT_BACK: (-1, 0),
    MotionClass.SPIN_LEFT: (-1, 1),
    MotionClass.SPIN_RIGHT: (1, -1),
}


class KinematicMapper:
    """
    Maps (direction, speed) to a WheelCommand for one drivetrain.

    Same inputs always yield the same vector.
    """

    def __init__(self, topology: DrivetrainTopology) -> None:
        self.topology = topology

    def map_direction(self, direction: Direction, speed: float) -> WheelCommand:
        """
        Compute the wheel vector for a move.

        Args:
            direction: Symbolic direction
            speed: Magnitude 0..100, clamped into range

        Returns:
            WheelCommand with one entry per wired wheel

        Raises:
            UnsupportedMotionError: Strafe requested on a differential chassis
        """
        return self.map_motion(MotionClass.for_direction(direction), speed)

    def map_spin(self, left: bool, speed: float) -> WheelCommand:
        """Compute the wheel vector for an in-place spin"""
        return self.map_motion(MotionClass.for_spin(left), speed)

    def map_motion(self, motion: MotionClass, speed: float) -> WheelCommand:
        """Compute the wheel vector for any motion class"""
        magnitude = self._magnitude(speed)

        if motion == MotionClass.STOP:
            return WheelCommand({wheel: 0 for wheel in self.topology.wheels})

        if self.topology.is_differential:
            if motion not in DIFFERENTIAL_SIGNS:
                raise UnsupportedMotionError(
                    f"{motion.value} is not possible on a {self.topology.value} chassis"
                )
            left_sign, right_sign = DIFFERENTIAL_SIGNS[motion]
            return self.map_groups(left_sign * magnitude, right_sign * magnitude)

        signs = MECANUM_SIGNS[motion]
        wheels = (
            WheelId.FRONT_LEFT,
            WheelId.FRONT_RIGHT,
            WheelId.REAR_LEFT,
            WheelId.REAR_RIGHT,
        )
        return WheelCommand({wheel: sign * magnitude for wheel, sign in zip(wheels, signs)})

    def map_groups(self, left_speed: float, right_speed: float) -> WheelCommand:
        """
        Expand side-group speeds onto the wheels.

        Front and rear wheels on a side always get the same speed.

        Args:
            left_speed: Signed speed for the left group
            right_speed: Signed speed for the right group
        """
        left = clamp_speed(left_speed)
        right = clamp_speed(right_speed)
        speeds = {wheel: left for wheel in self.topology.left_group}
        speeds.update({wheel: right for wheel in self.topology.right_group})
        return WheelCommand(speeds)

    def _magnitude(self, speed: float) -> int:
        """Clamp a speed magnitude into 0..100"""
        return max(0, clamp_speed(speed))
