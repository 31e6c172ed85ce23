#!/usr/bin/env python3
"""
motorx Core Demo - Simple example application.

Drives a mock mecanum robot through a few moves, then follows a scripted
line, all without hardware.
"""

import logging
import sys

from motorx import (
    Direction,
    DrivetrainTopology,
    GuardConfig,
    MotionClass,
    MotionController,
)
from motorx.hardware import MockEncoders, MockMotorBoard, MockPins, SensorScripts


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    stream=sys.stdout
)

logger = logging.getLogger(__name__)


def run_demo(topology: DrivetrainTopology = DrivetrainTopology.MECANUM,
             script: str = "left_curve") -> MockMotorBoard:
    """Run a simple demo with mock components"""

    logger.info("=" * 60)
    logger.info("motorx Core Demo")
    logger.info("=" * 60)

    board = MockMotorBoard()
    controller = MotionController(
        board=board,
        pins=MockPins(script=SensorScripts.load(script)),
        encoders=MockEncoders(),
        topology=topology,
        guard_config=GuardConfig(settle_ms=100),
    )

    def on_motion_change(old: MotionClass, new: MotionClass):
        logger.info(f"🔄 MOTION: {old.value} -> {new.value}")

    controller.guard.add_state_callback(on_motion_change)

    logger.info("Direct moves:")
    logger.info("-" * 60)
    controller.move(Direction.FORWARD, 50)
    logger.info(f"  forward 50     -> {board.vector}")
    controller.move(Direction.FORWARD, 80)
    logger.info(f"  forward 80     -> {board.vector}")
    if topology == DrivetrainTopology.MECANUM:
        controller.move(Direction.LEFT, 80)
        logger.info(f"  strafe left 80 -> {board.vector}")
    controller.spin(True, 60)
    logger.info(f"  spin left 60   -> {board.vector}")
    controller.stop()
    logger.info(f"  stop           -> {board.vector}")

    logger.info("-" * 60)
    logger.info(f"Line following ({script}):")
    logger.info("-" * 60)
    for _ in range(len(SensorScripts.load(script))):
        command = controller.follow_line(70)
        logger.info(f"  {command.as_tuple()}")

    controller.stop()
    logger.info("-" * 60)
    logger.info(f"Forced stops: {board.all_off_count}")
    return board


def main():
    """Main entry point"""
    try:
        run_demo()
    except KeyboardInterrupt:
        logger.info("\nDemo interrupted by user")


if __name__ == "__main__":
    main()
