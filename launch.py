#!/usr/bin/env python3
"""
motorx Launcher - Easy start for robot control

Usage:
    python launch.py --demo                       # Run core demo (mock hardware)
    python launch.py --mock --move forward        # Single move on mock hardware
    python launch.py --follow-line 10             # Follow a line for 10 s on the robot
    python launch.py --config                     # Show .env configuration
"""

import sys
import time
import argparse
import logging

from motorx import Direction, DrivetrainTopology, MotionController
from motorx.config import ConfigError, MotorxConfig


logger = logging.getLogger("launch")


def setup_logging(level: str = "INFO") -> None:
    """Configure logging"""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )


def launch_demo() -> None:
    """Launch core demo"""
    print("Starting core demo...")
    from demo_core import main
    main()


def build_controller(config: MotorxConfig, use_mock: bool,
                     topology: DrivetrainTopology) -> MotionController:
    """Create a controller on mock or real hardware"""
    if use_mock:
        from motorx.hardware import MockEncoders, MockMotorBoard, MockPins
        print("Using MOCK hardware (no robot needed)")
        board = MockMotorBoard()
        pins = MockPins(sensor_config=config.sensor_config())
        encoders = MockEncoders()
    else:
        from motorx.hardware.gpio import LgpioEncoders, LgpioPins
        from motorx.hardware.pca9685 import PCA9685MotorBoard
        board = PCA9685MotorBoard(bus_number=config.bus_number, address=config.address)
        pins = LgpioPins(pins=config.sensor_config().pins)
        encoders = LgpioEncoders(handle=pins.handle)

    return MotionController(
        board=board,
        pins=pins,
        encoders=encoders,
        topology=topology,
        guard_config=config.guard_config(),
        line_config=config.line_config(),
        sensor_config=config.sensor_config(),
    )


def run_move(controller: MotionController, direction: str, speed: int,
             duration: float) -> None:
    """Move in one direction for a while, then stop"""
    controller.move(Direction(direction), speed)
    time.sleep(duration)
    controller.stop()


def run_spin(controller: MotionController, side: str, speed: int,
             duration: float) -> None:
    """Spin in place for a while, then stop"""
    controller.spin(side == "left", speed)
    time.sleep(duration)
    controller.stop()


def run_follow_line(controller: MotionController, speed: int, duration: float,
                    interval: float = 0.01) -> None:
    """Follow the line at a fixed tick rate until duration elapses or Ctrl+C"""
    print("Following line - press Ctrl+C to stop")
    deadline = time.monotonic() + duration
    try:
        while time.monotonic() < deadline:
            controller.follow_line(speed)
            time.sleep(interval)
    except KeyboardInterrupt:
        print("\nShutting down...")
    finally:
        controller.stop()


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="motorx - Robot Motion Control",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python launch.py --demo                        Run core demo
  python launch.py --mock --move left --speed 80 Strafe left on mock hardware
  python launch.py --spin right --duration 0.5   Spin right for half a second
  python launch.py --follow-line 30              Follow a line for 30 s
        """
    )

    parser.add_argument(
        "--demo",
        action="store_true",
        help="Run core demo"
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use mock hardware for testing (no robot needed)"
    )
    parser.add_argument(
        "--config",
        action="store_true",
        help="Show configuration status and exit"
    )
    parser.add_argument("--env-file", help="Path to .env file")
    parser.add_argument(
        "--topology",
        choices=[t.value for t in DrivetrainTopology],
        help="Drivetrain (overrides MOTORX_TOPOLOGY)"
    )
    parser.add_argument(
        "--move",
        choices=[d.value for d in Direction],
        help="Move in a direction"
    )
    parser.add_argument(
        "--spin",
        choices=["left", "right"],
        help="Spin in place"
    )
    parser.add_argument(
        "--follow-line",
        type=float,
        metavar="SECONDS",
        help="Follow the line for SECONDS"
    )
    parser.add_argument("--speed", type=int, default=80, help="Speed 0-100 (default: 80)")
    parser.add_argument("--duration", type=float, default=1.0,
                        help="Move/spin duration in seconds (default: 1.0)")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level"
    )

    args = parser.parse_args()

    # Setup logging
    setup_logging(args.log_level)

    if args.demo:
        launch_demo()
        return

    config = MotorxConfig(args.env_file)
    if args.config:
        config.print_status()
        return

    if not (args.move or args.spin or args.follow_line):
        parser.print_help()
        return

    try:
        topology = DrivetrainTopology(args.topology) if args.topology else config.topology
        controller = build_controller(config, args.mock, topology)
    except ConfigError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    try:
        if args.move:
            run_move(controller, args.move, args.speed, args.duration)
        elif args.spin:
            run_spin(controller, args.spin, args.speed, args.duration)
        else:
            run_follow_line(controller, args.speed, args.follow_line)
    except ValueError as e:
        controller.stop()
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
