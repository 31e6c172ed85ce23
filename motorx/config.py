#!/usr/bin/env python3
"""
motorx Environment Configuration Helper

Provides easy access to .env configuration for the launcher and any host
program. Loads the .env file with python-dotenv and provides defaults.
"""

import os
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from .types import (
    DrivetrainTopology,
    GuardConfig,
    LineColor,
    LineFollowConfig,
    LineFollowMode,
    SensorConfig,
)


class ConfigError(ValueError):
    """Environment configuration is invalid"""


class MotorxConfig:
    """Configuration manager for motorx"""

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration

        Args:
            env_file: Path to .env file (default: .env in current directory)
        """
        self._loaded = False

        env_path = Path(".env") if env_file is None else Path(env_file)
        if env_path.exists():
            load_dotenv(env_path)
            self._loaded = True

    @property
    def topology_name(self) -> str:
        """Drivetrain: 2wd, 4wd or mecanum (default: mecanum)"""
        return os.getenv("MOTORX_TOPOLOGY", "mecanum").lower()

    @property
    def i2c_bus(self) -> str:
        """I2C bus number for the motor board (default: 1)"""
        return os.getenv("MOTORX_I2C_BUS", "1")

    @property
    def i2c_address(self) -> str:
        """Motor board I2C address (default: 0x40)"""
        return os.getenv("MOTORX_I2C_ADDRESS", "0x40")

    @property
    def settle_ms(self) -> str:
        """Settle delay after a forced stop in ms (default: 100)"""
        return os.getenv("MOTORX_SETTLE_MS", "100")

    @property
    def line_color_name(self) -> str:
        """Line color: black or white (default: white, pin high on the line)"""
        return os.getenv("MOTORX_LINE_COLOR", "white").lower()

    @property
    def line_mode_name(self) -> str:
        """Line following mode: fast or protected (default: fast)"""
        return os.getenv("MOTORX_LINE_MODE", "fast").lower()

    @property
    def sensor_pins_raw(self) -> str:
        """Comma-separated pins for X1..X4 (default: 12,13,14,15)"""
        return os.getenv("MOTORX_SENSOR_PINS", "12,13,14,15")

    def validate(self) -> Tuple[bool, List[str]]:
        """
        Validate configuration

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []

        if self.topology_name not in [t.value for t in DrivetrainTopology]:
            errors.append(
                f"MOTORX_TOPOLOGY has invalid value '{self.topology_name}' "
                f"(expected one of: {', '.join(t.value for t in DrivetrainTopology)})"
            )

        if self._parse_int(self.i2c_bus) is None:
            errors.append("MOTORX_I2C_BUS must be an integer")

        address = self._parse_int(self.i2c_address)
        if address is None or not 0x03 <= address <= 0x77:
            errors.append("MOTORX_I2C_ADDRESS must be a 7-bit address (e.g. 0x40)")

        settle = self._parse_int(self.settle_ms)
        if settle is None or settle < 0:
            errors.append("MOTORX_SETTLE_MS must be a non-negative integer")

        if self.line_color_name not in ("black", "white"):
            errors.append("MOTORX_LINE_COLOR must be 'black' or 'white'")

        if self.line_mode_name not in [m.value for m in LineFollowMode]:
            errors.append("MOTORX_LINE_MODE must be 'fast' or 'protected'")

        pins = [self._parse_int(p) for p in self.sensor_pins_raw.split(",")]
        if len(pins) != 4 or any(p is None for p in pins):
            errors.append("MOTORX_SENSOR_PINS must be 4 comma-separated integers")

        return len(errors) == 0, errors

    def _require_valid(self) -> None:
        is_valid, errors = self.validate()
        if not is_valid:
            raise ConfigError("; ".join(errors))

    @property
    def topology(self) -> DrivetrainTopology:
        self._require_valid()
        return DrivetrainTopology(self.topology_name)

    @property
    def bus_number(self) -> int:
        self._require_valid()
        return int(self.i2c_bus, 0)

    @property
    def address(self) -> int:
        self._require_valid()
        return int(self.i2c_address, 0)

    def guard_config(self) -> GuardConfig:
        self._require_valid()
        return GuardConfig(settle_ms=int(self.settle_ms, 0))

    def line_config(self) -> LineFollowConfig:
        self._require_valid()
        return LineFollowConfig(mode=LineFollowMode(self.line_mode_name))

    def sensor_config(self) -> SensorConfig:
        self._require_valid()
        pins = tuple(int(p, 0) for p in self.sensor_pins_raw.split(","))
        return SensorConfig(pins=pins, color=LineColor[self.line_color_name.upper()])

    @staticmethod
    def _parse_int(value: str) -> Optional[int]:
        """Parse decimal or 0x-prefixed integer, None if invalid"""
        try:
            return int(value.strip(), 0)
        except ValueError:
            return None

    def print_status(self):
        """Print configuration status"""
        print("motorx Configuration Status:")
        print(f"  .env loaded:  {'Yes' if self._loaded else 'No'}")
        print(f"  Topology:     {self.topology_name}")
        print(f"  I2C bus:      {self.i2c_bus}")
        print(f"  I2C address:  {self.i2c_address}")
        print(f"  Settle:       {self.settle_ms} ms")
        print(f"  Line color:   {self.line_color_name}")
        print(f"  Line mode:    {self.line_mode_name}")
        print(f"  Sensor pins:  {self.sensor_pins_raw}")

        is_valid, errors = self.validate()
        if is_valid:
            print("\n  Status: Configuration is valid")
        else:
            print("\n  Status: Configuration has errors:")
            for error in errors:
                print(f"    - {error}")


# Global config instance
_config = None

def get_config(reload: bool = False) -> MotorxConfig:
    """
    Get the global configuration instance

    Args:
        reload: Force reload of .env file

    Returns:
        MotorxConfig instance
    """
    global _config
    if _config is None or reload:
        _config = MotorxConfig()
    return _config


def main():
    """Command-line utility to check configuration"""
    import argparse
    import sys

    parser = argparse.ArgumentParser(
        description="motorx Configuration Utility",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Check current configuration:
    python -m motorx.config

  Validate configuration:
    python -m motorx.config --validate

  Use custom .env file:
    python -m motorx.config --env-file /path/to/.env
        """
    )

    parser.add_argument("--env-file", help="Path to .env file")
    parser.add_argument("--validate", action="store_true",
                       help="Validate configuration and exit with error if invalid")

    args = parser.parse_args()

    config = MotorxConfig(args.env_file)
    config.print_status()

    if args.validate:
        is_valid, errors = config.validate()
        if not is_valid:
            print("\nValidation failed!")
            sys.exit(1)
        else:
            print("\nValidation passed!")


if __name__ == "__main__":
    main()
