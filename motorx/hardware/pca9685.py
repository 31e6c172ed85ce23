"""
PCA9685 motor board - Drives the 4 H-bridges over I2C.

Each motor sits on a pair of PWM outputs: Mn uses channels (2n-2, 2n-1).
Forward drives the first channel of the pair, reverse the second, and
zero releases both. Duty is 12-bit (0..4095).

Uses smbus2, so it needs a Linux I2C bus (e.g. /dev/i2c-1 on a Pi).
"""

import logging
import time
from typing import Callable, Optional

import smbus2


logger = logging.getLogger(__name__)


# Registers
MODE1 = 0x00
LED0_ON_L = 0x06
ALL_LED_ON_L = 0xFA
PRESCALE = 0xFE

DEFAULT_ADDRESS = 0x40

# 25 MHz / 4096 / 50 Hz - 1
PRESCALE_50HZ = 121

DUTY_MAX = 4095
FULL_OFF = 0x10            # Bit 4 of LEDn_OFF_H

# Motor channel -> (forward output, reverse output)
MOTOR_OUTPUTS = {
    1: (0, 1),
    2: (2, 3),
    3: (4, 5),
    4: (6, 7),
}


def percent_to_duty(percent: int) -> int:
    """Convert a speed magnitude 0..100 into a 12-bit duty"""
    return min(abs(percent), 100) * DUTY_MAX // 100


class PCA9685MotorBoard:
    """
    Motor board backend for the PCA9685 driver.

    The chip is initialized lazily on the first write, once.
    """

    def __init__(
        self,
        bus: Optional[smbus2.SMBus] = None,
        bus_number: int = 1,
        address: int = DEFAULT_ADDRESS,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        """
        Initialize board.

        Args:
            bus: Open SMBus (default: opens bus_number)
            bus_number: I2C bus number (default: 1)
            address: 7-bit chip address (default: 0x40)
            sleep: Blocking sleep in seconds (default: time.sleep)
        """
        self.bus = bus if bus is not None else smbus2.SMBus(bus_number)
        self.address = address
        self._sleep = sleep if sleep is not None else time.sleep
        self._initialized = False

    def init(self) -> None:
        """Reset the chip and set 50 Hz PWM with register auto-increment"""
        if self._initialized:
            return
        self._initialized = True

        logger.info(f"Initializing PCA9685 at 0x{self.address:02X}")
        self.bus.write_byte_data(self.address, MODE1, 0x00)

        oldmode = self.bus.read_byte_data(self.address, MODE1)
        newmode = (oldmode & 0x7F) | 0x10  # Sleep
        self.bus.write_byte_data(self.address, MODE1, newmode)
        self.bus.write_byte_data(self.address, PRESCALE, PRESCALE_50HZ)
        self.bus.write_byte_data(self.address, MODE1, oldmode)
        self._sleep(0.005)
        self.bus.write_byte_data(self.address, MODE1, oldmode | 0xA1)  # Auto-increment

        self._all_off()

    def set_pwm(self, output: int, on: int, off: int) -> None:
        """Write raw on/off counts to one of the 16 outputs"""
        register = LED0_ON_L + 4 * output
        self.bus.write_i2c_block_data(
            self.address,
            register,
            [on & 0xFF, (on >> 8) & 0x0F, off & 0xFF, (off >> 8) & 0x0F],
        )

    def set_duty(self, output: int, duty: int) -> None:
        self.set_pwm(output, 0, min(duty, DUTY_MAX))

    def write_channel_duty(self, channel: int, percent: int) -> None:
        """
        Drive one motor.

        Args:
            channel: Motor channel 1..4
            percent: Signed duty -100..100
        """
        self.init()
        if channel not in MOTOR_OUTPUTS:
            raise ValueError(f"Motor channel must be 1..4, got {channel}")

        forward, reverse = MOTOR_OUTPUTS[channel]
        duty = percent_to_duty(percent)

        if percent > 0:
            self.set_duty(forward, duty)
            self.set_duty(reverse, 0)
        elif percent < 0:
            self.set_duty(forward, 0)
            self.set_duty(reverse, duty)
        else:
            self.set_duty(forward, 0)
            self.set_duty(reverse, 0)

    def write_all_off(self) -> None:
        """Full-off every output with one broadcast write"""
        self.init()
        self._all_off()

    def close(self) -> None:
        """Release the outputs and the bus"""
        if self._initialized:
            self._all_off()
        self.bus.close()

    def _all_off(self) -> None:
        self.bus.write_i2c_block_data(self.address, ALL_LED_ON_L, [0, 0, 0, FULL_OFF])
