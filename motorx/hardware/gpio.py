"""GPIO backends using lgpio: line sensor pins and quadrature encoders.

Install: pip install lgpio (Raspberry Pi OS ships python3-lgpio).
"""

import logging
from typing import Iterable, Optional

import lgpio


logger = logging.getLogger(__name__)


# Quadrature step indexed by (previous AB << 2) | current AB
QDEC_TABLE = (0, 1, -1, 0, -1, 0, 0, 1, 1, 0, 0, -1, 0, -1, 1, 0)

# Default encoder wiring (A, B)
LEFT_ENCODER_PINS = (17, 27)
RIGHT_ENCODER_PINS = (5, 6)


class LgpioPins:
    """Digital inputs with pull-ups, claimed on first read."""

    def __init__(self, chip: int = 0, pins: Iterable[int] = ()) -> None:
        """
        Args:
            chip: gpiochip number
            pins: Pins to claim up front
        """
        self.handle = lgpio.gpiochip_open(chip)
        self._claimed: set[int] = set()
        for pin in pins:
            self._claim(pin)

    def read_digital_pin(self, pin: int) -> int:
        if pin not in self._claimed:
            self._claim(pin)
        return lgpio.gpio_read(self.handle, pin)

    def close(self) -> None:
        lgpio.gpiochip_close(self.handle)

    def _claim(self, pin: int) -> None:
        lgpio.gpio_claim_input(self.handle, pin, lgpio.SET_PULL_UP)
        self._claimed.add(pin)


class QuadratureEncoder:
    """One quadrature channel decoded from A/B edge callbacks."""

    def __init__(self, handle: int, pin_a: int, pin_b: int) -> None:
        self.handle = handle
        self.pin_a = pin_a
        self.pin_b = pin_b
        self.count = 0

        for pin in (pin_a, pin_b):
            lgpio.gpio_claim_alert(self.handle, pin, lgpio.BOTH_EDGES, lgpio.SET_PULL_UP)
        self._prev = self._read_ab()
        self._callbacks = [
            lgpio.callback(self.handle, pin, lgpio.BOTH_EDGES, self._on_edge)
            for pin in (pin_a, pin_b)
        ]

    def reset(self) -> None:
        self.count = 0

    def cancel(self) -> None:
        for cb in self._callbacks:
            cb.cancel()

    def _read_ab(self) -> int:
        a = lgpio.gpio_read(self.handle, self.pin_a)
        b = lgpio.gpio_read(self.handle, self.pin_b)
        return (a << 1) | b

    def _on_edge(self, chip: int, gpio: int, level: int, tick: int) -> None:
        curr = self._read_ab()
        self.count += QDEC_TABLE[(self._prev << 2) | curr]
        self._prev = curr


class LgpioEncoders:
    """
    The two wheel encoders (left on M1, right on M2).

    Counting happens on lgpio's callback thread; readers only see the
    latest count.
    """

    def __init__(
        self,
        chip: int = 0,
        left_pins: tuple[int, int] = LEFT_ENCODER_PINS,
        right_pins: tuple[int, int] = RIGHT_ENCODER_PINS,
        handle: Optional[int] = None,
    ) -> None:
        """
        Args:
            chip: gpiochip number, ignored when handle is given
            left_pins: (A, B) pins of the left encoder
            right_pins: (A, B) pins of the right encoder
            handle: Already open gpiochip handle to share
        """
        self._owns_handle = handle is None
        self.handle = lgpio.gpiochip_open(chip) if handle is None else handle
        self.left = QuadratureEncoder(self.handle, *left_pins)
        self.right = QuadratureEncoder(self.handle, *right_pins)
        logger.info(f"Encoders on left={left_pins} right={right_pins}")

    def reset(self) -> None:
        self.left.reset()
        self.right.reset()

    def count_left(self) -> int:
        return self.left.count

    def count_right(self) -> int:
        return self.right.count

    def close(self) -> None:
        self.left.cancel()
        self.right.cancel()
        if self._owns_handle:
            lgpio.gpiochip_close(self.handle)
