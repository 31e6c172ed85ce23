"""Tests for the lgpio backends, with a fake lgpio module in place"""

import importlib
import sys

import pytest


class FakeLgpio:
    """Stands in for the lgpio module: chip functions plus flag constants"""

    SET_PULL_UP = 32
    BOTH_EDGES = 3

    def __init__(self):
        self.levels = {}
        self.claimed_inputs = []
        self.alerts = []
        self.callbacks = {}
        self.closed = False

    def gpiochip_open(self, chip):
        return 7

    def gpiochip_close(self, handle):
        self.closed = True

    def gpio_claim_input(self, handle, pin, flags=0):
        self.claimed_inputs.append(pin)

    def gpio_claim_alert(self, handle, pin, edge, flags=0, notify=None):
        self.alerts.append(pin)

    def gpio_read(self, handle, pin):
        return self.levels.get(pin, 1)

    def callback(self, handle, pin, edge, func):
        cb = FakeCallback()
        self.callbacks.setdefault(pin, []).append((cb, func))
        return cb

    def edge(self, pin, level):
        """Set a level and fire the live callbacks"""
        self.levels[pin] = level
        for cb, func in self.callbacks.get(pin, []):
            if not cb.cancelled:
                func(7, pin, level, 0)


class FakeCallback:
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


@pytest.fixture
def chip(monkeypatch):
    fake = FakeLgpio()
    monkeypatch.setitem(sys.modules, "lgpio", fake)
    return fake


@pytest.fixture
def gpio(chip, monkeypatch):
    """The backend module bound to the fake chip"""
    module = importlib.import_module("motorx.hardware.gpio")
    monkeypatch.setattr(module, "lgpio", chip)
    return module


def test_pins_claim_and_read(gpio, chip):
    pins = gpio.LgpioPins(pins=[12, 13])
    assert chip.claimed_inputs == [12, 13]

    chip.levels[14] = 0
    assert pins.read_digital_pin(14) == 0
    assert chip.claimed_inputs == [12, 13, 14]

    pins.read_digital_pin(14)
    assert chip.claimed_inputs.count(14) == 1


def test_encoders_claim_alerts(gpio, chip):
    gpio.LgpioEncoders(left_pins=(17, 27), right_pins=(5, 6))
    assert chip.alerts == [17, 27, 5, 6]


def test_quadrature_counts_both_directions(gpio, chip):
    """Test one full AB cycle counts 4 steps and the reverse cycle undoes it"""
    encoders = gpio.LgpioEncoders(left_pins=(17, 27), right_pins=(5, 6))
    a, b = 17, 27

    # AB: 11 -> 01 -> 00 -> 10 -> 11
    chip.edge(a, 0)
    chip.edge(b, 0)
    chip.edge(a, 1)
    chip.edge(b, 1)
    assert encoders.count_left() == -4
    assert encoders.count_right() == 0

    # And back: 11 -> 10 -> 00 -> 01 -> 11
    chip.edge(b, 0)
    chip.edge(a, 0)
    chip.edge(b, 1)
    chip.edge(a, 1)
    assert encoders.count_left() == 0


def test_encoder_reset_and_close(gpio, chip):
    encoders = gpio.LgpioEncoders()
    chip.edge(5, 0)
    assert encoders.count_right() != 0

    encoders.reset()
    assert encoders.count_left() == 0
    assert encoders.count_right() == 0

    encoders.close()
    assert chip.closed is True

    # Cancelled callbacks no longer count
    chip.edge(5, 1)
    assert encoders.count_right() == 0


def test_shared_handle_not_closed(gpio, chip):
    encoders = gpio.LgpioEncoders(handle=3)
    encoders.close()
    assert chip.closed is False
