"""Tests for MotorChannelDriver and EncoderReader"""

import logging

import pytest
from motorx.encoders import EncoderReader
from motorx.hardware import MockEncoders, MockMotorBoard
from motorx.motors import MotorChannelDriver
from motorx.types import DrivetrainTopology, WheelCommand, WheelId


@pytest.fixture
def board():
    return MockMotorBoard()


@pytest.fixture
def driver(board):
    return MotorChannelDriver(board, DrivetrainTopology.MECANUM)


def test_speed_clamped_with_sign(board, driver):
    """Test every speed in [-150, 150] reaches the board inside [-100, 100]"""
    for speed in range(-150, 151):
        driver.set_wheel_speed(WheelId.FRONT_LEFT, speed)
        written = board.duty[1]
        assert -100 <= written <= 100
        if speed != 0:
            assert (written > 0) == (speed > 0)
        if abs(speed) <= 100:
            assert written == speed


def test_broadcast_writes_each_wheel(board, driver):
    """Test ALL expands to one write per wheel, in channel order"""
    driver.set_wheel_speed(WheelId.ALL, 40)
    assert board.writes == [("duty", 1, 40), ("duty", 2, 40), ("duty", 3, 40), ("duty", 4, 40)]


def test_broadcast_two_wheel_only_touches_wired(board):
    driver = MotorChannelDriver(board, DrivetrainTopology.TWO_WHEEL)
    driver.set_wheel_speed(WheelId.ALL, -30)
    assert board.writes == [("duty", 1, -30), ("duty", 2, -30)]


def test_unwired_wheel_rejected(board):
    driver = MotorChannelDriver(board, DrivetrainTopology.TWO_WHEEL)
    with pytest.raises(ValueError):
        driver.set_wheel_speed(WheelId.REAR_LEFT, 10)


def test_two_wheel_messages_use_chassis_names(board, caplog):
    driver = MotorChannelDriver(board, DrivetrainTopology.TWO_WHEEL)
    with caplog.at_level(logging.DEBUG, logger="motorx.motors"):
        driver.set_wheel_speed(WheelId.LEFT, 140)

    assert "Clamped LEFT speed 140 -> 100" in caplog.text
    assert "FRONT_LEFT" not in caplog.text

    with pytest.raises(ValueError, match="REAR_RIGHT is not wired on a 2wd chassis"):
        driver.set_wheel_speed(WheelId.REAR_RIGHT, 10)


def test_stop_single_wheel(board, driver):
    driver.set_wheel_speed(WheelId.ALL, 60)
    driver.stop(WheelId.FRONT_RIGHT)
    assert board.vector == (60, 0, 60, 60)
    assert board.all_off_count == 0


def test_stop_all_uses_broadcast(board, driver):
    """Test stop_all uses the board's all-off path, not per-wheel zeros"""
    driver.set_wheel_speed(WheelId.ALL, 60)
    board.clear()

    driver.stop()

    assert board.writes == [("all_off", 0, 0)]
    assert board.vector == (0, 0, 0, 0)
    assert all(speed == 0 for speed in driver.last_speeds.values())


def test_apply_command(board, driver):
    command = WheelCommand({
        WheelId.FRONT_LEFT: -80,
        WheelId.FRONT_RIGHT: 80,
        WheelId.REAR_LEFT: 80,
        WheelId.REAR_RIGHT: -80,
    })
    driver.apply(command)
    assert board.vector == (-80, 80, 80, -80)
    assert driver.last_speeds[WheelId.REAR_RIGHT] == -80


def test_last_speeds_is_a_copy(driver):
    speeds = driver.last_speeds
    speeds[WheelId.FRONT_LEFT] = 99
    assert driver.last_speeds[WheelId.FRONT_LEFT] == 0


def test_encoder_reads_wired_channels():
    reader = EncoderReader(MockEncoders(left=120, right=-35))
    assert reader.count(WheelId.FRONT_LEFT) == 120
    assert reader.count(WheelId.LEFT) == 120
    assert reader.count(WheelId.FRONT_RIGHT) == -35
    assert reader.count(WheelId.RIGHT) == -35


def test_encoder_unwired_returns_zero():
    """Test wheels without an encoder read the sentinel 0"""
    reader = EncoderReader(MockEncoders(left=120, right=-35))
    assert reader.count(WheelId.REAR_LEFT) == 0
    assert reader.count(WheelId.REAR_RIGHT) == 0
    assert reader.count(WheelId.ALL) == 0


def test_encoder_reset_zeroes_both():
    counters = MockEncoders(left=10, right=20)
    reader = EncoderReader(counters)

    reader.reset(WheelId.REAR_RIGHT)

    assert counters.reset_count == 1
    for wheel in DrivetrainTopology.MECANUM.wheels:
        assert reader.count(wheel) == 0
