"""Tests for AntiReversalGuard"""

import pytest
from motorx.guard import AntiReversalGuard
from motorx.hardware import MockMotorBoard
from motorx.mapper import KinematicMapper, UnsupportedMotionError
from motorx.motors import MotorChannelDriver
from motorx.types import Direction, DrivetrainTopology, GuardConfig, MotionClass, WheelId


class FakeSleep:
    """Records sleeps instead of blocking"""

    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def board():
    return MockMotorBoard()


@pytest.fixture
def sleep():
    return FakeSleep()


@pytest.fixture
def guard(board, sleep):
    topology = DrivetrainTopology.MECANUM
    return AntiReversalGuard(
        KinematicMapper(topology),
        MotorChannelDriver(board, topology),
        GuardConfig(settle_ms=100),
        sleep=sleep,
    )


def test_initial_state(guard):
    assert guard.last_commanded == MotionClass.STOP


def test_same_class_no_delay(guard, board, sleep):
    """Test speed changes within one direction pass straight through"""
    guard.move(Direction.FORWARD, 50)
    guard.move(Direction.FORWARD, 80)

    assert sleep.calls == []
    assert board.all_off_count == 0
    assert board.vector == (80, 80, 80, 80)


def test_reversal_forces_stop_and_settle(guard, board, sleep):
    """Test forward -> back issues one stop and one settle before writing"""
    guard.move(Direction.FORWARD, 50)
    board.clear()

    guard.move(Direction.BACK, 50)

    assert sleep.calls == [pytest.approx(0.1)]
    assert board.all_off_count == 1
    # Stop comes before any write of the new vector
    assert board.writes[0] == ("all_off", 0, 0)
    assert board.writes[1:] == [("duty", ch, -50) for ch in range(1, 5)]
    assert guard.last_commanded == MotionClass.BACK


def test_from_stop_no_delay(guard, board, sleep):
    """Test resuming from stop never settles"""
    guard.move(Direction.FORWARD, 50)
    guard.stop()
    guard.move(Direction.BACK, 50)

    assert sleep.calls == []
    assert board.all_off_count == 1   # the explicit stop only


def test_stop_sets_state_without_delay(guard, sleep):
    guard.spin(True, 40)
    guard.stop()
    assert guard.last_commanded == MotionClass.STOP
    assert sleep.calls == []


def test_spin_direction_change_settles(guard, sleep):
    guard.spin(True, 40)
    guard.spin(False, 40)
    assert len(sleep.calls) == 1
    assert guard.last_commanded == MotionClass.SPIN_RIGHT


def test_any_class_change_settles(guard, sleep):
    """Test non-opposite changes are also treated as abrupt"""
    guard.move(Direction.FORWARD, 50)
    guard.move(Direction.LEFT_FRONT, 50)
    guard.spin(True, 50)
    assert len(sleep.calls) == 2


def test_move_returns_written_command(guard):
    command = guard.move(Direction.RIGHT, 70)
    assert command.as_tuple() == (70, -70, -70, 70)


def test_state_callbacks(guard):
    """Test callbacks see every class change once"""
    changes = []
    guard.add_state_callback(lambda old, new: changes.append((old, new)))

    guard.move(Direction.FORWARD, 50)
    guard.move(Direction.FORWARD, 60)
    guard.stop()

    assert changes == [
        (MotionClass.STOP, MotionClass.FORWARD),
        (MotionClass.FORWARD, MotionClass.STOP),
    ]


def test_failing_callback_does_not_break_command(guard, board):
    def broken(old, new):
        raise RuntimeError("display unplugged")

    guard.add_state_callback(broken)
    guard.move(Direction.FORWARD, 30)

    assert board.vector == (30, 30, 30, 30)
    assert guard.last_commanded == MotionClass.FORWARD


def test_unsupported_move_leaves_state(board, sleep):
    """Test a rejected strafe does not stop or change the motion class"""
    topology = DrivetrainTopology.TWO_WHEEL
    guard = AntiReversalGuard(
        KinematicMapper(topology),
        MotorChannelDriver(board, topology),
        GuardConfig(),
        sleep=sleep,
    )
    guard.move(Direction.FORWARD, 50)
    board.clear()

    with pytest.raises(UnsupportedMotionError):
        guard.move(Direction.LEFT, 50)

    assert board.writes == []
    assert sleep.calls == []
    assert guard.last_commanded == MotionClass.FORWARD


def test_admit_steering_no_reversal(guard, sleep, board):
    current = {WheelId.FRONT_LEFT: 50, WheelId.FRONT_RIGHT: 50}
    target = {WheelId.FRONT_LEFT: 20, WheelId.FRONT_RIGHT: 50}

    assert guard.admit_steering(current, target) is False
    assert sleep.calls == []
    assert guard.last_commanded == MotionClass.FORWARD


def test_admit_steering_reversal(guard, sleep, board):
    """Test a wheel flipping sign forces stop and settle"""
    current = {WheelId.FRONT_LEFT: 50, WheelId.FRONT_RIGHT: 50}
    target = {WheelId.FRONT_LEFT: -40, WheelId.FRONT_RIGHT: 50}

    assert guard.admit_steering(current, target) is True
    assert len(sleep.calls) == 1
    assert board.all_off_count == 1


def test_admit_steering_from_zero(guard, sleep):
    """Test starting a stopped wheel in reverse is not a reversal"""
    current = {WheelId.FRONT_LEFT: 0}
    target = {WheelId.FRONT_LEFT: -40}
    assert guard.admit_steering(current, target) is False
    assert sleep.calls == []


def test_same_class_reversed_wheel_settles(guard, board, sleep):
    """Test a wheel left spinning backwards is stopped before moving forward"""
    guard.move(Direction.FORWARD, 50)
    guard.driver.set_wheel_speed(WheelId.REAR_LEFT, -30)
    board.clear()

    guard.move(Direction.FORWARD, 50)

    assert sleep.calls == [pytest.approx(0.1)]
    assert board.writes[0] == ("all_off", 0, 0)
    assert board.vector == (50, 50, 50, 50)


def test_from_stop_reversed_wheel_settles(guard, board, sleep):
    """Test direct wheel writes are checked even while the class is STOP"""
    guard.driver.set_wheel_speed(WheelId.ALL, -60)

    guard.move(Direction.FORWARD, 40)

    assert len(sleep.calls) == 1
    assert board.all_off_count == 1
    assert guard.last_commanded == MotionClass.FORWARD
