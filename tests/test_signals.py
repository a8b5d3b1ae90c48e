"""Tests for signals module."""
import pytest

from cookiecore.signals import SIGNAL_LEVEL, Signal, SignalKind, SignalLevel, SignalLog, discard


def test_every_kind_has_a_level():
    assert set(SIGNAL_LEVEL) == set(SignalKind)


@pytest.mark.parametrize(
    "kind",
    [
        SignalKind.LOAD_FAILED,
        SignalKind.INSUFFICIENT_FUNDS,
        SignalKind.MAX_OWNED,
        SignalKind.SAVE_FAILED,
    ],
)
def test_error_kinds(kind):
    assert Signal(kind).level is SignalLevel.ERROR
    assert Signal(kind).is_error


@pytest.mark.parametrize(
    "kind",
    [
        SignalKind.LOADED,
        SignalKind.PURCHASED,
        SignalKind.SAVED,
        SignalKind.ACHIEVEMENT_UNLOCKED,
        SignalKind.RESET,
    ],
)
def test_info_kinds(kind):
    assert Signal(kind).level is SignalLevel.INFO
    assert not Signal(kind).is_error


def test_signal_is_frozen():
    signal = Signal(SignalKind.SAVED, "saved")
    with pytest.raises(AttributeError):
        signal.message = "changed"


def test_signal_log_records_in_order():
    log = SignalLog()
    log(Signal(SignalKind.PURCHASED, "Purchased Grandma!", "grandma"))
    log(Signal(SignalKind.ACHIEVEMENT_UNLOCKED, subject="first-grandma"))
    assert log.kinds() == [SignalKind.PURCHASED, SignalKind.ACHIEVEMENT_UNLOCKED]
    assert [s.subject for s in log.signals] == ["grandma", "first-grandma"]
    log.clear()
    assert log.signals == []


def test_discard():
    assert discard(Signal(SignalKind.RESET)) is None
