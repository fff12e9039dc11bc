import pytest

from ouch import accessible


@pytest.fixture(autouse=True)
def _reset_flag(monkeypatch):
    monkeypatch.setattr(accessible, "_accessible", None)


def test_defaults_to_off():
    assert accessible.is_running_in_accessible_mode() is False


def test_set_true_turns_mode_on():
    accessible.set_accessible(True)
    assert accessible.is_running_in_accessible_mode() is True


def test_only_first_value_is_kept():
    accessible.set_accessible(True)
    accessible.set_accessible(False)
    assert accessible.is_running_in_accessible_mode() is True


def test_first_value_false_is_kept():
    accessible.set_accessible(False)
    accessible.set_accessible(True)
    assert accessible.is_running_in_accessible_mode() is False