import pytest

from ouch import accessible, colors, logger
from ouch.logger import MessageLevel, PrintMessage


@pytest.fixture(autouse=True)
def _plain_output(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setattr(accessible, "_accessible", None)
    colors.colors_enabled.cache_clear()
    yield
    logger.shutdown_logger_and_wait()
    colors.colors_enabled.cache_clear()


@pytest.fixture
def accessible_mode(monkeypatch):
    monkeypatch.setattr(accessible, "_accessible", True)


def test_info_format_normal_mode():
    message = PrintMessage("hello", accessible=False, level=MessageLevel.INFO)
    assert message.to_formatted_message() == "[INFO] hello"


def test_accessible_info_format_normal_mode():
    message = PrintMessage("hello", accessible=True, level=MessageLevel.INFO)
    assert message.to_formatted_message() == "[INFO] hello"


def test_info_hidden_in_accessible_mode(accessible_mode):
    message = PrintMessage("hello", accessible=False, level=MessageLevel.INFO)
    assert message.to_formatted_message() is None


def test_accessible_info_in_accessible_mode(accessible_mode):
    message = PrintMessage("hello", accessible=True, level=MessageLevel.INFO)
    assert message.to_formatted_message() == "Info: hello"


def test_warning_formats():
    message = PrintMessage("careful", accessible=True, level=MessageLevel.WARNING)
    assert message.to_formatted_message() == "[WARNING] careful"


def test_warning_in_accessible_mode(accessible_mode):
    message = PrintMessage("careful", accessible=True, level=MessageLevel.WARNING)
    assert message.to_formatted_message() == "Warning: careful"


def test_thread_writes_messages_in_order_on_shutdown(capsys):
    logger.spawn_logger_thread()
    logger.info("a")
    logger.warning("b")
    logger.info_accessible("c")
    logger.shutdown_logger_and_wait()
    assert capsys.readouterr().err == "[INFO] a\n[WARNING] b\n[INFO] c\n"


def test_flush_messages_writes_pending_lines(capsys):
    logger.spawn_logger_thread()
    logger.warning("x")
    logger.flush_messages()
    assert capsys.readouterr().err == "[WARNING] x\n"


def test_info_suppressed_in_accessible_mode(capsys, accessible_mode):
    logger.spawn_logger_thread()
    logger.info("skipped")
    logger.shutdown_logger_and_wait()
    assert capsys.readouterr().err == ""


def test_spawning_twice_raises():
    logger.spawn_logger_thread()
    with pytest.raises(RuntimeError):
        logger.spawn_logger_thread()


def test_messages_without_thread_are_written_directly(capsys):
    logger.warning("direct")
    assert capsys.readouterr().err == "[WARNING] direct\n"