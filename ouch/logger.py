"""Buffered log output handled by a background thread.

Messages from worker threads are queued, collected by one logger thread and
written to stderr in batches, so lines from different threads never interleave.
"""

from __future__ import annotations

import enum
import queue
import sys
import threading
from dataclasses import dataclass

from .accessible import is_running_in_accessible_mode
from .colors import color

_FLUSH_TIMEOUT = 0.2
_BUFFER_CAPACITY = 16


class MessageLevel(enum.Enum):
    INFO = "info"
    WARNING = "warning"


@dataclass(frozen=True)
class PrintMessage:
    """A log message on its way to the logger thread."""

    contents: str
    accessible: bool
    level: MessageLevel

    def to_formatted_message(self) -> str | None:
        """Render the message, or return None if it must not be shown."""
        accessible_mode = is_running_in_accessible_mode()
        reset = color("RESET")
        if self.level is MessageLevel.INFO:
            yellow = color("YELLOW")
            if self.accessible:
                if accessible_mode:
                    return f"{yellow}Info:{reset} {self.contents}"
                return f"{yellow}[INFO]{reset} {self.contents}"
            if not accessible_mode:
                return f"{yellow}[INFO]{reset} {self.contents}"
            return None
        orange = color("ORANGE")
        if accessible_mode:
            return f"{orange}Warning:{reset} {self.contents}"
        return f"{orange}[WARNING]{reset} {self.contents}"


@dataclass(frozen=True)
class _Flush:
    done: threading.Event


@dataclass(frozen=True)
class _Shutdown:
    done: threading.Event


def _write_to_stderr(lines: list[str]) -> None:
    if lines:
        sys.stderr.write("\n".join(lines) + "\n")
        sys.stderr.flush()
        lines.clear()


class _LoggerThread:
    def __init__(self) -> None:
        self.commands: queue.Queue = queue.Queue()
        self.thread = threading.Thread(target=self._run, name="ouch-logger", daemon=True)
        self.thread.start()

    def _run(self) -> None:
        buffer: list[str] = []
        while True:
            try:
                command = self.commands.get(timeout=_FLUSH_TIMEOUT)
            except queue.Empty:
                _write_to_stderr(buffer)
                continue

            if isinstance(command, PrintMessage):
                text = command.to_formatted_message()
                if text is not None:
                    buffer.append(text)
                if len(buffer) >= _BUFFER_CAPACITY:
                    _write_to_stderr(buffer)
            elif isinstance(command, _Flush):
                _write_to_stderr(buffer)
                command.done.set()
            else:
                _write_to_stderr(buffer)
                command.done.set()
                return


_logger: _LoggerThread | None = None
_lock = threading.Lock()


def spawn_logger_thread() -> None:
    """Start the logger thread. Raises RuntimeError if one is already running."""
    global _logger
    with _lock:
        if _logger is not None:
            raise RuntimeError("the logger thread is already running")
        _logger = _LoggerThread()


def shutdown_logger_and_wait() -> None:
    """Ask the logger to write out pending messages and stop, then wait for it."""
    global _logger
    with _lock:
        logger, _logger = _logger, None
    if logger is None:
        return
    done = threading.Event()
    logger.commands.put(_Shutdown(done))
    done.wait()
    logger.thread.join()


def flush_messages() -> None:
    """Write out all pending messages; useful before reading from stdin."""
    with _lock:
        logger = _logger
    if logger is None:
        sys.stderr.flush()
        return
    done = threading.Event()
    logger.commands.put(_Flush(done))
    done.wait()


def _send(message: PrintMessage) -> None:
    with _lock:
        logger = _logger
        if logger is not None:
            logger.commands.put(message)
            return
    text = message.to_formatted_message()
    if text is not None:
        _write_to_stderr([text])


def info(contents: str) -> None:
    """An [INFO] log shown only outside accessible mode."""
    _send(PrintMessage(contents, accessible=False, level=MessageLevel.INFO))


def info_accessible(contents: str) -> None:
    """An [INFO] log shown in every mode."""
    _send(PrintMessage(contents, accessible=True, level=MessageLevel.INFO))


def warning(contents: str) -> None:
    """A [WARNING] log; warnings are always shown."""
    _send(PrintMessage(contents, accessible=True, level=MessageLevel.WARNING))