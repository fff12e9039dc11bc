"""Error types and the user-facing error report."""

from __future__ import annotations

from dataclasses import dataclass, field

from .accessible import is_running_in_accessible_mode
from .colors import color

PRETTY_SUPPORTED_EXTENSIONS = "tar, zip, bz, bz2, bz3, gz, lz4, xz, lzma, sz, zst, 7z"
PRETTY_SUPPORTED_ALIASES = "tgz, tbz, tlz4, txz, tzlma, tsz, tzst"


@dataclass
class FinalError:
    """A formatted error report: a title, detail lines and hint lines."""

    title: str
    details: list[str] = field(default_factory=list)
    hints: list[str] = field(default_factory=list)

    def detail(self, detail: str) -> FinalError:
        """Add one detail line and return self."""
        self.details.append(detail)
        return self

    def hint(self, hint: str) -> FinalError:
        """Add one hint line and return self."""
        self.hints.append(hint)
        return self

    def hint_all_supported_formats(self) -> FinalError:
        """Add the supported extensions and aliases as hints."""
        return self.hint(f"Supported extensions are: {PRETTY_SUPPORTED_EXTENSIONS}").hint(
            f"Supported aliases are: {PRETTY_SUPPORTED_ALIASES}"
        )

    def __str__(self) -> str:
        red, yellow, green, reset = color("RED"), color("YELLOW"), color("GREEN"), color("RESET")
        accessible = is_running_in_accessible_mode()

        if accessible:
            parts = [f"{red}ERROR{reset}: {self.title}"]
        else:
            parts = [f"{red}[ERROR]{reset} {self.title}"]

        parts.extend(f"\n - {yellow}{detail}{reset}" for detail in self.details)

        if self.hints:
            parts.append("\n")
            if accessible:
                # Print "hints" once to keep screen-reader output short.
                parts.append(f"\n{green}hints:{reset}")
                parts.extend(f"\n{hint}" for hint in self.hints)
            else:
                parts.extend(f"\n{green}hint:{reset} {hint}" for hint in self.hints)

        return "".join(parts)


class OuchError(Exception):
    """Base class of every error the program reports to the user."""

    def to_final_error(self) -> FinalError:
        return FinalError(str(self.args[0]) if self.args else type(self).__name__)

    def __str__(self) -> str:
        return str(self.to_final_error())


class IoError(OuchError):
    """An I/O error without a dedicated kind."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason

    def to_final_error(self) -> FinalError:
        return FinalError(self.reason)


class NotFound(OuchError):
    def __init__(self, error_title: str) -> None:
        super().__init__(error_title)
        self.error_title = error_title

    def to_final_error(self) -> FinalError:
        return FinalError(self.error_title).detail("File not found")


class AlreadyExists(OuchError):
    def __init__(self, error_title: str) -> None:
        super().__init__(error_title)
        self.error_title = error_title

    def to_final_error(self) -> FinalError:
        return FinalError(self.error_title).detail("File already exists")


class PermissionDenied(OuchError):
    def __init__(self, error_title: str) -> None:
        super().__init__(error_title)
        self.error_title = error_title

    def to_final_error(self) -> FinalError:
        return FinalError(self.error_title).detail("Permission denied")


class CompressingRootFolder(OuchError):
    """Compressing the root folder is refused."""

    def to_final_error(self) -> FinalError:
        return (
            FinalError("It seems you're trying to compress the root folder.")
            .detail("This is unadvisable since ouch does compressions in-memory.")
            .hint("Use a more appropriate tool for this, such as rsync.")
        )


class WalkdirError(OuchError):
    """An error raised while walking a directory tree."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason

    def to_final_error(self) -> FinalError:
        return FinalError(self.reason)


class CustomError(OuchError):
    """Carries a ready-made FinalError."""

    def __init__(self, reason: FinalError) -> None:
        super().__init__(reason)
        self.reason = reason

    def to_final_error(self) -> FinalError:
        return FinalError(self.reason.title, list(self.reason.details), list(self.reason.hints))


class InvalidFormatFlag(OuchError):
    """The value given to --format could not be parsed."""

    def __init__(self, text: str | bytes, reason: str) -> None:
        super().__init__(text, reason)
        self.text = text
        self.reason = reason

    def to_final_error(self) -> FinalError:
        text = self.text.decode("utf-8", errors="replace") if isinstance(self.text, bytes) else self.text
        return (
            FinalError(f"Failed to parse `--format {text}`")
            .detail(self.reason)
            .hint_all_supported_formats()
            .hint("")
            .hint("Examples:")
            .hint("  --format tar")
            .hint("  --format gz")
            .hint("  --format tar.gz")
        )


class UnsupportedFormat(OuchError):
    """A format that is recognised but cannot be handled."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason

    def to_final_error(self) -> FinalError:
        return FinalError("Recognised but unsupported format").detail(self.reason)


class InvalidPassword(OuchError):
    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason

    def to_final_error(self) -> FinalError:
        return FinalError("Invalid password").detail(self.reason)


def from_os_error(err: OSError) -> OuchError:
    """Map an OSError to the matching OuchError."""
    title = str(err)
    if isinstance(err, FileNotFoundError):
        return NotFound(title)
    if isinstance(err, PermissionError):
        return PermissionDenied(title)
    if isinstance(err, FileExistsError):
        return AlreadyExists(title)
    return IoError(title)