"""The supported compression formats and the extensions that name them."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from itertools import chain
from pathlib import Path
from typing import Iterable

from .error import InvalidFormatFlag
from .logger import warning


class CompressionFormat(enum.Enum):
    """Accepted formats for input and output."""

    GZIP = "gzip"
    BZIP = "bzip"
    BZIP3 = "bzip3"
    LZ4 = "lz4"
    LZMA = "lzma"
    SNAPPY = "snappy"
    TAR = "tar"
    ZSTD = "zstd"
    ZIP = "zip"
    # Recognised even though it cannot be handled.
    RAR = "rar"
    SEVENZIP = "7z"
    BROTLI = "brotli"

    def is_archive_format(self) -> bool:
        """True for formats that bundle several files into one archive."""
        return self in (
            CompressionFormat.TAR,
            CompressionFormat.ZIP,
            CompressionFormat.RAR,
            CompressionFormat.SEVENZIP,
        )


SUPPORTED_EXTENSIONS = (
    "tar",
    "zip",
    "bz",
    "bz2",
    "gz",
    "lz4",
    "xz",
    "lzma",
    "sz",
    "zst",
    "7z",
    "br",
)

SUPPORTED_ALIASES = ("tgz", "tbz", "tlz4", "txz", "tzlma", "tsz", "tzst")

_F = CompressionFormat

_EXTENSION_TABLE: dict[str, tuple[CompressionFormat, ...]] = {
    "tar": (_F.TAR,),
    "tgz": (_F.TAR, _F.GZIP),
    "tbz": (_F.TAR, _F.BZIP),
    "tbz2": (_F.TAR, _F.BZIP),
    "tbz3": (_F.TAR, _F.BZIP3),
    "tlz4": (_F.TAR, _F.LZ4),
    "txz": (_F.TAR, _F.LZMA),
    "tlzma": (_F.TAR, _F.LZMA),
    "tsz": (_F.TAR, _F.SNAPPY),
    "tzst": (_F.TAR, _F.ZSTD),
    "zip": (_F.ZIP,),
    "bz": (_F.BZIP,),
    "bz2": (_F.BZIP,),
    "bz3": (_F.BZIP3,),
    "gz": (_F.GZIP,),
    "lz4": (_F.LZ4,),
    "xz": (_F.LZMA,),
    "lzma": (_F.LZMA,),
    "sz": (_F.SNAPPY,),
    "zst": (_F.ZSTD,),
    "rar": (_F.RAR,),
    "7z": (_F.SEVENZIP,),
    "br": (_F.BROTLI,),
}


@dataclass(frozen=True)
class Extension:
    """One written extension, such as "tgz", and the formats it stands for."""

    compression_formats: tuple[CompressionFormat, ...]
    display_text: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "compression_formats", tuple(self.compression_formats))
        if not self.compression_formats:
            raise ValueError("an extension needs at least one compression format")

    def is_archive(self) -> bool:
        """Whether the first format of this extension is an archive format."""
        return self.compression_formats[0].is_archive_format()

    def __str__(self) -> str:
        return self.display_text


def _to_extension(text: str) -> Extension | None:
    formats = _EXTENSION_TABLE.get(text)
    if formats is None:
        return None
    return Extension(formats, text)


def _split_extension(name: str) -> tuple[str, Extension] | None:
    new_name, sep, ext = name.rpartition(".")
    if not sep or new_name in ("", ".", ".."):
        return None
    extension = _to_extension(ext)
    if extension is None:
        return None
    return new_name, extension


def parse_format_flag(text: str | bytes) -> list[Extension]:
    """Parse the value given to ``--format``, like "tar.gz", into extensions."""
    if isinstance(text, bytes):
        try:
            decoded = text.decode("utf-8")
        except UnicodeDecodeError:
            raise InvalidFormatFlag(text, "Invalid UTF-8.") from None
    else:
        try:
            text.encode("utf-8")
        except UnicodeEncodeError:
            raise InvalidFormatFlag(text, "Invalid UTF-8.") from None
        decoded = text

    extensions = []
    for part in decoded.split("."):
        if not part:
            continue
        extension = _to_extension(part)
        if extension is None:
            raise InvalidFormatFlag(text, f"Unsupported extension '{part}'")
        extensions.append(extension)

    if not extensions:
        raise InvalidFormatFlag(text, "Parsing got an empty list of extensions.")
    return extensions


def separate_known_extensions_from_name(path: str | os.PathLike) -> tuple[Path, list[Extension]]:
    """Split the known extensions off a file name.

    Returns the remaining name and the extensions, outermost last.
    """
    path = Path(path)
    name = path.name
    if name in ("", ".."):
        return path, []

    extensions: list[Extension] = []
    while (split := _split_extension(name)) is not None:
        name, extension = split
        extensions.insert(0, extension)

    file_stem = name.strip(".")
    if file_stem in SUPPORTED_EXTENSIONS or file_stem in SUPPORTED_ALIASES:
        warning(f"Received a file with name '{file_stem}', but {file_stem} was expected as the extension")

    return Path(name), extensions


def extensions_from_path(path: str | os.PathLike) -> list[Extension]:
    """Return only the known extensions of a path."""
    return separate_known_extensions_from_name(path)[1]


def flatten_compression_formats(extensions: Iterable[Extension]) -> list[CompressionFormat]:
    """All formats of all extensions, in order."""
    return list(chain.from_iterable(extension.compression_formats for extension in extensions))


def split_first_compression_format(
    formats: Iterable[Extension],
) -> tuple[CompressionFormat, list[CompressionFormat]]:
    """Return the first format and the remaining ones.

    Raises ValueError when there are no formats at all.
    """
    flat = flatten_compression_formats(formats)
    if not flat:
        raise ValueError("no compression formats were given")
    return flat[0], flat[1:]


def build_archive_file_suggestion(path: str | bytes | os.PathLike, suggested_extension: str) -> str | None:
    """Insert ``suggested_extension`` before the first known extension of ``path``.

    ``build_archive_file_suggestion("file.bz.xz", ".tar")`` gives ``"file.tar.bz.xz"``;
    None is returned when the path has no known extension.
    """
    raw = os.fspath(path)
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw

    start = 0
    while (dot := text.find(".", start)) != -1:
        start = dot + 1
        candidate = text[start:].split(".", 1)[0]
        if candidate in SUPPORTED_EXTENSIONS or candidate in SUPPORTED_ALIASES:
            return text[:dot] + suggested_extension + text[dot:]
    return None