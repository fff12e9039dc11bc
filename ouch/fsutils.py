"""Filesystem helpers."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from .error import CompressingRootFolder, from_os_error
from .extension import CompressionFormat, Extension
from .logger import info_accessible

_U32_MAX = 0xFFFFFFFF
_SNIFF_SIZE = 270


def is_path_stdin(path: str | os.PathLike) -> bool:
    """True if the path is "-", the name used for standard input."""
    return os.fspath(path) in ("-", b"-")


def remove_file_or_dir(path: str | os.PathLike) -> None:
    """Remove a file or a whole directory tree; do nothing if neither exists."""
    path = Path(path)
    try:
        if path.is_dir():
            if path.is_symlink():
                path.unlink()
            else:
                shutil.rmtree(path)
        elif path.is_file():
            path.unlink()
    except OSError as err:
        raise from_os_error(err) from err


def rename_or_increment_filename(path: str | os.PathLike) -> Path:
    """Append "_1" to the file stem, or increment a trailing "_<number>".

    ``file.txt`` becomes ``file_1.txt`` and ``file_1.txt`` becomes ``file_2.txt``.
    """
    path = Path(path)
    stem = path.stem
    extension = path.suffix[1:]

    base, sep, number_text = stem.rpartition("_")
    if sep and all(char.isnumeric() for char in number_text):
        number = int(number_text) if number_text.isascii() and number_text.isdigit() else 0
        if number > _U32_MAX:
            number = 0
        new_name = f"{base}_{number + 1}"
    else:
        new_name = f"{stem}_1"

    new_path = path.parent / new_name
    if extension:
        new_path = new_path.with_suffix(f".{extension}")
    return new_path


def rename_for_available_filename(path: str | os.PathLike) -> Path:
    """Find a renamed path in the same directory that does not exist yet."""
    renamed = rename_or_increment_filename(path)
    while renamed.exists():
        renamed = rename_or_increment_filename(renamed)
    return renamed


def create_dir_if_non_existent(path: str | os.PathLike) -> None:
    """Create the directory, with its parents, if nothing is at ``path``."""
    path = Path(path)
    if path.exists():
        return
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as err:
        raise from_os_error(err) from err
    info_accessible(f"Directory {os.fspath(path)} created")


def cd_into_same_dir_as(filename: str | os.PathLike) -> Path:
    """Change into the directory holding ``filename`` and return the previous one.

    Raises CompressingRootFolder when ``filename`` has no parent.
    """
    try:
        previous = Path.cwd()
    except OSError as err:
        raise from_os_error(err) from err

    filename = Path(filename)
    parent = filename.parent
    if parent == filename:
        raise CompressingRootFolder()
    try:
        os.chdir(parent)
    except OSError as err:
        raise from_os_error(err) from err
    return previous


def _is_zip(buf: bytes) -> bool:
    return buf[:2] == b"PK" and buf[2:4] in (b"\x03\x04", b"\x05\x06", b"\x07\x08")


def _is_tar(buf: bytes) -> bool:
    return buf[257:262] == b"ustar"


def _is_rar(buf: bytes) -> bool:
    return buf.startswith(b"Rar!\x1a\x07") and (buf[6] == 0x00 or buf[6:8] == b"\x01\x00")


_SIGNATURES = (
    (_is_zip, (CompressionFormat.ZIP,), "zip"),
    (_is_tar, (CompressionFormat.TAR,), "tar"),
    (lambda buf: buf.startswith(b"\x1f\x8b\x08"), (CompressionFormat.GZIP,), "gz"),
    (lambda buf: buf.startswith(b"BZh"), (CompressionFormat.BZIP,), "bz2"),
    (lambda buf: buf.startswith(b"BZ3v1"), (CompressionFormat.BZIP3,), "bz3"),
    (lambda buf: buf.startswith(b"\xfd7zXZ\x00"), (CompressionFormat.LZMA,), "xz"),
    (lambda buf: buf.startswith(b"\x04\x22\x4d\x18"), (CompressionFormat.LZ4,), "lz4"),
    (lambda buf: buf.startswith(b"\xff\x06\x00\x00sNaPpY"), (CompressionFormat.SNAPPY,), "sz"),
    (lambda buf: buf.startswith(b"\x28\xb5\x2f\xfd"), (CompressionFormat.ZSTD,), "zst"),
    (_is_rar, (CompressionFormat.RAR,), "rar"),
    (lambda buf: buf.startswith(b"7z\xbc\xaf\x27\x1c"), (CompressionFormat.SEVENZIP,), "7z"),
)


def try_infer_extension(path: str | os.PathLike) -> Extension | None:
    """Guess the format of a file from the magic bytes at its start.

    Returns None when the file cannot be read or nothing matches.
    """
    try:
        with open(path, "rb") as file:
            head = file.read(_SNIFF_SIZE)
    except OSError:
        return None
    buf = head.ljust(_SNIFF_SIZE, b"\x00")

    for matches, formats, text in _SIGNATURES:
        if matches(buf):
            return Extension(formats, text)
    return None