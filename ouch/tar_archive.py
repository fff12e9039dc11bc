"""Building, unpacking and listing tar archives."""

from __future__ import annotations

import os
import tarfile
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Iterator, Sequence

from .error import CustomError, FinalError, IoError, from_os_error
from .file_visibility import FileVisibilityPolicy
from .fsutils import cd_into_same_dir_as
from .listing import FileInArchive
from .logger import info, warning

# Entry paths are sanitised before extraction, so no further filtering is wanted.
_EXTRACT_OPTIONS = {"filter": "fully_trusted"} if hasattr(tarfile, "fully_trusted_filter") else {}

_SIZE_UNITS = ("B", "kB", "MB", "GB", "TB", "PB")


def _format_size(size: int) -> str:
    value = float(size)
    for unit in _SIZE_UNITS:
        if value < 1000 or unit == _SIZE_UNITS[-1]:
            return f"{size} B" if unit == "B" else f"{value:.2f} {unit}"
        value /= 1000
    return f"{size} B"


def _strip_cur_dir(path: Path) -> str:
    try:
        return os.fspath(path.relative_to(Path.cwd()))
    except (ValueError, OSError):
        return os.fspath(path)


def _sanitized_entry_path(name: str) -> str | None:
    """Drop root and "." components; return None if the path climbs out with "..".

    An empty string means the entry names the destination folder itself.
    """
    parts = []
    for part in PurePosixPath(name).parts:
        if part.startswith("/") or part == ".":
            continue
        if part == "..":
            return None
        parts.append(part)
    return "/".join(parts)


def unpack_archive(reader: BinaryIO, output_folder: str | os.PathLike, quiet: bool) -> int:
    """Unpack the tar stream ``reader`` into the empty folder ``output_folder``.

    Returns the number of entries reported as extracted (none are reported when quiet).
    Raises ValueError if ``output_folder`` is not empty.
    """
    output_folder = Path(output_folder)
    try:
        if any(output_folder.iterdir()):
            raise ValueError(f"output folder {os.fspath(output_folder)!r} is not empty")
    except OSError as err:
        raise from_os_error(err) from err

    files_unpacked = 0
    try:
        with tarfile.open(fileobj=reader, mode="r|") as archive:
            for member in archive:
                original_name = member.name
                relative = _sanitized_entry_path(original_name)
                if relative:
                    member.name = relative
                    archive.extract(member, path=output_folder, **_EXTRACT_OPTIONS)

                # Per-file messages are noise for screen readers, so they are
                # only shown when not quiet.
                if not quiet:
                    shown = _strip_cur_dir(output_folder / original_name)
                    info(f'"{shown}" extracted. ({_format_size(member.size)})')
                    files_unpacked += 1
    except tarfile.TarError as err:
        raise IoError(str(err)) from err
    except OSError as err:
        raise from_os_error(err) from err

    return files_unpacked


def list_archive(reader: BinaryIO) -> Iterator[FileInArchive]:
    """Yield the entries of the tar stream ``reader`` in archive order."""
    try:
        with tarfile.open(fileobj=reader, mode="r|") as archive:
            for member in archive:
                yield FileInArchive(Path(member.name), member.isdir())
    except tarfile.TarError as err:
        raise IoError(str(err)) from err
    except OSError as err:
        raise from_os_error(err) from err


def _file_identity(path: str | os.PathLike) -> tuple[int, int] | None:
    try:
        stat = os.stat(path)
    except OSError:
        return None
    return stat.st_dev, stat.st_ino


def _append(archive: tarfile.TarFile, path: Path) -> None:
    arcname = os.fspath(path)
    if path.is_dir():
        archive.addfile(archive.gettarinfo(arcname, arcname))
        return

    try:
        file = open(path, "rb")
    except FileNotFoundError:
        if path.is_symlink():
            # A broken symlink: nothing to archive.
            return
        raise
    with file:
        try:
            member = archive.gettarinfo(arcname=arcname, fileobj=file)
            archive.addfile(member, file)
        except OSError as err:
            raise CustomError(
                FinalError("Could not create archive")
                .detail("Unexpected error while trying to read file")
                .detail(f"Error: {err}.")
            ) from err


def build_archive_from_paths(
    input_filenames: Sequence[str | os.PathLike],
    output_path: str | os.PathLike,
    writer: BinaryIO,
    file_visibility_policy: FileVisibilityPolicy,
    quiet: bool,
) -> BinaryIO:
    """Write a tar archive of ``input_filenames`` to ``writer`` and return ``writer``.

    Input paths are expected to be absolute; each is stored relative to its parent.
    The file at ``output_path`` is never put into its own archive.
    """
    output_path = Path(output_path)
    output_identity = _file_identity(output_path)

    try:
        archive = tarfile.open(fileobj=writer, mode="w|", format=tarfile.GNU_FORMAT, dereference=True)
        with archive:
            for filename in input_filenames:
                filename = Path(filename)
                previous_location = cd_into_same_dir_as(filename)
                try:
                    for path in file_visibility_policy.build_walker(filename.name):
                        if output_identity is not None and _file_identity(path) == output_identity:
                            warning(f"Cannot compress `{os.fspath(output_path)}` into itself, skipping")
                            continue
                        if not quiet:
                            info(f"Compressing '{os.fspath(path)}'")
                        _append(archive, path)
                finally:
                    os.chdir(previous_location)
    except OSError as err:
        raise from_os_error(err) from err

    return writer