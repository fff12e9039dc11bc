# ouch

A small library for working out compression formats from file names and
file contents, and for building, unpacking and listing tar archives.
It uses only the Python standard library.

The format of a file is taken from its name: `archive.tar.gz` means "tar,
then gzip", `notes.txt.zst` means "zstd on a single file", and aliases such
as `tgz`, `tbz`, `txz` and `tzst` are understood as well.

Known extensions: `tar`, `zip`, `bz`, `bz2`, `bz3`, `gz`, `lz4`, `xz`,
`lzma`, `sz`, `zst`, `rar`, `7z`, `br`, plus the aliases `tgz`, `tbz`,
`tbz2`, `tbz3`, `tlz4`, `txz`, `tlzma`, `tsz`, `tzst`.

## Working out formats

```python
from ouch.extension import (
    build_archive_file_suggestion,
    extensions_from_path,
    flatten_compression_formats,
    parse_format_flag,
    separate_known_extensions_from_name,
    split_first_compression_format,
)

exts = extensions_from_path("backup.tar.gz")
print([str(e) for e in exts])                # ['tar', 'gz']
print(flatten_compression_formats(exts))     # [CompressionFormat.TAR, CompressionFormat.GZIP]

stem, exts = separate_known_extensions_from_name("backup.tar.gz")
print(stem)                                  # backup

first, rest = split_first_compression_format(exts)

# A format given explicitly, as a "--format" style string
exts = parse_format_flag(".tar.gz")

# Suggest an archive name when a folder was given to a single-file format
print(build_archive_file_suggestion("linux.xz.gz.zst", ".tar"))
# linux.tar.xz.gz.zst
```

`parse_format_flag` raises `InvalidFormatFlag` for unknown or empty
formats. `Extension.is_archive()` tells whether an extension starts with an
archive format (`tar`, `zip`, `rar` or `7z`).

## Sniffing files and other filesystem helpers

`ouch.fsutils.try_infer_extension(path)` reads the first bytes of a file
and returns an `Extension` for zip, tar, gzip, bzip2, bzip3, xz, lz4,
snappy, zstd, rar or 7z signatures, or `None` when nothing matches or the
file cannot be read.

`rename_or_increment_filename` turns `file.txt` into `file_1.txt` and
`file_1.txt` into `file_2.txt`; `rename_for_available_filename` keeps
going until it finds a name that does not exist. Also there:
`is_path_stdin`, `remove_file_or_dir`, `create_dir_if_non_existent` and
`cd_into_same_dir_as`.

## Walking directories

`ouch.file_visibility.FileVisibilityPolicy` decides which entries a walk
yields. By default hidden entries are skipped; `read_ignore`,
`read_git_ignore` and `read_git_exclude` switch on `.ignore`, `.gitignore`
and `.git/info/exclude` rules.

```python
from ouch.file_visibility import FileVisibilityPolicy

policy = FileVisibilityPolicy(read_git_ignore=True)
for path in policy.build_walker("project"):
    print(path)
```

## Tar archives

```python
from pathlib import Path

from ouch.file_visibility import FileVisibilityPolicy
from ouch.tar_archive import build_archive_from_paths, list_archive, unpack_archive

output_path = Path("photos.tar")
with open(output_path, "wb") as writer:
    build_archive_from_paths(
        [Path("photos").resolve()], output_path, writer, FileVisibilityPolicy(), quiet=False
    )

with open(output_path, "rb") as reader:
    for entry in list_archive(reader):
        print(entry.path, entry.is_dir)

Path("out").mkdir()
with open(output_path, "rb") as reader:
    count = unpack_archive(reader, "out", quiet=False)
```

Input paths should be absolute; each is stored relative to its parent
directory, and the output file is never put into its own archive.
`unpack_archive` needs an empty output folder, skips entries that would
climb out of it with `..`, and returns the number of entries it reported
(none when `quiet` is true).

## Listing archive contents

```python
import sys

from ouch.listing import FileInArchive, ListOptions, list_files

entries = [
    FileInArchive(path="docs", is_dir=True),
    FileInArchive(path="docs/readme.txt", is_dir=False),
]
list_files("docs.tar", entries, ListOptions(tree=True), sys.stdout)
```

Without colours, directories get a trailing `/`:

```text
Archive: docs.tar
└── docs/
   └── readme.txt
```

## Errors

Every failure is raised as a subclass of `OuchError` from `ouch.error`.
Call `to_final_error()` on it to get a `FinalError`, whose string form is a
title followed by details and hints, ready to show to a user.
`from_os_error` maps an `OSError` to `NotFound`, `PermissionDenied`,
`AlreadyExists` or `IoError`.

## Output

Messages go to standard error through `ouch.logger` (`info`, `warning`,
`info_accessible`); `spawn_logger_thread` and `shutdown_logger_and_wait`
batch them through a background thread. Colours (`ouch.colors.color`) are
dropped when `NO_COLOR` is set or output is not a terminal. Accessible
mode, switched on with `ouch.accessible.set_accessible(True)`, trims
verbose messages and drops decorative symbols for screen readers and
braille displays.

## What this package does not do

- It has no command-line program.
- It does not compress or decompress single-file formats such as gzip,
  bzip2, xz, lz4, zstd, snappy or brotli, and it cannot write or read zip,
  7z or rar archives: these formats are only recognised by name and by
  their signature bytes. Tar is the only archive format it handles.
- It does not ask the user questions on the terminal.