"""Printing the contents of an archive, flat or as a tree."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Iterable

from .accessible import is_running_in_accessible_mode
from .colors import color
from .logger import warning

# The entry is the last one in its parent directory.
_PREFIX_EMPTY = "   "
# Other entries follow the corresponding directory.
_PREFIX_LINE = "│  "
_FINAL_LAST = "└── "
_FINAL_BRANCH = "├── "


@dataclass(frozen=True)
class ListOptions:
    """How archive contents are listed."""

    tree: bool = False


@dataclass(frozen=True)
class FileInArchive:
    """One entry of an archive."""

    path: Path
    is_dir: bool

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))


def print_entry(out: IO[str], name: object, is_dir: bool) -> None:
    """Write one entry, marking directories with colour or a trailing "/"."""
    if not is_dir:
        out.write(f"{name}\n")
        return
    blue = color("BLUE")
    if not blue:
        out.write(f"{name}/\n")
    elif is_running_in_accessible_mode():
        # Colours may not reach a screen reader, so keep the slash too.
        out.write(f"{blue}{color('STYLE_BOLD')}{name}/{color('ALL_RESET')}\n")
    else:
        out.write(f"{blue}{color('STYLE_BOLD')}{name}{color('ALL_RESET')}\n")


@dataclass
class Tree:
    """Directory tree built from the flat list of entries an archive stores."""

    file: FileInArchive | None = None
    children: dict[str, Tree] = field(default_factory=dict)

    def insert(self, file: FileInArchive) -> None:
        """Insert an entry at the place its path components lead to."""
        node = self
        for part in file.path.parts:
            node = node.children.setdefault(part, Tree())
        if node.file is None:
            node.file = file
        else:
            warning(f"multiple files with the same name in a single directory ({os.fspath(node.file.path)})")

    def render(self, out: IO[str]) -> None:
        """Write the tree using box-drawing characters."""
        self._render_children(out, "")

    def _render_children(self, out: IO[str], prefix: str) -> None:
        last_index = len(self.children) - 1
        for index, (name, subtree) in enumerate(self.children.items()):
            subtree._render(out, name, prefix, index == last_index)

    def _render(self, out: IO[str], name: str, prefix: str, last: bool) -> None:
        out.write(prefix + (_FINAL_LAST if last else _FINAL_BRANCH))
        is_dir = self.file.is_dir if self.file is not None else True
        print_entry(out, name, is_dir)
        self._render_children(out, prefix + (_PREFIX_EMPTY if last else _PREFIX_LINE))


def list_files(
    archive: str | os.PathLike,
    files: Iterable[FileInArchive],
    list_options: ListOptions,
    out: IO[str] | None = None,
) -> None:
    """Print the entries of ``archive``; errors raised by ``files`` propagate."""
    stream = out if out is not None else sys.stdout
    stream.write(f"Archive: {os.fsdecode(archive)}\n")

    if list_options.tree:
        tree = Tree()
        for file in files:
            tree.insert(file)
        tree.render(stream)
    else:
        for file in files:
            print_entry(stream, os.fspath(file.path), file.is_dir)
    stream.flush()