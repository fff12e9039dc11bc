"""Which files a directory walk shows and which it skips."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from .error import WalkdirError


@dataclass(frozen=True)
class _Rule:
    regex: re.Pattern
    negated: bool
    dir_only: bool
    basename_only: bool


def _glob_to_regex(pattern: str) -> re.Pattern:
    out: list[str] = []
    i = 0
    length = len(pattern)
    while i < length:
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("/**", i) and i + 3 == length:
            out.append("/.*")
            i += 3
        elif pattern.startswith("**", i):
            out.append(".*")
            i += 2
        else:
            char = pattern[i]
            if char == "*":
                out.append("[^/]*")
            elif char == "?":
                out.append("[^/]")
            elif char == "[":
                search_from = i + 1
                if search_from < length and pattern[search_from] in "!^":
                    search_from += 1
                if search_from < length and pattern[search_from] == "]":
                    search_from += 1
                close = pattern.find("]", search_from)
                if close == -1:
                    out.append(re.escape(char))
                else:
                    content = pattern[i + 1 : close].replace("\\", "\\\\")
                    if content[:1] == "!":
                        content = "^" + content[1:]
                    out.append(f"[{content}]")
                    i = close
            elif char == "\\" and i + 1 < length:
                i += 1
                out.append(re.escape(pattern[i]))
            else:
                out.append(re.escape(char))
            i += 1
    return re.compile("".join(out), re.DOTALL)


def _parse_rule(line: str) -> _Rule | None:
    text = line.rstrip("\r\n").rstrip(" \t")
    if not text or text.startswith("#"):
        return None
    negated = False
    if text.startswith("!"):
        negated = True
        text = text[1:]
    elif text.startswith(("\\!", "\\#")):
        text = text[1:]
    dir_only = text.endswith("/")
    text = text.rstrip("/")
    if not text:
        return None
    anchored = "/" in text
    text = text.lstrip("/")
    return _Rule(_glob_to_regex(text), negated, dir_only, not anchored)


class _IgnoreFile:
    """The rules of one ignore file, relative to the directory they apply to."""

    def __init__(self, base: Path, rules: list[_Rule]) -> None:
        self.base = base
        self.rules = rules

    @classmethod
    def load(cls, file: Path, base: Path) -> _IgnoreFile | None:
        try:
            text = file.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return None
        rules = [rule for rule in map(_parse_rule, text.splitlines()) if rule is not None]
        return cls(base, rules) if rules else None

    def match(self, path: Path, is_dir: bool) -> bool | None:
        """True if ignored, False if whitelisted, None if no rule applies."""
        try:
            relative = path.relative_to(self.base).as_posix()
        except ValueError:
            return None
        basename = relative.rsplit("/", 1)[-1]
        for rule in reversed(self.rules):
            if rule.dir_only and not is_dir:
                continue
            target = basename if rule.basename_only else relative
            if rule.regex.fullmatch(target):
                return not rule.negated
        return None


def _matched(path: Path, is_dir: bool, matchers: tuple[_IgnoreFile, ...]) -> bool | None:
    for matcher in matchers:
        result = matcher.match(path, is_dir)
        if result is not None:
            return result
    return None


def _find_repo_root(path: Path) -> Path | None:
    for candidate in (path, *path.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


@dataclass(frozen=True)
class FileVisibilityPolicy:
    """Decides which files are read or skipped while walking a directory."""

    read_ignore: bool = False
    read_hidden: bool = True
    read_git_ignore: bool = False
    read_git_exclude: bool = False

    def build_walker(self, path: str | os.PathLike) -> Iterator[Path]:
        """Walk ``path`` depth first, yielding it and every visible entry below it.

        Raises WalkdirError when a directory cannot be read.
        """
        root = Path(path)
        try:
            os.lstat(root)
        except OSError as err:
            raise WalkdirError(f"IO error for operation on {root}: {err.strerror}") from err

        root_abs = Path(os.path.abspath(root))
        repo_root = _find_repo_root(root_abs)

        yield root

        if root.is_dir():
            inherited = self._ancestor_matchers(root_abs, repo_root)
            yield from self._walk_dir(root, root_abs, repo_root, inherited)

    def _ignore_files_of(self, directory: Path, repo_root: Path | None) -> list[_IgnoreFile]:
        found = []
        if self.read_ignore:
            found.append(_IgnoreFile.load(directory / ".ignore", directory))
        in_repo = repo_root is not None and (directory == repo_root or repo_root in directory.parents)
        if self.read_git_ignore and in_repo:
            found.append(_IgnoreFile.load(directory / ".gitignore", directory))
        return [matcher for matcher in found if matcher is not None]

    def _ancestor_matchers(self, root_abs: Path, repo_root: Path | None) -> tuple[_IgnoreFile, ...]:
        matchers: list[_IgnoreFile] = []
        for ancestor in root_abs.parents:
            matchers.extend(self._ignore_files_of(ancestor, repo_root))
        if self.read_git_exclude and repo_root is not None:
            exclude = _IgnoreFile.load(repo_root / ".git" / "info" / "exclude", repo_root)
            if exclude is not None:
                matchers.append(exclude)
        return tuple(matchers)

    def _walk_dir(
        self,
        directory: Path,
        directory_abs: Path,
        repo_root: Path | None,
        inherited: tuple[_IgnoreFile, ...],
    ) -> Iterator[Path]:
        matchers = tuple(self._ignore_files_of(directory_abs, repo_root)) + inherited
        try:
            with os.scandir(directory) as scan:
                entries = sorted(scan, key=lambda entry: entry.name)
        except OSError as err:
            raise WalkdirError(f"IO error for operation on {directory}: {err.strerror}") from err

        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False
            entry_abs = directory_abs / entry.name
            verdict = _matched(entry_abs, is_dir, matchers)
            if verdict is True:
                continue
            if verdict is None and self.read_hidden and entry.name.startswith("."):
                continue
            child = directory / entry.name
            yield child
            if is_dir:
                yield from self._walk_dir(child, entry_abs, repo_root, matchers)