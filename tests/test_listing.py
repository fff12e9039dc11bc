import io
from pathlib import Path

import pytest

from ouch import accessible
from ouch.colors import colors_enabled
from ouch.error import IoError
from ouch.listing import FileInArchive, ListOptions, Tree, list_files, print_entry


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setattr(accessible, "_accessible", False)
    colors_enabled.cache_clear()
    yield
    colors_enabled.cache_clear()


ENTRIES = [
    FileInArchive(Path("a"), True),
    FileInArchive(Path("a/b.txt"), False),
    FileInArchive(Path("c.txt"), False),
]


def _broken_entries():
    yield FileInArchive(Path("ok"), False)
    raise IoError("broken entry")


def test_print_entry_marks_directories():
    out = io.StringIO()
    print_entry(out, "dir", True)
    print_entry(out, "file", False)
    assert out.getvalue() == "dir/\nfile\n"


def test_list_files_flat():
    out = io.StringIO()
    list_files("x.tar", ENTRIES, ListOptions(tree=False), out)
    assert out.getvalue().splitlines() == ["Archive: x.tar", "a/", "a/b.txt", "c.txt"]


def test_list_files_tree():
    out = io.StringIO()
    list_files("x.tar", ENTRIES, ListOptions(tree=True), out)
    assert out.getvalue().splitlines() == [
        "Archive: x.tar",
        "├── a/",
        "│  └── b.txt",
        "└── c.txt",
    ]


def test_tree_implicit_directories_and_nesting():
    tree = Tree()
    tree.insert(FileInArchive(Path("x/y/z.txt"), False))
    out = io.StringIO()
    tree.render(out)
    assert out.getvalue().splitlines() == ["└── x/", "   └── y/", "      └── z.txt"]
    assert list(tree.children) == ["x"]
    assert tree.children["x"].file is None


def test_tree_keeps_insertion_order():
    tree = Tree()
    for name in ["z", "a", "m"]:
        tree.insert(FileInArchive(Path(name), False))
    assert list(tree.children) == ["z", "a", "m"]


def test_tree_duplicate_keeps_first_and_warns(capsys):
    tree = Tree()
    first = FileInArchive(Path("d/f"), False)
    tree.insert(first)
    tree.insert(FileInArchive(Path("d/f"), True))
    assert tree.children["d"].children["f"].file is first
    assert "multiple files with the same name in a single directory" in capsys.readouterr().err


def test_errors_from_entries_propagate():
    out = io.StringIO()
    with pytest.raises(IoError):
        list_files("x.tar", _broken_entries(), ListOptions(tree=True), out)
    assert out.getvalue() == "Archive: x.tar\n"


def test_file_in_archive_coerces_path():
    entry = FileInArchive("p/q", False)
    assert entry.path == Path("p/q")