import io
import os
import tarfile
from pathlib import Path

import pytest

from ouch.error import OuchError, WalkdirError
from ouch.file_visibility import FileVisibilityPolicy
from ouch.tar_archive import build_archive_from_paths, list_archive, unpack_archive


@pytest.fixture
def source_dir(tmp_path):
    directory = tmp_path / "src" / "dir"
    (directory / "sub").mkdir(parents=True)
    (directory / "a.txt").write_bytes(b"alpha")
    (directory / "sub" / "b.txt").write_bytes(b"beta")
    return directory


def _build(paths, output_path, policy=None):
    buffer = io.BytesIO()
    result = build_archive_from_paths(paths, output_path, buffer, policy or FileVisibilityPolicy(), True)
    assert result is buffer
    return buffer.getvalue()


def _entries(data):
    return {entry.path.as_posix(): entry.is_dir for entry in list_archive(io.BytesIO(data))}


def test_build_and_list(source_dir, tmp_path):
    data = _build([source_dir], tmp_path / "out.tar")
    assert _entries(data) == {
        "dir": True,
        "dir/a.txt": False,
        "dir/sub": True,
        "dir/sub/b.txt": False,
    }


def test_build_restores_working_directory(source_dir, tmp_path):
    before = os.getcwd()
    _build([source_dir], tmp_path / "out.tar")
    assert os.getcwd() == before


def test_hidden_files_follow_policy(source_dir, tmp_path):
    (source_dir / ".hidden").write_bytes(b"x")
    assert "dir/.hidden" not in _entries(_build([source_dir], tmp_path / "out.tar"))
    shown = _entries(_build([source_dir], tmp_path / "out.tar", FileVisibilityPolicy(read_hidden=False)))
    assert "dir/.hidden" in shown


def test_output_file_is_not_archived_into_itself(source_dir):
    output = source_dir / "out.tar"
    output.write_bytes(b"")
    entries = _entries(_build([source_dir], output))
    assert "dir/out.tar" not in entries
    assert "dir/a.txt" in entries


def test_missing_input_raises_and_restores_cwd(tmp_path):
    before = os.getcwd()
    with pytest.raises(WalkdirError):
        _build([tmp_path / "missing"], tmp_path / "out.tar")
    assert os.getcwd() == before


def test_unpack_round_trip(source_dir, tmp_path):
    data = _build([source_dir], tmp_path / "out.tar")
    destination = tmp_path / "dest"
    destination.mkdir()
    count = unpack_archive(io.BytesIO(data), destination, False)
    assert count == 4
    assert (destination / "dir" / "a.txt").read_bytes() == b"alpha"
    assert (destination / "dir" / "sub" / "b.txt").read_bytes() == b"beta"


def test_unpack_quiet_reports_nothing(source_dir, tmp_path):
    data = _build([source_dir], tmp_path / "out.tar")
    destination = tmp_path / "dest"
    destination.mkdir()
    assert unpack_archive(io.BytesIO(data), destination, True) == 0
    assert (destination / "dir" / "a.txt").read_bytes() == b"alpha"


def test_unpack_requires_empty_folder(source_dir, tmp_path):
    data = _build([source_dir], tmp_path / "out.tar")
    destination = tmp_path / "dest"
    destination.mkdir()
    (destination / "existing").write_bytes(b"")
    with pytest.raises(ValueError):
        unpack_archive(io.BytesIO(data), destination, True)


def _raw_tar(members):
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w", format=tarfile.GNU_FORMAT) as archive:
        for name, content in members:
            member = tarfile.TarInfo(name)
            member.size = len(content)
            archive.addfile(member, io.BytesIO(content))
    return buffer.getvalue()


def test_unpack_skips_entries_leaving_the_folder(tmp_path):
    data = _raw_tar([("../evil.txt", b"bad"), ("good.txt", b"good"), ("/abs.txt", b"abs")])
    destination = tmp_path / "dest"
    destination.mkdir()
    count = unpack_archive(io.BytesIO(data), destination, False)
    assert count == 3
    assert not (tmp_path / "evil.txt").exists()
    assert (destination / "good.txt").read_bytes() == b"good"
    assert (destination / "abs.txt").read_bytes() == b"abs"


def test_list_archive_rejects_garbage():
    with pytest.raises(OuchError):
        list(list_archive(io.BytesIO(b"definitely not a tar archive" * 40)))


def test_list_preserves_archive_order(tmp_path):
    data = _raw_tar([("z.txt", b"1"), ("a.txt", b"2")])
    names = [entry.path for entry in list_archive(io.BytesIO(data))]
    assert names == [Path("z.txt"), Path("a.txt")]