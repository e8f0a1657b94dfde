import os

import pytest

from riscvos.stress import logstress, stressfs, write_pattern


def test_write_pattern_writes_count_blocks(tmp_path):
    path = tmp_path / "f"
    write_pattern(str(path), "z", 4, 7)
    assert path.read_bytes() == b"z" * 28


def test_write_pattern_does_not_truncate(tmp_path):
    path = tmp_path / "f"
    path.write_bytes(b"q" * 50)
    write_pattern(str(path), b"r", 2, 10)
    data = path.read_bytes()
    assert data[:20] == b"r" * 20
    assert data[20:] == b"q" * 30


def test_write_pattern_rejects_long_fill(tmp_path):
    with pytest.raises(ValueError):
        write_pattern(str(tmp_path / "f"), "ab", 1, 1)


def test_logstress_fills_each_file_with_its_digit(tmp_path):
    paths = [str(tmp_path / name) for name in ("f1", "f2", "f3")]
    logstress(paths, count=3, size=10)
    for i, path in enumerate(paths, start=1):
        with open(path, "rb") as f:
            assert f.read() == str(i).encode() * 30


def test_logstress_reports_failure(tmp_path):
    with pytest.raises(OSError):
        logstress([str(tmp_path / "missing_dir" / "f")], count=1, size=1)


def test_stressfs_writes_each_worker_file(tmp_path, capsys):
    paths = stressfs(str(tmp_path), 5)
    assert [os.path.basename(p) for p in paths] == [f"stressfs{i}" for i in range(5)]
    for path in paths:
        with open(path, "rb") as f:
            assert f.read() == b"a" * (20 * 512)
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "stressfs starting"
    assert lines.count("read") == 5
    assert sorted(line for line in lines if line.startswith("write")) == [
        f"write {i}" for i in range(5)
    ]


def test_stressfs_needs_a_worker(tmp_path):
    with pytest.raises(ValueError):
        stressfs(str(tmp_path), 0)