import os
from unittest import mock

from riscvos.fileutils import KILL_SIGNAL, kill_main, ln_main, mkdir_main, rm_main


def test_kill_usage(capsys):
    assert kill_main([]) == 1
    assert capsys.readouterr().err == "usage: kill pid...\n"


def test_kill_sends_signal_to_each_pid():
    with mock.patch("os.kill") as fake_kill:
        assert kill_main(["12", "x7", "34"]) == 0
    assert fake_kill.call_args_list == [
        mock.call(12, KILL_SIGNAL),
        mock.call(34, KILL_SIGNAL),
    ]


def test_kill_ignores_errors():
    with mock.patch("os.kill", side_effect=ProcessLookupError) as fake_kill:
        assert kill_main(["99"]) == 0
    assert fake_kill.call_count == 1


def test_ln_usage(capsys):
    assert ln_main(["only"]) == 1
    assert capsys.readouterr().err == "Usage: ln old new\n"


def test_ln_creates_link(tmp_path):
    old = tmp_path / "old"
    old.write_text("data")
    new = tmp_path / "new"
    assert ln_main([str(old), str(new)]) == 0
    assert new.read_text() == "data"
    assert os.stat(old).st_ino == os.stat(new).st_ino


def test_ln_failure_reports_but_succeeds(tmp_path, capsys):
    old = str(tmp_path / "missing")
    new = str(tmp_path / "new")
    assert ln_main([old, new]) == 0
    assert capsys.readouterr().err == f"link {old} {new}: failed\n"
    assert not os.path.exists(new)


def test_mkdir_usage(capsys):
    assert mkdir_main([]) == 1
    assert capsys.readouterr().err == "Usage: mkdir files...\n"


def test_mkdir_creates_all(tmp_path):
    a, b = tmp_path / "a", tmp_path / "b"
    assert mkdir_main([str(a), str(b)]) == 0
    assert a.is_dir() and b.is_dir()


def test_mkdir_stops_at_first_failure(tmp_path, capsys):
    existing = tmp_path / "exists"
    existing.mkdir()
    later = tmp_path / "later"
    assert mkdir_main([str(existing), str(later)]) == 0
    assert capsys.readouterr().err == f"mkdir: {existing} failed to create\n"
    assert not later.exists()


def test_rm_usage(capsys):
    assert rm_main([]) == 1
    assert capsys.readouterr().err == "Usage: rm files...\n"


def test_rm_removes_files_and_empty_dirs(tmp_path):
    f = tmp_path / "f"
    f.write_text("x")
    d = tmp_path / "d"
    d.mkdir()
    assert rm_main([str(f), str(d)]) == 0
    assert not f.exists() and not d.exists()


def test_rm_stops_at_first_failure(tmp_path, capsys):
    missing = tmp_path / "missing"
    keep = tmp_path / "keep"
    keep.write_text("x")
    assert rm_main([str(missing), str(keep)]) == 0
    assert capsys.readouterr().err == f"rm: {missing} failed to delete\n"
    assert keep.exists()


def test_rm_refuses_non_empty_dir(tmp_path, capsys):
    d = tmp_path / "d"
    d.mkdir()
    (d / "inner").write_text("x")
    rm_main([str(d)])
    assert "failed to delete" in capsys.readouterr().err
    assert d.is_dir()