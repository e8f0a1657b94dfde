import io

import pytest

from riscvos.grep import grep, main, match


@pytest.mark.parametrize(
    "re, text, expected",
    [
        ("abc", "xxabcxx", True),
        ("^abc", "xabc", False),
        ("^abc", "abcx", True),
        ("a.c", "abc", True),
        ("ab*c", "ac", True),
        ("ab*c", "abbbc", True),
        ("ab*c", "adc", False),
        ("c$", "abc", True),
        ("c$", "abcd", False),
        ("", "anything", True),
        (".*", "", True),
        ("^$", "", True),
        ("^$", "x", False),
        ("a.*z", "a123z", True),
    ],
)
def test_match(re, text, expected):
    assert match(re, text) is expected


def test_match_long_text():
    assert match("z", "a" * 5000 + "z") is True
    assert match("q", "a" * 5000) is False


def test_grep_selects_matching_lines():
    out = io.StringIO()
    grep("an", io.StringIO("apple\nbanana\ncherry\n"), out)
    assert out.getvalue() == "banana\n"


def test_grep_skips_unterminated_last_line():
    out = io.StringIO()
    grep("foo", io.StringIO("foo\nfoo"), out)
    assert out.getvalue() == "foo\n"


def test_grep_stops_at_overlong_line():
    out = io.StringIO()
    grep("x", io.StringIO("x" * 2000 + "\nx\n"), out)
    assert out.getvalue() == ""


def test_main_without_arguments(capsys):
    assert main([]) == 1
    assert "usage: grep" in capsys.readouterr().err


def test_main_on_file(tmp_path, capsys):
    path = tmp_path / "f.txt"
    path.write_text("one\ntwo\nthree\n")
    assert main(["^t", str(path)]) == 0
    assert capsys.readouterr().out == "two\nthree\n"


def test_main_missing_file(tmp_path, capsys):
    missing = tmp_path / "nope"
    assert main(["x", str(missing)]) == 1
    assert capsys.readouterr().out == f"grep: cannot open {missing}\n"