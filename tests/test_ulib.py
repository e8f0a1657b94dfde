import io

from riscvos.ulib import atoi, gets, strcmp


def test_atoi_reads_leading_digits():
    assert atoi("123abc") == 123
    assert atoi("42") == 42


def test_atoi_without_digits_is_zero():
    assert atoi("abc") == 0
    assert atoi("") == 0
    assert atoi("-5") == 0
    assert atoi(" 7") == 0


def test_strcmp_equal():
    assert strcmp("same", "same") == 0
    assert strcmp("", "") == 0


def test_strcmp_ordering():
    assert strcmp("abc", "abd") < 0
    assert strcmp("b", "a") > 0
    assert strcmp("abc", "ab") == ord("c")
    assert strcmp("ab", "abc") == -ord("c")


def test_strcmp_is_unsigned():
    assert strcmp(b"\xff", b"a") > 0


def test_strcmp_stops_at_nul():
    assert strcmp("ab\0x", "ab") == 0


def test_gets_reads_lines():
    stream = io.StringIO("hello\nworld")
    assert gets(stream, 100) == "hello\n"
    assert gets(stream, 100) == "world"
    assert gets(stream, 100) == ""


def test_gets_respects_max():
    stream = io.StringIO("abcdef\n")
    assert gets(stream, 4) == "abc"
    assert gets(stream, 1) == ""
    assert gets(stream, 100) == "def\n"


def test_gets_stops_at_carriage_return():
    stream = io.StringIO("a\rb\n")
    assert gets(stream, 100) == "a\r"
    assert gets(stream, 100) == "b\n"


def test_gets_binary():
    stream = io.BytesIO(b"xy\nz")
    assert gets(stream, 100) == b"xy\n"
    assert gets(stream, 100) == b"z"