"""wc, cat and echo."""

import sys
from dataclasses import dataclass

from .printf import fprintf

_CHUNK = 512
# NUL counts as a separator too, as in a strchr lookup.
_SEPARATORS = frozenset(" \r\t\n\v\0")


@dataclass(frozen=True)
class WordCount:
    """Line, word and character counts."""

    lines: int
    words: int
    chars: int


def wc(stream):
    """Count lines, words and characters (bytes for binary streams)."""
    lines = words = chars = 0
    inword = False
    while True:
        chunk = stream.read(_CHUNK)
        if not chunk:
            break
        if isinstance(chunk, (bytes, bytearray)):
            chunk = bytes(chunk).decode("latin-1")
        for ch in chunk:
            chars += 1
            if ch == "\n":
                lines += 1
            if ch in _SEPARATORS:
                inword = False
            elif not inword:
                words += 1
                inword = True
    return WordCount(lines, words, chars)


def cat(stream, out):
    """Copy stream to out, raising OSError on a failed read or short write."""
    while True:
        try:
            chunk = stream.read(_CHUNK)
        except OSError as exc:
            raise OSError("read error") from exc
        if not chunk:
            return
        try:
            written = out.write(chunk)
        except OSError as exc:
            raise OSError("write error") from exc
        if written is not None and written != len(chunk):
            raise OSError("write error")


def echo(args):
    """The arguments joined by spaces, with a newline after the last."""
    return " ".join(args) + "\n" if args else ""


def _args(argv):
    return sys.argv[1:] if argv is None else list(argv)


def wc_main(argv=None):
    """Print counts for each named file, or standard input; return the status."""
    args = _args(argv)
    sources = args or [None]
    for path in sources:
        if path is None:
            stream, name = sys.stdin.buffer, ""
        else:
            try:
                stream, name = open(path, "rb"), path
            except OSError:
                sys.stdout.write(f"wc: cannot open {path}\n")
                return 1
        try:
            counts = wc(stream)
        except OSError:
            sys.stdout.write("wc: read error\n")
            return 1
        finally:
            if path is not None:
                stream.close()
        fprintf(sys.stdout, "%d %d %d %s\n", counts.lines, counts.words, counts.chars, name)
    return 0


def cat_main(argv=None):
    """Copy each named file, or standard input, to standard output."""
    args = _args(argv)
    out = sys.stdout.buffer
    try:
        if not args:
            cat(sys.stdin.buffer, out)
            return 0
        for path in args:
            try:
                f = open(path, "rb")
            except OSError:
                sys.stderr.write(f"cat: cannot open {path}\n")
                return 1
            with f:
                cat(f, out)
    except OSError as exc:
        sys.stderr.write(f"cat: {exc}\n")
        return 1
    finally:
        out.flush()
    return 0


def echo_main(argv=None):
    """Write the arguments to standard output."""
    sys.stdout.write(echo(_args(argv)))
    return 0