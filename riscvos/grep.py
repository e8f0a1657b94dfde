"""A small grep supporting only the ^ . * $ operators."""

import sys

BUFSIZE = 1024


def _matchhere(re, ri, text, ti):
    while True:
        if ri == len(re):
            return True
        if ri + 1 < len(re) and re[ri + 1] == "*":
            return _matchstar(re[ri], re, ri + 2, text, ti)
        if re[ri] == "$" and ri + 1 == len(re):
            return ti == len(text)
        if ti < len(text) and (re[ri] == "." or re[ri] == text[ti]):
            ri += 1
            ti += 1
            continue
        return False


def _matchstar(c, re, ri, text, ti):
    while True:
        if _matchhere(re, ri, text, ti):
            return True
        if ti >= len(text):
            return False
        ch = text[ti]
        ti += 1
        if not (ch == c or c == "."):
            return False


def match(re, text):
    """Whether the pattern re matches somewhere in text."""
    if re.startswith("^"):
        return _matchhere(re, 1, text, 0)
    return any(_matchhere(re, 0, text, ti) for ti in range(len(text) + 1))


def grep(pattern, stream, out):
    """Write each newline-terminated line of stream that matches pattern.

    An unterminated last line is never written, and a line that does not
    fit the line buffer ends the search.
    """
    for line in stream:
        if len(line) > BUFSIZE - 1 or not line.endswith("\n"):
            break
        if match(pattern, line[:-1]):
            out.write(line)


def main(argv=None):
    """Run grep over the named files, or standard input; return the status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("usage: grep pattern [file ...]\n")
        return 1
    pattern, paths = args[0], args[1:]
    if not paths:
        grep(pattern, sys.stdin, sys.stdout)
        return 0
    for path in paths:
        try:
            f = open(path, encoding="utf-8", errors="replace", newline="")
        except OSError:
            sys.stdout.write(f"grep: cannot open {path}\n")
            return 1
        with f:
            grep(pattern, f, sys.stdout)
    return 0