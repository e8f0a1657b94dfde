"""A small shell: a parser for pipes, lists, redirections and background jobs."""

import io
import os
import sys
import threading
from dataclasses import dataclass, field

from .grep import grep
from .layout import OpenFlag
from .printf import fprintf, sprintf
from .textutils import cat, echo, wc
from .ulib import gets

WHITESPACE = " \t\r\n\v"
SYMBOLS = "<|>&;()"
MAXARGS = 10
LINE_MAX = 100


class ShellSyntaxError(ValueError):
    """The command line could not be parsed."""

    def __init__(self, message, leftovers=None):
        super().__init__(message)
        self.leftovers = leftovers


@dataclass
class ExecCmd:
    """Run a program with arguments."""

    argv: list = field(default_factory=list)


@dataclass
class RedirCmd:
    """Run cmd with file opened in mode on descriptor fd."""

    cmd: object
    file: str
    mode: OpenFlag
    fd: int


@dataclass
class PipeCmd:
    """Feed the output of left into right."""

    left: object
    right: object


@dataclass
class ListCmd:
    """Run left, then right."""

    left: object
    right: object


@dataclass
class BackCmd:
    """Run cmd without waiting for it."""

    cmd: object


class Tokenizer:
    """Splits a command line into words and operator tokens."""

    def __init__(self, text):
        self.text = text.split("\0", 1)[0]
        self.pos = 0

    def _skip(self):
        while self.pos < len(self.text) and self.text[self.pos] in WHITESPACE:
            self.pos += 1

    def peek(self, toks):
        """Skip whitespace and tell whether the next character is one of toks."""
        self._skip()
        return self.pos < len(self.text) and self.text[self.pos] in toks

    def gettoken(self):
        """Consume one token; return (kind, text).

        kind is the operator character, "+" for ">>", "a" for a word and
        "" at the end of the line.
        """
        self._skip()
        text = self.text
        start = self.pos
        if start >= len(text):
            return "", ""
        c = text[start]
        if c in "|();&<":
            self.pos += 1
            kind = c
        elif c == ">":
            self.pos += 1
            kind = ">"
            if self.pos < len(text) and text[self.pos] == ">":
                kind = "+"
                self.pos += 1
        else:
            kind = "a"
            while (
                self.pos < len(text)
                and text[self.pos] not in WHITESPACE
                and text[self.pos] not in SYMBOLS
            ):
                self.pos += 1
        word = text[start:self.pos]
        self._skip()
        return kind, word

    def at_end(self):
        """Whether only whitespace remains."""
        self._skip()
        return self.pos >= len(self.text)

    @property
    def rest(self):
        return self.text[self.pos:]


def _parseline(t):
    cmd = _parsepipe(t)
    while t.peek("&"):
        t.gettoken()
        cmd = BackCmd(cmd)
    if t.peek(";"):
        t.gettoken()
        cmd = ListCmd(cmd, _parseline(t))
    return cmd


def _parsepipe(t):
    cmd = _parseexec(t)
    if t.peek("|"):
        t.gettoken()
        cmd = PipeCmd(cmd, _parsepipe(t))
    return cmd


def _parseredirs(cmd, t):
    while t.peek("<>"):
        kind, _ = t.gettoken()
        target_kind, target = t.gettoken()
        if target_kind != "a":
            raise ShellSyntaxError("missing file for redirection")
        if kind == "<":
            cmd = RedirCmd(cmd, target, OpenFlag.RDONLY, 0)
        elif kind == ">":
            cmd = RedirCmd(cmd, target, OpenFlag.WRONLY | OpenFlag.CREATE | OpenFlag.TRUNC, 1)
        else:
            cmd = RedirCmd(cmd, target, OpenFlag.WRONLY | OpenFlag.CREATE, 1)
    return cmd


def _parseblock(t):
    if not t.peek("("):
        raise ShellSyntaxError("parseblock")
    t.gettoken()
    cmd = _parseline(t)
    if not t.peek(")"):
        raise ShellSyntaxError("syntax - missing )")
    t.gettoken()
    return _parseredirs(cmd, t)


def _parseexec(t):
    if t.peek("("):
        return _parseblock(t)
    exec_cmd = ExecCmd()
    ret = _parseredirs(exec_cmd, t)
    while not t.peek("|)&;"):
        kind, word = t.gettoken()
        if kind == "":
            break
        if kind != "a":
            raise ShellSyntaxError("syntax")
        exec_cmd.argv.append(word)
        if len(exec_cmd.argv) >= MAXARGS:
            raise ShellSyntaxError("too many args")
        ret = _parseredirs(ret, t)
    return ret


def parse_command(line):
    """Parse a whole command line into a command tree."""
    t = Tokenizer(line)
    cmd = _parseline(t)
    if not t.at_end():
        raise ShellSyntaxError("syntax", leftovers=t.rest)
    return cmd


def classify_line(line):
    """Return ("blank", None), ("cd", path) or ("command", text) for a line."""
    cmd = line.lstrip(" \t")
    if cmd.startswith("\n"):
        return "blank", None
    if cmd.startswith("cd "):
        path = cmd[3:]
        if path.endswith("\n"):
            path = path[:-1]
        return "cd", path
    return "command", cmd


class Shell:
    """Runs parsed commands against a table of named programs.

    Each program is called as program(argv, stdin, stdout, stderr) and
    returns its exit status (None counts as 0).
    """

    def __init__(self, commands=None, cwd=None):
        self.commands = dict(commands or {})
        self.cwd = os.getcwd() if cwd is None else os.fspath(cwd)
        self._jobs = []

    def _open(self, file, mode):
        access = int(mode) & 0x3
        if access == OpenFlag.WRONLY:
            flags, text_mode = os.O_WRONLY, "w"
        elif access == OpenFlag.RDWR:
            flags, text_mode = os.O_RDWR, "r+"
        else:
            flags, text_mode = os.O_RDONLY, "r"
        if mode & OpenFlag.CREATE:
            flags |= os.O_CREAT
        if mode & OpenFlag.TRUNC:
            flags |= os.O_TRUNC
        fd = os.open(os.path.join(self.cwd, file), flags, 0o666)
        return os.fdopen(fd, text_mode, encoding="utf-8", newline="")

    def run(self, cmd, stdin, stdout, stderr):
        """Execute a command tree and return its exit status."""
        if cmd is None:
            return 1
        if isinstance(cmd, ExecCmd):
            if not cmd.argv:
                return 1
            program = self.commands.get(cmd.argv[0])
            if program is None:
                fprintf(stderr, "exec %s failed\n", cmd.argv[0])
                return 0
            status = program(list(cmd.argv), stdin, stdout, stderr)
            return 0 if status is None else status
        if isinstance(cmd, RedirCmd):
            try:
                stream = self._open(cmd.file, cmd.mode)
            except OSError:
                fprintf(stderr, "open %s failed\n", cmd.file)
                return 1
            with stream:
                if cmd.fd == 0:
                    return self.run(cmd.cmd, stream, stdout, stderr)
                return self.run(cmd.cmd, stdin, stream, stderr)
        if isinstance(cmd, ListCmd):
            self.run(cmd.left, stdin, stdout, stderr)
            return self.run(cmd.right, stdin, stdout, stderr)
        if isinstance(cmd, PipeCmd):
            buffer = io.StringIO()
            self.run(cmd.left, stdin, buffer, stderr)
            self.run(cmd.right, io.StringIO(buffer.getvalue()), stdout, stderr)
            return 0
        if isinstance(cmd, BackCmd):
            job = threading.Thread(
                target=self.run, args=(cmd.cmd, stdin, stdout, stderr), daemon=True
            )
            job.start()
            self._jobs.append(job)
            return 0
        raise TypeError("runcmd")

    def execute_line(self, line, stdin, stdout, stderr):
        """Handle one input line: blank, cd, or a command; return a status."""
        kind, arg = classify_line(line)
        if kind == "blank":
            return 0
        if kind == "cd":
            target = os.path.normpath(os.path.join(self.cwd, arg))
            if not os.path.isdir(target):
                fprintf(stderr, "cannot cd %s\n", arg)
                return 1
            self.cwd = target
            return 0
        try:
            cmd = parse_command(arg)
        except ShellSyntaxError as exc:
            if exc.leftovers is not None:
                fprintf(stderr, "leftovers: %s\n", exc.leftovers)
            fprintf(stderr, "%s\n", str(exc))
            return 1
        return self.run(cmd, stdin, stdout, stderr)

    def _join_jobs(self):
        for job in self._jobs:
            job.join()
        self._jobs.clear()

    def repl(self, stdin, stdout, stderr):
        """Prompt, read and run lines until end of input."""
        while True:
            stderr.write("$ ")
            line = gets(stdin, LINE_MAX)
            if not line:
                break
            self.execute_line(line, stdin, stdout, stderr)
        self._join_jobs()
        return 0


def _standard_commands(shell):
    def resolve(path):
        return os.path.join(shell.cwd, path)

    def open_text(path):
        return open(resolve(path), encoding="utf-8", errors="replace", newline="")

    def echo_cmd(argv, stdin, stdout, stderr):
        stdout.write(echo(argv[1:]))
        return 0

    def cat_cmd(argv, stdin, stdout, stderr):
        try:
            if len(argv) <= 1:
                cat(stdin, stdout)
                return 0
            for path in argv[1:]:
                try:
                    f = open_text(path)
                except OSError:
                    fprintf(stderr, "cat: cannot open %s\n", path)
                    return 1
                with f:
                    cat(f, stdout)
        except OSError as exc:
            fprintf(stderr, "cat: %s\n", str(exc))
            return 1
        return 0

    def wc_cmd(argv, stdin, stdout, stderr):
        def report(stream, name):
            counts = wc(stream)
            stdout.write(sprintf("%d %d %d %s\n", counts.lines, counts.words, counts.chars, name))

        if len(argv) <= 1:
            report(stdin, "")
            return 0
        for path in argv[1:]:
            try:
                f = open_text(path)
            except OSError:
                fprintf(stdout, "wc: cannot open %s\n", path)
                return 1
            with f:
                report(f, path)
        return 0

    def grep_cmd(argv, stdin, stdout, stderr):
        if len(argv) <= 1:
            stderr.write("usage: grep pattern [file ...]\n")
            return 1
        pattern = argv[1]
        if len(argv) <= 2:
            grep(pattern, stdin, stdout)
            return 0
        for path in argv[2:]:
            try:
                f = open_text(path)
            except OSError:
                fprintf(stdout, "grep: cannot open %s\n", path)
                return 1
            with f:
                grep(pattern, f, stdout)
        return 0

    return {"echo": echo_cmd, "cat": cat_cmd, "wc": wc_cmd, "grep": grep_cmd}


def main(argv=None):
    """Run an interactive shell on standard input with the built-in programs."""
    shell = Shell(None, None)
    shell.commands.update(_standard_commands(shell))
    return shell.repl(sys.stdin, sys.stdout, sys.stderr)