"""String helpers with C library semantics."""


def _cbytes(s):
    data = s.encode("utf-8") if isinstance(s, str) else bytes(s)
    end = data.find(0)
    return data if end < 0 else data[:end]


def atoi(s):
    """Value of the leading decimal digits of s; 0 if there are none."""
    n = 0
    for ch in s:
        if not "0" <= ch <= "9":
            break
        n = n * 10 + ord(ch) - ord("0")
    return n


def strcmp(p, q):
    """Compare two strings byte by byte as unsigned chars, stopping at NUL."""
    for a, b in zip(_cbytes(p) + b"\0", _cbytes(q) + b"\0"):
        if a != b or a == 0:
            return a - b
    return 0


def gets(stream, max):
    """Read one line of at most max-1 characters, keeping the newline or CR."""
    chunks = [stream.read(0)]
    count = 0
    while count + 1 < max:
        c = stream.read(1)
        if not c:
            break
        chunks.append(c)
        count += 1
        if c in ("\n", "\r", b"\n", b"\r"):
            break
    return chunks[0][:0].join(chunks)