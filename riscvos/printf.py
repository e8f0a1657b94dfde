"""Formatted output understanding only %d, %u, %x, %p, %c, %s and %%."""

import re

_DIGITS = "0123456789ABCDEF"
_MASK32 = 0xFFFFFFFF
_MASK64 = (1 << 64) - 1
_SPEC_PATTERN = re.compile(r"%(ll[dux]|l[dux]|.?)|[^%]+", re.S)


def _signed(value, bits):
    value &= (1 << bits) - 1
    return value - (1 << bits) if value >> (bits - 1) else value


def _printint(xx, base, sgn):
    neg = sgn and xx < 0
    # The digits are produced from a 32-bit unsigned accumulator.
    x = (-xx if neg else xx) & _MASK32
    out = []
    while True:
        x, r = divmod(x, base)
        out.append(_DIGITS[r])
        if x == 0:
            break
    if neg:
        out.append("-")
    return "".join(reversed(out))


def _printptr(x):
    return "0x" + format(int(x) & _MASK64, "016X")


def _render(fmt, args):
    remaining = iter(args)

    def take():
        try:
            return next(remaining)
        except StopIteration:
            raise TypeError("not enough arguments for format string") from None

    for m in _SPEC_PATTERN.finditer(fmt):
        spec = m.group(1)
        if spec is None:
            yield m.group(0)
        elif spec == "":
            continue
        elif spec == "d":
            yield _printint(_signed(int(take()), 32), 10, True)
        elif spec in ("ld", "lld"):
            yield _printint(_signed(int(take()), 64), 10, True)
        elif spec == "u":
            yield _printint(int(take()) & _MASK32, 10, False)
        elif spec in ("lu", "llu"):
            yield _printint(int(take()) & _MASK64, 10, False)
        elif spec == "x":
            yield _printint(int(take()) & _MASK32, 16, False)
        elif spec in ("lx", "llx"):
            yield _printint(int(take()) & _MASK64, 16, False)
        elif spec == "p":
            yield _printptr(take())
        elif spec == "c":
            value = take()
            yield value if isinstance(value, str) else chr(int(value) & 0xFF)
        elif spec == "s":
            value = take()
            if value is None:
                yield "(null)"
            elif isinstance(value, (bytes, bytearray)):
                yield bytes(value).decode("latin-1")
            else:
                yield str(value)
        elif spec == "%":
            yield "%"
        else:
            # Unknown sequence: print it to draw attention.
            yield "%" + spec


def sprintf(fmt, *args):
    """Format args according to fmt and return the text."""
    return "".join(_render(fmt, args))


def fprintf(stream, fmt, *args):
    """Format args according to fmt and write the text to stream."""
    stream.write(sprintf(fmt, *args))