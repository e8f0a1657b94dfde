"""The Park-Miller minimal standard pseudo-random number generator."""

_MASK64 = (1 << 64) - 1


def do_rand(ctx):
    """The next value after state ctx, which is also the next state.

    Computes (7^5 * x) mod (2^31 - 1) without overflowing 31 bits, using
    (2^31 - 1) = 127773 * 7^5 + 2836. The result lies in [0, 0x7ffffffd].
    """
    ctx &= _MASK64
    # Transform to [1, 0x7ffffffe].
    x = ctx % 0x7FFFFFFE + 1
    hi, lo = divmod(x, 127773)
    x = 16807 * lo - 2836 * hi
    if x < 0:
        x += 0x7FFFFFFF
    # Transform to [0, 0x7ffffffd].
    return x - 1


class ParkMiller:
    """An endless stream of do_rand values from a seed."""

    def __init__(self, seed=1):
        self.state = seed & _MASK64

    def next(self):
        """Advance the state and return it."""
        self.state = do_rand(self.state)
        return self.state

    def __iter__(self):
        return self

    def __next__(self):
        return self.next()