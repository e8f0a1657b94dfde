from itertools import islice

import pytest

from riscvos.prng import ParkMiller, do_rand

SEEDS = [0, 1, 2, 31, 7177, 127773, 0x7FFFFFFD, 0x7FFFFFFE, (1 << 64) - 1]


@pytest.mark.parametrize("ctx", SEEDS)
def test_do_rand_range(ctx):
    assert 0 <= do_rand(ctx) <= 0x7FFFFFFD


@pytest.mark.parametrize("ctx", SEEDS)
def test_do_rand_matches_documented_recurrence(ctx):
    x = ctx % 0x7FFFFFFE + 1
    assert do_rand(ctx) + 1 == (16807 * x) % 0x7FFFFFFF


def test_do_rand_state_reduced_modulo():
    assert do_rand(0) == do_rand(0x7FFFFFFE)


def test_generator_chains_do_rand():
    gen = ParkMiller(1)
    ctx = 1
    for _ in range(20):
        ctx = do_rand(ctx)
        assert gen.next() == ctx
        assert gen.state == ctx


def test_iteration_matches_next():
    a = ParkMiller(5)
    b = ParkMiller(5)
    assert list(islice(a, 10)) == [b.next() for _ in range(10)]


def test_different_seeds_give_different_streams():
    a = list(islice(ParkMiller(1 ^ 31), 5))
    b = list(islice(ParkMiller(1 ^ 7177), 5))
    assert a != b
    assert len(set(a)) == 5