import math
from collections import Counter

import pytest

from lucky_pool.audit_utils import AuditUtils
from lucky_pool.domain.generators import SeededGenerator
from lucky_pool.domain.sampler import (
    RandomOptions,
    Sampler,
    normal_random,
    random_bool,
    random_choice,
    random_float,
    random_int,
    random_value,
    sibling_seed,
)
from lucky_pool.errors import ConfigurationError, EmptyInput, InvalidRange


@pytest.mark.parametrize("low, high", [(1, 100), (-5, 5), (7, 7), (0, 1)])
def test_randint_never_leaves_range(low, high):
    sampler = Sampler(f"range_{low}_{high}")

    values = [sampler.randint(low, high) for _ in range(100_000)]

    assert min(values) >= low
    assert max(values) <= high


def test_randint_hits_both_ends():
    sampler = Sampler("ends")

    counts = Counter(sampler.randint(1, 3) for _ in range(3_000))

    assert set(counts) == {1, 2, 3}


def test_randint_rejects_inverted_range():
    with pytest.raises(InvalidRange):
        Sampler("x").randint(5, 4)


def test_uniform_never_returns_max():
    sampler = Sampler("half-open", RandomOptions(algorithm="pcg64"))

    values = [sampler.uniform(2.5, 3.0) for _ in range(100_000)]

    assert min(values) >= 2.5
    assert max(values) < 3.0


def test_uniform_rejects_inverted_range():
    with pytest.raises(InvalidRange):
        random_float(1.0, 0.0, "x")


def test_chance_edges():
    sampler = Sampler("chance")

    assert not any(sampler.chance(0.0) for _ in range(1_000))
    assert all(sampler.chance(1.0) for _ in range(1_000))


def test_choice_covers_sequence_and_rejects_empty():
    sampler = Sampler("choice")

    picked = {sampler.choice("abcd") for _ in range(500)}

    assert picked == set("abcd")
    with pytest.raises(EmptyInput):
        sampler.choice([])
    with pytest.raises(EmptyInput):
        random_choice((), "empty")


def test_one_shot_helpers_are_reproducible():
    options = RandomOptions(algorithm="pcg64", bias="slight_up")

    assert random_value("seed", options) == random_value("seed", options)
    assert random_int(1, 100, "seed", options) == random_int(1, 100, "seed", options)
    assert random_float(0, 10, "seed") == random_float(0, 10, "seed")
    assert random_bool("seed", 0.3) == random_bool("seed", 0.3)
    assert random_choice(["a", "b", "c"], "seed") == random_choice(["a", "b", "c"], "seed")
    assert normal_random("seed", 50, 15, options) == normal_random("seed", 50, 15, options)


def test_one_shot_helpers_take_the_first_draw():
    first = SeededGenerator("first").random()

    assert random_value("first") == first
    assert random_int(1, 10, "first") == math.floor(first * 10) + 1


def test_sampler_streams_replay_identically():
    a = Sampler("replay")
    b = Sampler("replay")

    sequence_a = [a.randint(0, 9), a.uniform(0, 1), a.chance(0.5), a.choice("xyz"), a.normal(0, 1)]
    sequence_b = [b.randint(0, 9), b.uniform(0, 1), b.chance(0.5), b.choice("xyz"), b.normal(0, 1)]

    assert sequence_a == sequence_b


def test_unknown_names_fail_when_sampler_is_built():
    with pytest.raises(ConfigurationError):
        Sampler("x", RandomOptions(algorithm="nope"))
    with pytest.raises(ConfigurationError):
        Sampler("x", RandomOptions(bias="nope"))


def test_bias_shifts_integer_draws():
    up = Sampler("shift", RandomOptions(bias="moderate_up"))
    down = Sampler("shift", RandomOptions(bias="moderate_down"))

    mean_up = sum(up.randint(1, 100) for _ in range(10_000)) / 10_000
    mean_down = sum(down.randint(1, 100) for _ in range(10_000)) / 10_000

    assert mean_up > 60
    assert mean_down < 45


def test_normal_moments():
    sampler = Sampler("normal-moments")

    summary = AuditUtils().summarize([sampler.normal(10.0, 2.0) for _ in range(10_000)])

    assert summary.mean == pytest.approx(10.0, abs=0.1)
    assert summary.std == pytest.approx(2.0, abs=0.1)


def test_normal_one_shot_moments_across_seeds():
    values = [normal_random(f"pool42_user{i}_1700000000", 25.0, 7.5) for i in range(5_000)]

    summary = AuditUtils().summarize(values)

    assert summary.mean == pytest.approx(25.0, abs=0.5)
    assert summary.std == pytest.approx(7.5, abs=0.5)


def test_box_muller_inputs_are_uncorrelated_across_seeds():
    seeds = [f"claim_{i}" for i in range(5_000)]
    u1 = [SeededGenerator(seed).random() for seed in seeds]
    u2 = [SeededGenerator(sibling_seed(seed)).random() for seed in seeds]

    assert abs(AuditUtils().correlation(u1, u2)) < 0.05
    assert all(a != b for a, b in zip(u1, u2))


def test_sibling_seed_appends_suffix():
    assert sibling_seed("abc") == "abcsecond"
    assert sibling_seed(b"abc") == b"abcsecond"
