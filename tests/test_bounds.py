import random

import pytest

from caves.generator.bounds import Bounds


def test_sample_stays_within_inclusive_range():
    rng = random.Random(3)
    bounds = Bounds(2, 4)
    seen = {bounds.sample(rng) for _ in range(200)}
    assert seen == {2, 3, 4}


def test_float_bounds_sample_floats():
    rng = random.Random(3)
    value = Bounds(0.5, 1.5).sample(rng)
    assert isinstance(value, float) and 0.5 <= value <= 1.5


def test_min_above_max_is_rejected():
    with pytest.raises(ValueError):
        Bounds(3, 1)


@pytest.mark.parametrize(
    "value,expected",
    [
        ([1, 2], Bounds(1, 2)),
        ((1, 2), Bounds(1, 2)),
        ({"min": 1, "max": 2}, Bounds(1, 2)),
        (4, Bounds(4, 4)),
        (Bounds(0, 1), Bounds(0, 1)),
    ],
)
def test_from_value_accepts_config_shapes(value, expected):
    assert Bounds.from_value(value) == expected


@pytest.mark.parametrize("value", ["1,2", [1, 2, 3], {"min": 1}, True])
def test_from_value_rejects_other_shapes(value):
    with pytest.raises(ValueError):
        Bounds.from_value(value)


def test_str_and_list():
    bounds = Bounds(1, 3)
    assert str(bounds) == "1..=3"
    assert bounds.to_list() == [1, 3]
