import random

import pytest

import groovix.sequence_utils


def test_make_rng_seeded ():

	assert groovix.sequence_utils.make_rng(5).random() == random.Random(5).random()


def test_make_rng_unseeded ():

	assert isinstance(groovix.sequence_utils.make_rng(), random.Random)


def test_weighted_choice_single_option ():

	rng = random.Random(0)

	assert groovix.sequence_utils.weighted_choice([("a", 1.0)], rng) == "a"


def test_weighted_choice_skips_zero_weight ():

	rng = random.Random(0)

	for _ in range(100):
		assert groovix.sequence_utils.weighted_choice([("a", 0.0), ("b", 1.0)], rng) == "b"


def test_weighted_choice_distribution ():

	rng = random.Random(42)
	picks = [groovix.sequence_utils.weighted_choice([("x", 0.9), ("y", 0.1)], rng) for _ in range(1000)]

	assert picks.count("x") > 800


def test_weighted_choice_errors ():

	rng = random.Random(0)

	with pytest.raises(ValueError):
		groovix.sequence_utils.weighted_choice([], rng)

	with pytest.raises(ValueError):
		groovix.sequence_utils.weighted_choice([("a", 0.0)], rng)


def test_chance_extremes ():

	rng = random.Random(0)

	assert not any(groovix.sequence_utils.chance(0.0, rng) for _ in range(100))
	assert all(groovix.sequence_utils.chance(1.0, rng) for _ in range(100))


def test_clamp ():

	assert groovix.sequence_utils.clamp(5, 0, 3) == 3
	assert groovix.sequence_utils.clamp(-1, 0, 3) == 0
	assert groovix.sequence_utils.clamp(0.5, 0.2, 1.0) == 0.5
