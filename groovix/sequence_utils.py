import random
import typing

T = typing.TypeVar("T")


def make_rng (seed: typing.Optional[int] = None) -> random.Random:

	"""Return a seeded generator, or an unseeded one when ``seed`` is ``None``.

	Every random decision in Groovix goes through an explicit
	``random.Random`` instance, never the module-level functions, so a seed
	makes a whole generation call repeatable.
	"""

	if seed is None:
		return random.Random()

	return random.Random(seed)


def weighted_choice (options: typing.Sequence[typing.Tuple[T, float]], rng: random.Random) -> T:

	"""Pick one item from a list of (value, weight) pairs.

	Weights are relative - they don't need to sum to 1.0. Higher weight means
	higher probability of selection.

	Parameters:
		options: List of `(value, weight)` tuples
		rng: Random number generator instance

	Example:
		```python
		cadence_pc = weighted_choice([(chord_root, 0.65), (tonic, 0.35)], rng)
		```
	"""

	if not options:
		raise ValueError("Options list cannot be empty")

	total = sum(weight for _, weight in options)

	if total <= 0:
		raise ValueError("Total weight must be positive")

	threshold = rng.random() * total
	cumulative = 0.0

	for value, weight in options:
		cumulative += weight
		if cumulative >= threshold:
			return value

	return options[-1][0]


def chance (probability: float, rng: random.Random) -> bool:

	"""Return True with the given probability (0.0-1.0)."""

	return rng.random() < probability


def clamp (value: T, low: T, high: T) -> T:

	"""Clamp ``value`` into ``[low, high]``."""

	return max(low, min(high, value))  # type: ignore[type-var]
