"""Arpeggio orderings and a diatonic progression arpeggiator.

`generate(n)` enumerates every ordering of ``n`` chord-tone indices in two
families:

- **straight**: every permutation of ``0..n-1`` (``n!`` entries).
- **looped**: each straight permutation followed by its interior reversed,
  so it climbs and comes back down without repeating the end points:
  ``0 1 2 3`` → ``0 1 2 3 2 1``.

`arpeggiate()` plays a progression of scale degrees with one of those
orderings, optionally over sustained block chords.
"""

import dataclasses
import functools
import typing

import groovix.constants.velocity
import groovix.events
import groovix.harmony


Permutation = typing.Tuple[int, ...]


@dataclasses.dataclass(frozen=True)
class ArpeggioPatterns:

	"""
	Both ordering families for one chord size. ``looped[i]`` derives from ``straight[i]``.
	"""

	size: int
	straight: typing.Tuple[Permutation, ...]
	looped: typing.Tuple[Permutation, ...]


def _permute (remaining: typing.List[int], used: typing.List[int], out: typing.List[Permutation]) -> None:

	"""Depth-first enumeration: take each remaining index in turn, recurse, put it back."""

	for i in range(len(remaining)):

		index = remaining.pop(i)
		used.append(index)

		if not remaining:
			out.append(tuple(used))
		else:
			_permute(remaining, used, out)

		remaining.insert(i, index)
		used.pop()


def loop_permutation (permutation: typing.Sequence[int]) -> Permutation:

	"""Append the reversed interior of a permutation.

	Example:
		```python
		loop_permutation((0, 1, 2))     # → (0, 1, 2, 1)
		loop_permutation((0, 1, 2, 3))  # → (0, 1, 2, 3, 2, 1)
		```
	"""

	return tuple(permutation) + tuple(reversed(permutation[1:-1]))


@functools.lru_cache(maxsize=8)
def generate (n: int) -> ArpeggioPatterns:

	"""Return the straight and looped orderings of ``n`` chord-tone indices.

	The enumeration order is fixed for a given ``n`` and the result is cached.

	Example:
		```python
		patterns = generate(3)
		len(patterns.straight)   # → 6
		patterns.straight[0]     # → (0, 1, 2)
		patterns.looped[0]       # → (0, 1, 2, 1)
		```
	"""

	if n <= 0:
		raise ValueError("Arpeggio size must be positive")

	straight: typing.List[Permutation] = []
	_permute(list(range(n)), [], straight)

	return ArpeggioPatterns(
		size = n,
		straight = tuple(straight),
		looped = tuple(loop_permutation(p) for p in straight)
	)


def parse_pattern (text: str) -> Permutation:

	"""Read a space-separated index pattern such as ``"0 2 1 3"``."""

	try:
		pattern = tuple(int(part) for part in text.split())

	except ValueError as exc:
		raise ValueError(f"Arpeggio pattern must be whole numbers: {text!r}") from exc

	if any(index < 0 for index in pattern):
		raise ValueError(f"Arpeggio pattern indices cannot be negative: {text!r}")

	return pattern


def arpeggiate (
	degrees: typing.Sequence[int],
	key: str = "C",
	mode: str = "ionian",
	pattern: typing.Optional[typing.Sequence[int]] = None,
	repeat: int = 1,
	step_length: int = 1,
	chord_length: int = 4,
	chord_octave: int = 4,
	arp_octave: int = 5,
	include_chords: bool = True,
	velocity: int = groovix.constants.velocity.DEFAULT_VELOCITY,
	chord_velocity: int = groovix.constants.velocity.DEFAULT_CHORD_VELOCITY
) -> typing.List[groovix.events.NoteEvent]:

	"""Render diatonic triads on scale degrees as block chords and/or an arpeggio.

	Parameters:
		degrees: 0-based scale degrees, one per chord (``[0, 5, 3, 4]`` is I-vi-IV-V).
		key: Tonic note name.
		mode: Scale mode supplying the triad qualities.
		pattern: Chord-tone indices to cycle through. Indices past the triad
			size wrap into the next octave. ``None`` or empty plays block chords only.
		repeat: How many times the pattern plays per chord.
		step_length: Length in ticks of each arpeggio step.
		chord_length: Steps per chord when no pattern is given.
		chord_octave: Octave of the block chords.
		arp_octave: Octave of the arpeggio line.
		include_chords: Whether to emit the sustained block chords.

	Returns:
		Events sorted by start tick. Each chord lasts ``len(pattern) * repeat``
		steps (or ``chord_length`` steps without a pattern).

	Example:
		```python
		events = arpeggiate([0, 4], key="C", pattern=generate(3).looped[0])
		```
	"""

	if step_length <= 0:
		raise ValueError("Step length must be positive")

	if repeat <= 0:
		raise ValueError("Repeat must be positive")

	steps = list(pattern) if pattern else []
	steps_per_chord = len(steps) * repeat if steps else chord_length
	events: typing.List[groovix.events.NoteEvent] = []
	cursor = 0

	for degree in degrees:

		if include_chords:
			for pitch in groovix.harmony.diatonic_triad(key, mode, degree, chord_octave):
				events.append(groovix.events.NoteEvent(
					pitch = pitch,
					start_tick = cursor,
					length_ticks = steps_per_chord * step_length,
					velocity = chord_velocity
				))

		if steps:
			triad = groovix.harmony.diatonic_triad(key, mode, degree, arp_octave)

			for i in range(steps_per_chord):
				index = steps[i % len(steps)]
				pitch = triad[index % len(triad)] + 12 * (index // len(triad))
				events.append(groovix.events.NoteEvent(
					pitch = pitch,
					start_tick = cursor + i * step_length,
					length_ticks = step_length,
					velocity = velocity
				))

		cursor += steps_per_chord * step_length

	return groovix.events.sort_events(events)
