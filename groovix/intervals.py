"""Scale and mode definitions.

Each named scale is a `ScaleDefinition`: an ordered set of semitone offsets
from the tonic plus the seven diatonic triad qualities built on its degrees.
The registry is populated once at import time; ``major``/``minor`` alias
``ionian``/``aeolian`` and ``melodic``/``harmonic`` alias the two minor
variants. Custom scales can be added with `register_scale()`.
"""

import dataclasses
import typing


@dataclasses.dataclass(frozen=True)
class ScaleDefinition:

	"""
	An immutable named scale with its diatonic triad qualities.
	"""

	name: str
	intervals: typing.Tuple[int, ...]
	triad_qualities: typing.Tuple[str, ...] = ()


	def pitch_classes (self, key_pc: int) -> typing.List[int]:

		"""Return the scale's pitch classes starting from ``key_pc``."""

		return [(key_pc + interval) % 12 for interval in self.intervals]


_IONIAN_TRIADS = ("major", "minor", "minor", "major", "major", "minor", "diminished")


def _rotate_triads (offset: int) -> typing.Tuple[str, ...]:

	"""Church-mode triad qualities are rotations of the ionian ones."""

	return tuple(_IONIAN_TRIADS[(i + offset) % 7] for i in range(7))


_SCALES: typing.Dict[str, ScaleDefinition] = {}

SCALE_ALIASES: typing.Dict[str, str] = {
	"major": "ionian",
	"minor": "aeolian",
	"melodic": "melodic_minor",
	"harmonic": "harmonic_minor",
}


def register_scale (
	name: str,
	intervals: typing.Sequence[int],
	triad_qualities: typing.Optional[typing.Sequence[str]] = None
) -> ScaleDefinition:

	"""Register a scale so it can be used anywhere a mode name is accepted.

	Parameters:
		name: Scale name (lower case by convention).
		intervals: Semitone offsets from the tonic. Must start with 0 and lie in 0-11.
		triad_qualities: Optional diatonic triad qualities, one per degree.

	Returns:
		The registered `ScaleDefinition`.

	Example:
		```python
		register_scale("hirajoshi", [0, 2, 3, 7, 8])
		scale_pitch_classes(9, "hirajoshi")  # → [9, 11, 0, 4, 5]
		```
	"""

	offsets = tuple(intervals)

	if not offsets or offsets[0] != 0:
		raise ValueError(f"Scale {name!r} must start at interval 0")

	if any(not 0 <= offset <= 11 for offset in offsets):
		raise ValueError(f"Scale {name!r} intervals must lie in 0-11")

	if len(set(offsets)) != len(offsets):
		raise ValueError(f"Scale {name!r} has duplicate intervals")

	qualities = tuple(triad_qualities) if triad_qualities is not None else ()

	if qualities and len(qualities) != len(offsets):
		raise ValueError(f"Scale {name!r} needs one triad quality per degree")

	definition = ScaleDefinition(name=name, intervals=offsets, triad_qualities=qualities)
	_SCALES[name] = definition

	return definition


register_scale("ionian", [0, 2, 4, 5, 7, 9, 11], _rotate_triads(0))
register_scale("dorian", [0, 2, 3, 5, 7, 9, 10], _rotate_triads(1))
register_scale("phrygian", [0, 1, 3, 5, 7, 8, 10], _rotate_triads(2))
register_scale("lydian", [0, 2, 4, 6, 7, 9, 11], _rotate_triads(3))
register_scale("mixolydian", [0, 2, 4, 5, 7, 9, 10], _rotate_triads(4))
register_scale("aeolian", [0, 2, 3, 5, 7, 8, 10], _rotate_triads(5))
register_scale("locrian", [0, 1, 3, 5, 6, 8, 10], _rotate_triads(6))
register_scale(
	"harmonic_minor",
	[0, 2, 3, 5, 7, 8, 11],
	["minor", "diminished", "augmented", "minor", "major", "major", "diminished"]
)
register_scale(
	"melodic_minor",
	[0, 2, 3, 5, 7, 9, 11],
	["minor", "minor", "augmented", "major", "major", "diminished", "diminished"]
)


def available_scales () -> typing.List[str]:

	"""Return every accepted scale name, aliases included."""

	return sorted(set(_SCALES) | set(SCALE_ALIASES))


def get_scale (mode: str) -> ScaleDefinition:

	"""
	Return the scale definition for a mode name or alias.
	"""

	name = SCALE_ALIASES.get(mode.lower(), mode.lower())

	if name not in _SCALES:
		raise ValueError(f"Unknown mode '{mode}'. Available: {available_scales()}")

	return _SCALES[name]


def scale_pitch_classes (key_pc: int, mode: str = "ionian") -> typing.List[int]:

	"""
	Return the pitch classes (0-11) that belong to a key and mode.

	Parameters:
		key_pc: Root pitch class (0 = C, 1 = C#/Db, …, 11 = B).
		mode: Scale mode name or alias (e.g. ``"ionian"``, ``"minor"``, ``"dorian"``).

	Returns:
		List of pitch classes in scale order.

	Example:
		```python
		# C major pitch classes
		scale_pitch_classes(0, "ionian")  # → [0, 2, 4, 5, 7, 9, 11]

		# A minor pitch classes
		scale_pitch_classes(9, "aeolian")  # → [9, 11, 0, 2, 4, 5, 7] (mod-12)
		```
	"""

	return get_scale(mode).pitch_classes(key_pc)


def nearest_in_scale (pitch: int, scale_pcs: typing.Collection[int]) -> int:

	"""
	Snap a pitch (or pitch class) to the nearest member of the scale.

	Searches outward in semitone steps from the input pitch. When two
	notes are equidistant (e.g. C# between C and D in C major), the
	upward direction is preferred. Absolute pitches stay absolute, so a
	snapped B never wraps down an octave.

	Parameters:
		pitch: Absolute pitch or pitch class to snap.
		scale_pcs: Pitch classes accepted by the scale (0-11).

	Returns:
		The snapped value; unchanged when the scale is empty.

	Example:
		```python
		scale = scale_pitch_classes(0, "ionian")  # [0, 2, 4, 5, 7, 9, 11]
		nearest_in_scale(61, scale)  # → 62
		```
	"""

	pc = pitch % 12

	if not scale_pcs or pc in scale_pcs:
		return pitch

	for offset in range(1, 7):
		if (pc + offset) % 12 in scale_pcs:
			return pitch + offset
		if (pc - offset) % 12 in scale_pcs:
			return pitch - offset

	return pitch
