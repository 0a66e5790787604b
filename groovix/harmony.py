import typing

import groovix.chords
import groovix.intervals
import groovix.pitches


def diatonic_chords (key: str, mode: str = "ionian") -> typing.List[groovix.chords.ChordSymbol]:

	"""Return the diatonic triads for a key and mode.

	Parameters:
		key: Note name for the key (e.g., ``"C"``, ``"Eb"``, ``"F#"``).
		mode: Any registered mode with triad qualities, e.g. ``"ionian"``
			(or ``"major"``), ``"dorian"``, ``"aeolian"`` (or ``"minor"``),
			``"harmonic_minor"``, ``"melodic_minor"``.

	Returns:
		One ``ChordSymbol`` per scale degree.

	Example:
		```python
		chords = diatonic_chords("A", mode="minor")
		chords[0].name()  # → "Am"
		chords[2].name()  # → "C"
		```
	"""

	scale = groovix.intervals.get_scale(mode)

	if not scale.triad_qualities:
		raise ValueError(f"Mode {mode!r} has no diatonic triad qualities")

	key_pc = groovix.pitches.note_name_to_pc(key)

	return [
		groovix.chords.ChordSymbol(root_pc=root_pc, quality=quality)
		for root_pc, quality in zip(scale.pitch_classes(key_pc), scale.triad_qualities)
	]


def degree_root_pitch (key: str, mode: str, degree: int, octave: int) -> int:

	"""Return the absolute pitch of a scale degree (0-based) above the tonic in ``octave``.

	Degrees that pass B stay above the tonic rather than wrapping down, and
	degrees beyond the scale length continue into the next octave.
	"""

	scale = groovix.intervals.get_scale(mode)
	size = len(scale.intervals)
	key_pitch = groovix.pitches.absolute_pitch(groovix.pitches.note_name_to_pc(key), octave)

	return key_pitch + scale.intervals[degree % size] + 12 * (degree // size)


def diatonic_triad (key: str, mode: str, degree: int, octave: int) -> typing.List[int]:

	"""Return the absolute pitches of the diatonic triad on a scale degree."""

	chords = diatonic_chords(key, mode)
	chord = chords[degree % len(chords)]
	root = degree_root_pitch(key, mode, degree, octave)

	return [root + interval for interval in chord.intervals()]
