"""Pitch class tables and absolute pitch conversion.

Module-level constants:
- `NOTE_NAME_TO_PC`: Maps note names (e.g., `"C"`, `"F#"`, `"Bb"`) to pitch classes (0-11)
- `PC_TO_NOTE_NAME`: Maps pitch classes to sharp-spelled note names

Absolute pitches follow the MIDI note number convention with the octave
offset used throughout Groovix: ``pitch = pc + 12 * (octave + 1)``, so C4 is
60 and A4 is 69.
"""

import typing


DEFAULT_OCTAVE = 5

NOTE_NAME_TO_PC: typing.Dict[str, int] = {
	"C": 0,
	"B#": 0,
	"C#": 1,
	"Db": 1,
	"D": 2,
	"D#": 3,
	"Eb": 3,
	"E": 4,
	"Fb": 4,
	"F": 5,
	"E#": 5,
	"F#": 6,
	"Gb": 6,
	"G": 7,
	"G#": 8,
	"Ab": 8,
	"A": 9,
	"A#": 10,
	"Bb": 10,
	"B": 11,
	"Cb": 11,
}

PC_TO_NOTE_NAME: typing.List[str] = [
	"C",
	"C#",
	"D",
	"D#",
	"E",
	"F",
	"F#",
	"G",
	"G#",
	"A",
	"A#",
	"B",
]


def normalize_accidentals (text: str) -> str:

	"""Replace unicode sharp/flat signs with ``#`` and ``b``."""

	return text.replace("♯", "#").replace("♭", "b")


def note_name_to_pc (note_name: str) -> int:

	"""Validate a note name and return its pitch class (0-11).

	Parameters:
		note_name: Note name (e.g. ``"C"``, ``"F#"``, ``"Bb"``).

	Returns:
		Pitch class integer (0-11).

	Raises:
		ValueError: If the note name is not recognised.

	Example:
		```python
		note_name_to_pc("Db")  # → 1
		note_name_to_pc("C#")  # → 1
		```
	"""

	name = normalize_accidentals(note_name)

	if name not in NOTE_NAME_TO_PC:
		raise ValueError(
			f"Unknown note name: {note_name!r}. Expected e.g. 'C', 'F#', 'Bb'."
		)

	return NOTE_NAME_TO_PC[name]


def absolute_pitch (pc: int, octave: int = DEFAULT_OCTAVE) -> int:

	"""Return the absolute (MIDI) pitch for a pitch class in an octave.

	Example:
		```python
		absolute_pitch(0, 4)   # → 60 (middle C)
		absolute_pitch(9, 4)   # → 69 (A440)
		```
	"""

	return pc + 12 * (octave + 1)


def pitch_for_name (note_name: str, octave: int = DEFAULT_OCTAVE) -> typing.Optional[int]:

	"""
	Return the absolute pitch for a note name, or ``None`` for an unknown name.
	"""

	pc = NOTE_NAME_TO_PC.get(normalize_accidentals(note_name))

	if pc is None:
		return None

	return absolute_pitch(pc, octave)


def pitch_class (pitch: int) -> int:

	"""Return the pitch class of an absolute pitch."""

	return pitch % 12


def octave_of (pitch: int) -> int:

	"""Return the octave number of an absolute pitch (C4 = 60 is octave 4)."""

	return pitch // 12 - 1


def note_name (pitch: int) -> str:

	"""Return a sharp-spelled name with octave, e.g. ``60`` → ``"C4"``."""

	return f"{PC_TO_NOTE_NAME[pitch % 12]}{octave_of(pitch)}"
