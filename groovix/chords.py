"""Chord formulas, chord token parsing and chord symbols.

This module provides two chord parsers:

- `parse_chord_token(token, default_octave)` resolves a notation chord token
  (``"C#4maj7*2"``) into absolute pitches plus the length operator that the
  line resolver applies. It uses the fixed `CHORD_FORMULAS` table.
- `parse_chord_symbol(symbol)` reads a progression chord symbol (``"Am7"``,
  ``"F#dim"``) into a `ChordSymbol` with a triad quality and an optional
  seventh. The melody generator works from these.

`CHORD_FORMULAS` is an ordered tuple of ``(prefix, intervals)`` pairs. A quality
string is matched against the prefixes in order and the first prefix it starts
with wins, so longer prefixes are listed ahead of their shorter relatives
(``"maj7"`` before ``"maj"``, ``"m7b5"`` before ``"m7"``, ``"11"`` before ``"7"``).
"""

import dataclasses
import logging
import re
import typing

import groovix.pitches


logger = logging.getLogger(__name__)


REST = "Z"

LENGTH_OPERATORS = "*/+-"

CHORD_FORMULAS: typing.Tuple[typing.Tuple[str, typing.Tuple[int, ...]], ...] = (
	("sus2", (0, 2, 7)),
	("sus4", (0, 5, 7)),
	("maj7", (0, 4, 7, 11)),
	("min7", (0, 3, 7, 10)),
	("dim7", (0, 3, 6, 9)),
	("m7b5", (0, 3, 6, 10)),
	("maj9", (0, 4, 7, 11, 14)),
	("min9", (0, 3, 7, 10, 14)),
	("maj", (0, 4, 7)),
	("min", (0, 3, 7)),
	("dim", (0, 3, 6)),
	("aug", (0, 4, 8)),
	("m7", (0, 3, 7, 10)),
	("11", (0, 4, 7, 10, 14, 17)),
	("13", (0, 4, 7, 10, 14, 21)),
	("7", (0, 4, 7, 10)),
	("9", (0, 4, 7, 10, 14)),
)

DEFAULT_QUALITY = "maj"

TRIAD_INTERVALS: typing.Dict[str, typing.Tuple[int, int, int]] = {
	"major": (0, 4, 7),
	"minor": (0, 3, 7),
	"diminished": (0, 3, 6),
	"augmented": (0, 4, 8),
}

SEVENTH_INTERVALS: typing.Dict[str, typing.Optional[int]] = {
	"none": None,
	"dominant7": 10,
	"major7": 11,
}

QUALITY_SUFFIX: typing.Dict[str, str] = {
	"major": "",
	"minor": "m",
	"diminished": "dim",
	"augmented": "aug",
}


def find_formula (quality: str) -> typing.Optional[typing.Tuple[str, typing.Tuple[int, ...]]]:

	"""Return the first ``(prefix, intervals)`` pair the quality string starts with.

	Matching is case-insensitive and an empty quality means a major triad.

	Example:
		```python
		find_formula("maj7")   # → ("maj7", (0, 4, 7, 11))
		find_formula("")       # → ("maj", (0, 4, 7))
		find_formula("xyz")    # → None
		```
	"""

	if not quality:
		quality = DEFAULT_QUALITY

	quality = quality.lower()

	for prefix, intervals in CHORD_FORMULAS:
		if quality.startswith(prefix):
			return prefix, intervals

	return None


@dataclasses.dataclass(frozen=True)
class ChordToken:

	"""
	The outcome of parsing one notation chord token.

	``ok`` is ``False`` when the token cannot be resolved; ``error`` then says
	why and ``pitches`` is empty. A rest (``Z``) is ``ok`` with no pitches.
	"""

	ok: bool
	text: str
	root: str = ""
	octave: int = groovix.pitches.DEFAULT_OCTAVE
	quality_suffix: str = ""
	formula: str = ""
	length_operator: str = ""
	length_operand: int = 0
	pitches: typing.Tuple[int, ...] = ()
	error: str = ""


	@property
	def is_rest (self) -> bool:

		"""True when the token is the ``Z`` rest sentinel."""

		return self.root == REST


def parse_chord_token (token: str, default_octave: int = groovix.pitches.DEFAULT_OCTAVE) -> ChordToken:

	"""Resolve a notation chord token into absolute pitches.

	The token grammar is ``[A-G][#b]?[0-9]?<quality>([*/+-][0-9]+)?`` with
	``Z`` in place of the letter for a rest. The length operator and operand
	are returned untouched; the line resolver turns them into a length.

	A digit right after the root is read as the octave (``"C4maj7"``) unless
	the suffix is itself a numeric formula with nothing else resolvable
	after the digit, so ``"G7"`` is a dominant seventh and ``"C11"`` a
	dominant eleventh at the default octave.

	Parameters:
		token: The chord token, e.g. ``"Cmaj7"``, ``"F#3min*2"``, ``"Z/2"``.
		default_octave: Octave used when the token carries no octave digit.

	Returns:
		A `ChordToken`. Failures are reported with ``ok=False``, never raised.

	Example:
		```python
		parse_chord_token("Cmaj7", 4).pitches   # → (60, 64, 67, 71)
		parse_chord_token("G7", 4).pitches      # → (67, 71, 74, 77)
		parse_chord_token("Xmaj").ok            # → False
		```
	"""

	text = groovix.pitches.normalize_accidentals(token)
	i = 0
	root = ""
	octave = default_octave

	if i < len(text) and ("A" <= text[i] <= "G" or text[i] == REST):
		root += text[i]
		i += 1

	if root and root != REST and i < len(text) and text[i] in "#b":
		root += text[i]
		i += 1

	remaining = text[i:]
	split = re.split(r"[*/+\-]", remaining, maxsplit=1)
	quality = split[0]
	operator = ""
	operand = 0

	# A leading digit is an octave unless it starts a numeric formula
	# ("G7", "C11") and nothing resolvable follows it.
	if root and quality[:1].isdigit():
		after = quality[1:]
		if (after and find_formula(after) is not None) or find_formula(quality) is None:
			octave = int(quality[0])
			quality = after

	if len(split) == 2:

		operator = remaining[len(split[0])]

		if not split[1].isdigit():
			return ChordToken(
				ok = False,
				text = token,
				root = root,
				octave = octave,
				quality_suffix = quality,
				error = f"length operand {split[1]!r} is not a number"
			)

		operand = int(split[1])

	if not root:
		return ChordToken(ok=False, text=token, quality_suffix=quality, length_operator=operator, length_operand=operand, error="unknown root")

	if root == REST:
		return ChordToken(
			ok = True,
			text = token,
			root = root,
			octave = octave,
			quality_suffix = quality,
			length_operator = operator,
			length_operand = operand
		)

	match = find_formula(quality)

	if match is None:
		logger.debug(f"No chord formula for {quality!r} in {token!r}")
		return ChordToken(
			ok = False,
			text = token,
			root = root,
			octave = octave,
			quality_suffix = quality,
			length_operator = operator,
			length_operand = operand,
			error = f"unknown chord quality {quality!r}"
		)

	prefix, intervals = match
	root_pitch = groovix.pitches.absolute_pitch(groovix.pitches.NOTE_NAME_TO_PC[root], octave)

	return ChordToken(
		ok = True,
		text = token,
		root = root,
		octave = octave,
		quality_suffix = quality,
		formula = prefix,
		length_operator = operator,
		length_operand = operand,
		pitches = tuple(root_pitch + interval for interval in intervals)
	)


@dataclasses.dataclass(frozen=True)
class ChordSymbol:

	"""
	A chord as a root pitch class, a triad quality and an optional seventh.
	"""

	root_pc: int
	quality: str = "major"
	seventh: str = "none"


	def intervals (self) -> typing.List[int]:

		"""Return the chord intervals (triad plus optional seventh) from the root."""

		if self.quality not in TRIAD_INTERVALS:
			raise ValueError(f"Unknown chord quality: {self.quality}")

		if self.seventh not in SEVENTH_INTERVALS:
			raise ValueError(f"Unknown seventh: {self.seventh}")

		intervals = list(TRIAD_INTERVALS[self.quality])
		seventh = SEVENTH_INTERVALS[self.seventh]

		if seventh is not None:
			intervals.append(seventh)

		return intervals


	def pitch_classes (self) -> typing.List[int]:

		"""Return the chord tones as pitch classes, root first."""

		return [(self.root_pc + interval) % 12 for interval in self.intervals()]


	def tones (self, octave: int = groovix.pitches.DEFAULT_OCTAVE) -> typing.List[int]:

		"""Return absolute pitches with the root in the given octave.

		Example:
			```python
			ChordSymbol(root_pc=7, quality="major", seventh="dominant7").tones(4)
			# → [67, 71, 74, 77]
			```
		"""

		root = groovix.pitches.absolute_pitch(self.root_pc, octave)

		return [root + interval for interval in self.intervals()]


	def name (self) -> str:

		"""
		Return a human-friendly chord name.
		"""

		root_name = groovix.pitches.PC_TO_NOTE_NAME[self.root_pc % 12]

		if self.quality == "diminished" and self.seventh == "dominant7":
			return f"{root_name}m7b5"

		suffix = QUALITY_SUFFIX.get(self.quality, "")

		if self.seventh == "major7":
			suffix += "maj7"
		elif self.seventh == "dominant7":
			suffix += "7"

		return f"{root_name}{suffix}"


_SYMBOL_PATTERN = re.compile(r"^([A-G])([#b]?)(.*)$")
_MAJOR_SEVENTH_PATTERN = re.compile(r"(maj|ma|Δ)(7|9|11|13)", re.IGNORECASE)
_EXTENSION_PATTERN = re.compile(r"(?<!add)(9|11|13)")


def parse_chord_symbol (symbol: str) -> typing.Optional[ChordSymbol]:

	"""Read a progression chord symbol into a `ChordSymbol`.

	This parser is deliberately lenient: ``m``/``min`` make a minor triad,
	``dim``/``o``/``°`` diminished, ``m7b5``/``ø`` diminished with a minor
	seventh, ``aug``/``+`` augmented and ``sus`` chords are treated as major.
	``maj7``/``ma7``/``Δ7`` add a major seventh, any other ``7`` adds a minor
	(dominant) seventh. Ninths, elevenths and thirteenths imply the seventh
	and are otherwise ignored. Returns ``None`` when no root can be read.

	Progression symbols carry no octave, so a digit after the root is part of
	the quality (``G7`` is a dominant seventh).

	Example:
		```python
		parse_chord_symbol("Am7")    # → ChordSymbol(root_pc=9, quality="minor", seventh="dominant7")
		parse_chord_symbol("Cmaj7")  # → ChordSymbol(root_pc=0, quality="major", seventh="major7")
		```
	"""

	match = _SYMBOL_PATTERN.match(groovix.pitches.normalize_accidentals(str(symbol).strip()))

	if not match:
		return None

	root_pc = groovix.pitches.NOTE_NAME_TO_PC.get(match.group(1) + match.group(2))

	if root_pc is None:
		return None

	rest = match.group(3)
	lowered = rest.lower()

	quality = "major"

	if (lowered.startswith("m") and not lowered.startswith("maj")) or "min" in lowered:
		quality = "minor"

	half_diminished = "m7b5" in lowered or "ø" in lowered

	if "dim" in lowered or lowered in ("o", "o7") or lowered.startswith("°") or half_diminished:
		quality = "diminished"

	if "aug" in lowered or "+" in lowered:
		quality = "augmented"

	if "sus" in lowered:
		quality = "major"

	if _MAJOR_SEVENTH_PATTERN.search(rest):
		seventh = "major7"
	elif "7" in lowered or half_diminished or _EXTENSION_PATTERN.search(lowered):
		seventh = "dominant7"
	else:
		seventh = "none"

	return ChordSymbol(root_pc=root_pc, quality=quality, seventh=seventh)
