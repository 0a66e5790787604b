"""Resolve expanded note-line and chord-line tokens into note events.

Both resolvers walk the tokens left to right with a time cursor that starts
at tick 0:

- A **note token** holds one or more notes written back to back
  (``"CEG"``, ``"C*2E/2G"``). All notes in a token start on the same tick, and
  the cursor then advances by the *longest* of them. A ``Z`` is a silent note:
  it takes part in the length calculation but emits nothing.
- A **chord token** holds exactly one chord (see
  `groovix.chords.parse_chord_token`) and advances the cursor by its length.

Length operators apply to the note they follow: ``*k`` multiplies the
default length, ``/k`` divides it (only when ``k > 1``), ``+k``/``-k`` add or
subtract ticks. A resolved length never drops below one tick.

Nothing here raises on bad input. Unresolvable text is dropped and reported
as a `ResolutionFailure` in the returned `LineResult`.
"""

import dataclasses
import logging
import typing

import groovix.chords
import groovix.constants.velocity
import groovix.events
import groovix.pitches


logger = logging.getLogger(__name__)


MIN_PITCH = groovix.events.MIN_PITCH
MAX_PITCH = groovix.events.MAX_PITCH


@dataclasses.dataclass(frozen=True)
class ResolutionFailure:

	"""
	A piece of notation that could not be turned into notes.
	"""

	text: str
	reason: str
	token_index: int = -1


@dataclasses.dataclass
class LineResult:

	"""
	Events and failures produced by one resolver call.
	"""

	events: typing.List[groovix.events.NoteEvent] = dataclasses.field(default_factory=list)
	failures: typing.List[ResolutionFailure] = dataclasses.field(default_factory=list)
	end_tick: int = 0


def apply_length_operator (default_length: int, operator: str, operand: int) -> int:

	"""Return the note length after applying a ``*``, ``/``, ``+`` or ``-`` operator.

	Example:
		```python
		apply_length_operator(4, "*", 2)  # → 8
		apply_length_operator(4, "/", 2)  # → 2
		apply_length_operator(4, "/", 1)  # → 4  (division needs k > 1)
		apply_length_operator(4, "-", 1)  # → 3
		```
	"""

	length = default_length

	if operator == "*":
		length = default_length * operand

	elif operator == "/":
		if operand > 1:
			length = default_length // operand

	elif operator == "+":
		length = default_length + operand

	elif operator == "-":
		length = default_length - operand

	return max(1, length)


def _failure (text: str, reason: str, token_index: int) -> ResolutionFailure:

	logger.debug(f"Dropped {text!r} (token {token_index}): {reason}")

	return ResolutionFailure(text=text, reason=reason, token_index=token_index)


def resolve_note_token (
	token: str,
	cursor: int,
	default_octave: int,
	default_length: int,
	velocity: int = groovix.constants.velocity.DEFAULT_VELOCITY,
	token_index: int = -1
) -> typing.Tuple[typing.List[groovix.events.NoteEvent], typing.List[ResolutionFailure], int]:

	"""Resolve a single note token placed at ``cursor``.

	Returns:
		``(events, failures, advance)`` where ``advance`` is the number of
		ticks the line cursor moves on by.
	"""

	text = groovix.pitches.normalize_accidentals(token)
	events: typing.List[groovix.events.NoteEvent] = []
	failures: typing.List[ResolutionFailure] = []
	max_length = 0
	i = 0
	n = len(text)

	while i < n:

		char = text[i]

		if char == ",":
			i += 1
			continue

		if not ("A" <= char <= "G" or char == groovix.chords.REST):
			failures.append(_failure(char, f"unexpected character in {token!r}", token_index))
			i += 1
			continue

		name = char
		i += 1

		if char != groovix.chords.REST and i < n and text[i] in "#b":
			name += text[i]
			i += 1

		octave = default_octave

		if i < n and text[i].isdigit():
			octave = int(text[i])
			i += 1

		length = default_length

		if i < n and text[i] in groovix.chords.LENGTH_OPERATORS:
			operator = text[i]
			i += 1
			start = i

			while i < n and text[i].isdigit():
				i += 1

			digits = text[start:i]

			if digits:
				length = apply_length_operator(default_length, operator, int(digits))
			else:
				failures.append(_failure(name + operator, f"length operator without a number in {token!r}", token_index))

		max_length = max(max_length, length)

		if name == groovix.chords.REST:
			continue

		pitch = groovix.pitches.pitch_for_name(name, octave)

		if pitch is None or not MIN_PITCH <= pitch <= MAX_PITCH:
			failures.append(_failure(f"{name}{octave}", "pitch outside the MIDI range", token_index))
			continue

		events.append(groovix.events.NoteEvent(pitch=pitch, start_tick=cursor, length_ticks=length, velocity=velocity))

	# A token with nothing playable still occupies its slot on the line.
	if max_length == 0 and failures:
		max_length = default_length

	return events, failures, max_length


def resolve_note_line (
	tokens: typing.Sequence[str],
	default_octave: int = groovix.pitches.DEFAULT_OCTAVE,
	default_length: int = 1,
	velocity: int = groovix.constants.velocity.DEFAULT_VELOCITY
) -> LineResult:

	"""Resolve expanded note-line tokens into note events.

	Parameters:
		tokens: Literal tokens, already expanded (no repeat groups, no header).
		default_octave: Octave for notes without an octave digit.
		default_length: Length in ticks for notes without an operator.
		velocity: Velocity given to every emitted note.

	Example:
		```python
		result = resolve_note_line(["CEG", "Z*4", "C"], default_octave=4, default_length=4)
		# three notes at tick 0, silence for 16 ticks, then C4 at tick 20
		result.events[-1].start_tick  # → 20
		```
	"""

	result = LineResult()
	cursor = 0

	for index, token in enumerate(tokens):
		events, failures, advance = resolve_note_token(token, cursor, default_octave, default_length, velocity, index)
		result.events.extend(events)
		result.failures.extend(failures)
		cursor += advance

	result.end_tick = cursor

	return result


def resolve_chord_line (
	tokens: typing.Sequence[str],
	default_octave: int = groovix.pitches.DEFAULT_OCTAVE,
	default_length: int = 1,
	velocity: int = groovix.constants.velocity.DEFAULT_CHORD_VELOCITY
) -> LineResult:

	"""Resolve expanded chord-line tokens, one chord per token.

	A token that fails to resolve emits nothing and is reported, but the
	cursor still moves on by the token's length so later chords keep their
	place in time.

	Example:
		```python
		result = resolve_chord_line(["Cmaj7", "Xmaj", "G7*2"], default_octave=4, default_length=4)
		len(result.failures)          # → 1
		result.events[-1].start_tick  # → 8
		```
	"""

	result = LineResult()
	cursor = 0

	for index, token in enumerate(tokens):

		text = token.rstrip(",")

		if not text:
			continue

		parsed = groovix.chords.parse_chord_token(text, default_octave)
		length = apply_length_operator(default_length, parsed.length_operator, parsed.length_operand)

		if not parsed.ok:
			result.failures.append(_failure(token, parsed.error, index))
			cursor += length
			continue

		for pitch in parsed.pitches:

			if not MIN_PITCH <= pitch <= MAX_PITCH:
				result.failures.append(_failure(token, f"chord tone {pitch} outside the MIDI range", index))
				continue

			result.events.append(groovix.events.NoteEvent(pitch=pitch, start_tick=cursor, length_ticks=length, velocity=velocity))

		cursor += length

	result.end_tick = cursor

	return result
