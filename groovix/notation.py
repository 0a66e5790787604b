"""Line-oriented note and chord notation.

A notation block is a set of lines; each line is compiled on its own and
starts at tick 0.

**Syntax:**
- ``#<octave><length> ...``: a note line. The two header digits set the
  default octave and default length in ticks (1 tick = a sixteenth note);
  either may be left out.
- ``&<octave><length> ...``: a chord line, one chord symbol per token.
- ``N(a b c)``: repeat the enclosed tokens N times. Groups nest.
- ``CEG``: notes written together sound together.
- ``C*2``, ``C/2``, ``C+1``, ``C-1``: length operators for one note or chord.
- ``Z``: a rest, with the same length operators.

Example:
	```python
	result = parse_notation(
		"#54 C 3(C) D# EbA CD 2(CD DE)\n"
		"&54 Cmaj Cmin 2(Cmin Dmin) 2(Fmaj7 Fmaj7)"
	)
	len(result.events)
	```

Lines that start with anything else are ignored.
"""

import dataclasses
import logging
import re
import typing

import groovix.events
import groovix.pitches
import groovix.resolver


logger = logging.getLogger(__name__)


NOTE_LINE = "#"
CHORD_LINE = "&"

DEFAULT_LENGTH = 1
DEFAULT_MAX_TOKENS = 100_000

_REPEAT_PATTERN = re.compile(r"^([0-9]+)\((.*)\)$", re.DOTALL)


class NotationError (Exception):
	pass


class NotationTooLarge (NotationError):

	"""
	Raised when repeat expansion would produce more tokens than allowed.
	"""

	def __init__ (self, limit: int, requested: int) -> None:

		super().__init__(f"Repeat expansion needs {requested} tokens, limit is {limit}")

		self.limit = limit
		self.requested = requested


@dataclasses.dataclass
class NotationResult:

	"""
	Everything produced by compiling a line or a block of notation.
	"""

	events: typing.List[groovix.events.NoteEvent] = dataclasses.field(default_factory=list)
	failures: typing.List[groovix.resolver.ResolutionFailure] = dataclasses.field(default_factory=list)
	errors: typing.List[str] = dataclasses.field(default_factory=list)
	end_tick: int = 0


def tokenize (line: str) -> typing.List[str]:

	"""
	Split a line on whitespace, keeping parenthesised groups whole.

	"2(C D) E" -> ["2(C D)", "E"]

	A closing parenthesis with no open group is kept as an ordinary
	character and never makes the nesting depth negative.
	"""

	tokens: typing.List[str] = []
	current: typing.List[str] = []
	depth = 0

	for char in line:

		if char.isspace() and depth == 0:
			if current:
				tokens.append("".join(current))
				current = []
			continue

		if char == "(":
			depth += 1

		elif char == ")" and depth > 0:
			depth -= 1

		current.append(char)

	if current:
		tokens.append("".join(current))

	return tokens


def expand (tokens: typing.Sequence[str], max_tokens: int = DEFAULT_MAX_TOKENS) -> typing.List[str]:

	"""Expand ``N(...)`` repeat groups into a flat list of literal tokens.

	Each repetition is a freshly built list, so no two copies share state.

	Parameters:
		tokens: Tokens from `tokenize`.
		max_tokens: Upper bound on the size of the expansion.

	Raises:
		NotationTooLarge: If the expansion would exceed ``max_tokens``.

	Example:
		```python
		expand(tokenize("2(C 3(D))"))  # → ["C", "D", "D", "D", "C", "D", "D", "D"]
		```
	"""

	result: typing.List[str] = []

	for token in tokens:

		match = _REPEAT_PATTERN.match(token)

		if not match:
			result.append(token)

		else:
			count = int(match.group(1))
			body = expand(tokenize(match.group(2).strip()), max_tokens)
			requested = len(result) + count * len(body)

			if requested > max_tokens:
				raise NotationTooLarge(max_tokens, requested)

			for _ in range(count):
				result.extend(list(body))

		if len(result) > max_tokens:
			raise NotationTooLarge(max_tokens, len(result))

	return result


def parse_header (token: str, default_octave: int, default_length: int) -> typing.Tuple[str, int, int]:

	"""Read the line kind, octave digit and length digit from a header token.

	Example:
		```python
		parse_header("#54", 5, 1)  # → ("#", 5, 4)
		parse_header("&", 5, 1)    # → ("&", 5, 1)
		```
	"""

	kind = token[:1]
	octave = default_octave
	length = default_length

	if len(token) > 1 and token[1].isdigit():
		octave = int(token[1])

	if len(token) > 2 and token[2].isdigit():
		length = int(token[2])

	return kind, octave, max(1, length)


def parse_line (
	line: str,
	default_octave: int = groovix.pitches.DEFAULT_OCTAVE,
	default_length: int = DEFAULT_LENGTH,
	max_tokens: int = DEFAULT_MAX_TOKENS
) -> NotationResult:

	"""Compile one note or chord line into events.

	Example:
		```python
		parse_line("#54 C*2 D").events[1].start_tick  # → 8
		```
	"""

	result = NotationResult()
	stripped = line.strip()

	if not stripped or stripped[0] not in (NOTE_LINE, CHORD_LINE):
		return result

	try:
		tokens = expand(tokenize(stripped), max_tokens)

	except NotationTooLarge as exc:
		logger.warning(f"Skipped line {stripped[:40]!r}: {exc}")
		result.errors.append(str(exc))
		return result

	kind, octave, length = parse_header(tokens[0], default_octave, default_length)

	if kind == NOTE_LINE:
		line_result = groovix.resolver.resolve_note_line(tokens[1:], octave, length)
	else:
		line_result = groovix.resolver.resolve_chord_line(tokens[1:], octave, length)

	result.events = line_result.events
	result.failures = line_result.failures
	result.end_tick = line_result.end_tick

	return result


def parse_notation (
	text: str,
	default_octave: int = groovix.pitches.DEFAULT_OCTAVE,
	default_length: int = DEFAULT_LENGTH,
	max_tokens: int = DEFAULT_MAX_TOKENS
) -> NotationResult:

	"""Compile a multi-line notation block.

	Every line starts at tick 0, so a note line and a chord line written one
	under the other play together. A line that is too large to expand is
	skipped and recorded in ``errors``; the other lines still compile.
	"""

	result = NotationResult()

	for line in text.splitlines():

		line_result = parse_line(line, default_octave, default_length, max_tokens)

		result.events.extend(line_result.events)
		result.failures.extend(line_result.failures)
		result.errors.extend(line_result.errors)
		result.end_tick = max(result.end_tick, line_result.end_tick)

	if result.failures:
		logger.info(f"{len(result.failures)} notation item(s) could not be resolved")

	result.events = groovix.events.sort_events(result.events)

	return result
