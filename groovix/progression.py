"""Chord progression descriptions.

A progression is a list of `ProgressionEntry` items, each a chord symbol and
the number of bars it lasts. `parse_progression()` reads the compact text
form used on the command line and in config files::

	Cmaj7 Am7 Dm7 G7          # one bar each
	8 Cmaj7 Am7 4 Dm7 G7      # a bare number sets the length in beats
	Cmaj7:2 G7:1              # explicit bar counts
"""

import collections.abc
import dataclasses
import logging
import typing

import groovix.chords
import groovix.constants.durations
import groovix.constants.velocity
import groovix.events
import groovix.resolver


logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class ProgressionEntry:

	"""
	A chord symbol held for a whole number of bars.
	"""

	chord: str
	bars: int = 1


	def __post_init__ (self) -> None:

		if self.bars < 1:
			raise ValueError(f"Chord {self.chord!r} must last at least one bar")


ProgressionLike = typing.Union[ProgressionEntry, str, typing.Tuple[str, int], typing.Mapping[str, typing.Any]]


def coerce_entry (item: ProgressionLike) -> ProgressionEntry:

	"""Accept an entry, a bare symbol, a ``(symbol, bars)`` pair or a ``{"chord", "bars"}`` mapping."""

	if isinstance(item, ProgressionEntry):
		return item

	if isinstance(item, str):
		return ProgressionEntry(chord=item)

	if isinstance(item, tuple):
		chord, bars = item
		return ProgressionEntry(chord=str(chord), bars=int(bars))

	if isinstance(item, collections.abc.Mapping):
		return ProgressionEntry(chord=str(item["chord"]), bars=int(item.get("bars", 1)))

	raise ValueError(f"Cannot read a progression entry from {item!r}")


def coerce_progression (items: typing.Iterable[ProgressionLike]) -> typing.List[ProgressionEntry]:

	"""Normalise any accepted progression form into a list of entries."""

	return [coerce_entry(item) for item in items]


def parse_progression (text: str, beats_per_bar: int = 4) -> typing.List[ProgressionEntry]:

	"""Read a whitespace-separated progression description.

	A bare number sets the length, in beats, of the chords that follow it
	(default one bar). Lengths round down to whole bars with a minimum of one.
	A ``Chord:bars`` item overrides the length for that chord only.

	Example:
		```python
		parse_progression("8 Cmaj7 4 G7")
		# → [ProgressionEntry("Cmaj7", 2), ProgressionEntry("G7", 1)]
		```
	"""

	if beats_per_bar <= 0:
		raise ValueError("Beats per bar must be positive")

	entries: typing.List[ProgressionEntry] = []
	bars = 1

	for item in text.split():

		if item.isdigit():
			bars = max(1, int(item) // beats_per_bar)
			continue

		symbol, _, count = item.partition(":")

		if count:
			if not count.isdigit() or int(count) < 1:
				raise ValueError(f"Bar count must be a positive number in {item!r}")
			entries.append(ProgressionEntry(chord=symbol, bars=int(count)))

		else:
			entries.append(ProgressionEntry(chord=symbol, bars=bars))

	return entries


def chord_events (
	progression: typing.Iterable[ProgressionLike],
	octave: int = 3,
	steps_per_bar: int = groovix.constants.durations.BAR,
	velocity: int = groovix.constants.velocity.DEFAULT_CHORD_VELOCITY
) -> typing.List[groovix.events.NoteEvent]:

	"""Render a progression as sustained block chords, one chord per entry.

	Symbols are read with the notation chord resolver first (``"Cmin7"``,
	``"Cmaj9"``, ``"G7"``). Symbols it does not know fall back to the lenient
	progression parser, so ``"Am"`` and ``"Cdom7"`` sound the same chord the
	melody was written over. Symbols neither can read are skipped with a
	warning and leave a gap.
	"""

	events: typing.List[groovix.events.NoteEvent] = []
	cursor = 0

	for entry in coerce_progression(progression):

		length = entry.bars * steps_per_bar
		parsed = groovix.chords.parse_chord_token(entry.chord, octave)
		pitches: typing.Sequence[int] = parsed.pitches

		if not parsed.ok:
			symbol = groovix.chords.parse_chord_symbol(entry.chord)

			if symbol is None:
				logger.warning(f"Skipped chord {entry.chord!r}: {parsed.error}")
				pitches = ()
			else:
				pitches = symbol.tones(octave)

		for pitch in pitches:
			if groovix.resolver.MIN_PITCH <= pitch <= groovix.resolver.MAX_PITCH:
				events.append(groovix.events.NoteEvent(pitch=pitch, start_tick=cursor, length_ticks=length, velocity=velocity))

		cursor += length

	return events
