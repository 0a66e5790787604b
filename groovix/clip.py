import logging
import typing

import groovix.constants.durations
import groovix.constants.velocity
import groovix.events
import groovix.midi_file
import groovix.notation
import groovix.pitches


logger = logging.getLogger(__name__)


class Clip:

	"""
	A fixed-length container of note events, the target of notation and melody imports.
	"""

	def __init__ (
		self,
		bars: int = 4,
		beats_per_bar: int = 4,
		bpm: float = 120.0,
		default_octave: int = groovix.pitches.DEFAULT_OCTAVE,
		default_length: int = groovix.notation.DEFAULT_LENGTH
	) -> None:

		"""
		Initialize an empty clip with its length in bars and the notation defaults it imports with.
		"""

		if bars < 1:
			raise ValueError("Clip must be at least one bar long")

		if beats_per_bar < 1:
			raise ValueError("Beats per bar must be at least 1")

		if bpm <= 0:
			raise ValueError("BPM must be positive")

		self.bars = bars
		self.beats_per_bar = beats_per_bar
		self.bpm = bpm
		self.default_octave = default_octave
		self.default_length = default_length

		self.steps: typing.Dict[int, typing.List[groovix.events.NoteEvent]] = {}


	@property
	def length_ticks (self) -> int:

		"""Clip length in sixteenth-note ticks."""

		return self.bars * self.beats_per_bar * groovix.constants.durations.STEPS_PER_BEAT


	def add_event (self, event: groovix.events.NoteEvent) -> None:

		"""Add an event, shortening it to end at the clip boundary.

		Events that start at or after the end of the clip are dropped.
		"""

		if event.start_tick >= self.length_ticks:
			logger.debug(f"Dropped note {event.pitch} at tick {event.start_tick}: past the clip end")
			return

		if event.end_tick > self.length_ticks:
			event = groovix.events.NoteEvent(
				pitch = event.pitch,
				start_tick = event.start_tick,
				length_ticks = self.length_ticks - event.start_tick,
				velocity = event.velocity
			)

		self.steps.setdefault(event.start_tick, []).append(event)


	def add_note (
		self,
		position: int,
		pitch: int,
		velocity: int = groovix.constants.velocity.DEFAULT_VELOCITY,
		duration: int = groovix.constants.durations.SIXTEENTH
	) -> None:

		"""
		Add a note at a tick position.
		"""

		self.add_event(groovix.events.NoteEvent(pitch=pitch, start_tick=position, length_ticks=duration, velocity=velocity))


	def import_notation (self, text: str, max_tokens: int = groovix.notation.DEFAULT_MAX_TOKENS) -> groovix.notation.NotationResult:

		"""Compile a notation block with this clip's defaults and add its events.

		Returns the full compile result so callers can report failures.
		"""

		result = groovix.notation.parse_notation(text, self.default_octave, self.default_length, max_tokens)
		groovix.events.emit(result.events, self)

		return result


	def import_midi (self, path: str) -> int:

		"""
		Add every note from a MIDI file and return how many were read.
		"""

		return groovix.events.emit(groovix.midi_file.read_note_events(path), self)


	def events (self) -> typing.List[groovix.events.NoteEvent]:

		"""
		Return all events ordered by start tick, then pitch.
		"""

		return groovix.events.sort_events(event for step in self.steps.values() for event in step)


	def clear (self) -> None:

		self.steps = {}


	def __len__ (self) -> int:

		return sum(len(step) for step in self.steps.values())
