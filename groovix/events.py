import dataclasses
import typing

import groovix.constants.velocity


MIN_PITCH = 0
MAX_PITCH = 127


@dataclasses.dataclass(frozen=True)
class NoteEvent:

	"""
	A single note placed on the tick grid (1 tick = one sixteenth note).
	"""

	pitch: int
	start_tick: int
	length_ticks: int
	velocity: int = groovix.constants.velocity.DEFAULT_VELOCITY


	def __post_init__ (self) -> None:

		if not MIN_PITCH <= self.pitch <= MAX_PITCH:
			raise ValueError(f"Pitch {self.pitch} outside 0-127")

		if self.start_tick < 0:
			raise ValueError("Start tick cannot be negative")

		if self.length_ticks < 1:
			raise ValueError("Length must be at least one tick")

		if not groovix.constants.velocity.MIN_VELOCITY <= self.velocity <= groovix.constants.velocity.MAX_VELOCITY:
			raise ValueError(f"Velocity {self.velocity} outside 0-127")


	@property
	def end_tick (self) -> int:

		"""Tick at which the note stops sounding."""

		return self.start_tick + self.length_ticks


class NoteSink (typing.Protocol):

	"""
	Anything that accepts emitted note events (a clip, a recorder, a list wrapper).
	"""

	def add_event (self, event: NoteEvent) -> None:
		...


def sort_events (events: typing.Iterable[NoteEvent]) -> typing.List[NoteEvent]:

	"""Return events ordered by start tick, then pitch."""

	return sorted(events, key=lambda e: (e.start_tick, e.pitch))


def emit (events: typing.Iterable[NoteEvent], sink: NoteSink) -> int:

	"""Hand events to a sink in order and return how many were sent."""

	count = 0

	for event in events:
		sink.add_event(event)
		count += 1

	return count
