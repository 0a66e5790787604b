"""Standard MIDI file import and export for note events.

Ticks in Groovix are sixteenth notes. Files are written at 480 PPQN, so one
tick becomes 120 file ticks. On import, file ticks are scaled by
``ticks_per_beat / 4`` and rounded to the nearest sixteenth.
"""

import collections
import logging
import typing

import mido

import groovix.constants.durations
import groovix.events


logger = logging.getLogger(__name__)


DEFAULT_BPM = 120.0


def _track_notes (track: mido.MidiTrack, ticks_per_step: float) -> typing.List[groovix.events.NoteEvent]:

	"""Pair note-ons with note-offs in one track.

	A note-on with velocity 0 counts as a note-off. Overlapping notes of the
	same pitch and channel close in the order they opened. Notes still open
	at the end of the track are dropped.
	"""

	events: typing.List[groovix.events.NoteEvent] = []
	open_notes: typing.Dict[typing.Tuple[int, int], typing.Deque[typing.Tuple[int, int]]] = collections.defaultdict(collections.deque)
	now = 0

	for message in track:

		now += message.time

		if message.type == "note_on" and message.velocity > 0:
			open_notes[(message.channel, message.note)].append((now, message.velocity))

		elif message.type in ("note_off", "note_on"):

			pending = open_notes.get((message.channel, message.note))

			if not pending:
				logger.debug(f"Ignored note-off without a note-on: {message}")
				continue

			started, velocity = pending.popleft()
			start_tick = int(round(started / ticks_per_step))
			end_tick = int(round(now / ticks_per_step))

			events.append(groovix.events.NoteEvent(
				pitch = message.note,
				start_tick = start_tick,
				length_ticks = max(1, end_tick - start_tick),
				velocity = velocity
			))

	dangling = sum(len(pending) for pending in open_notes.values())

	if dangling:
		logger.warning(f"Dropped {dangling} note(s) with no note-off")

	return events


def read_track_events (path: str) -> typing.List[typing.List[groovix.events.NoteEvent]]:

	"""Read a MIDI file and return the note events of each track separately."""

	midi = mido.MidiFile(path)
	ticks_per_step = midi.ticks_per_beat / groovix.constants.durations.STEPS_PER_BEAT

	return [groovix.events.sort_events(_track_notes(track, ticks_per_step)) for track in midi.tracks]


def read_note_events (path: str) -> typing.List[groovix.events.NoteEvent]:

	"""Read every note in a MIDI file, all tracks merged, sorted by start tick.

	Example:
		```python
		events = read_note_events("riff.mid")
		```
	"""

	merged: typing.List[groovix.events.NoteEvent] = []

	for track in read_track_events(path):
		merged.extend(track)

	logger.info(f"Read {len(merged)} note(s) from {path}")

	return groovix.events.sort_events(merged)


def build_midi_file (
	events: typing.Iterable[groovix.events.NoteEvent],
	bpm: float = DEFAULT_BPM,
	channel: int = 0
) -> mido.MidiFile:

	"""Render events into a one-track type-1 `mido.MidiFile` at 480 PPQN."""

	if bpm <= 0:
		raise ValueError("BPM must be positive")

	if not 0 <= channel <= 15:
		raise ValueError("MIDI channel must be 0-15")

	ticks_per_step = groovix.constants.durations.MIDI_TICKS_PER_BEAT // groovix.constants.durations.STEPS_PER_BEAT

	midi = mido.MidiFile(type=1)
	midi.ticks_per_beat = groovix.constants.durations.MIDI_TICKS_PER_BEAT

	track = mido.MidiTrack()
	midi.tracks.append(track)
	track.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(bpm), time=0))

	# (tick, order, message): note-offs sort before note-ons on the same tick.
	timeline: typing.List[typing.Tuple[int, int, mido.Message]] = []

	for event in events:
		timeline.append((event.start_tick * ticks_per_step, 1, mido.Message("note_on", channel=channel, note=event.pitch, velocity=event.velocity)))
		timeline.append((event.end_tick * ticks_per_step, 0, mido.Message("note_off", channel=channel, note=event.pitch, velocity=0)))

	timeline.sort(key=lambda item: (item[0], item[1]))

	last_tick = 0

	for tick, _, message in timeline:
		message.time = tick - last_tick
		track.append(message)
		last_tick = tick

	track.append(mido.MetaMessage("end_of_track", time=0))

	return midi


def write_note_events (
	events: typing.Iterable[groovix.events.NoteEvent],
	path: str,
	bpm: float = DEFAULT_BPM,
	channel: int = 0
) -> None:

	"""Write events to a standard MIDI file.

	Example:
		```python
		write_note_events(parse_notation("#44 C E G").events, "arp.mid", bpm=100)
		```
	"""

	event_list = list(events)
	midi = build_midi_file(event_list, bpm, channel)

	logger.info(f"Saving {len(event_list)} note(s) to {path}...")

	midi.save(path)
