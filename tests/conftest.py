import typing

import mido
import pytest

import groovix.events
import groovix.intervals


class RecordingSink:

	"""Minimal note sink for tests: keeps every event it is given."""

	def __init__ (self) -> None:

		"""Start with no events."""

		self.events: typing.List[groovix.events.NoteEvent] = []


	def add_event (self, event: groovix.events.NoteEvent) -> None:

		"""Record the event."""

		self.events.append(event)


@pytest.fixture
def sink () -> RecordingSink:

	"""An empty recording sink."""

	return RecordingSink()


@pytest.fixture
def progression () -> typing.List[str]:

	"""A four-bar ii-V-I style progression in C major."""

	return ["Cmaj7", "Am7", "Dm7", "G7"]


@pytest.fixture
def c_major () -> typing.Set[int]:

	"""Pitch classes of C major."""

	return set(groovix.intervals.scale_pitch_classes(0, "ionian"))


@pytest.fixture
def write_midi (tmp_path: typing.Any) -> typing.Callable[..., str]:

	"""Return a helper that writes raw mido messages to a file and returns its path.

	Each track is a list of ``(delta_ticks, message)`` pairs.
	"""

	def _write (tracks: typing.List[typing.List[typing.Tuple[int, mido.Message]]], ticks_per_beat: int = 480, name: str = "raw.mid") -> str:

		midi = mido.MidiFile(type=1, ticks_per_beat=ticks_per_beat)

		for messages in tracks:
			track = mido.MidiTrack()
			for delta, message in messages:
				track.append(message.copy(time=delta))
			midi.tracks.append(track)

		path = str(tmp_path / name)
		midi.save(path)

		return path

	return _write
