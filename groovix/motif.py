import random
import typing

import groovix.intervals


class Motif:

	"""
	A short melodic fragment: target pitch classes keyed by rhythmic slot index.
	"""

	def __init__ (self, notes: typing.Optional[typing.Dict[int, int]] = None) -> None:

		"""
		Initialize a motif, optionally from existing slot → pitch-class pairs.
		"""

		self.notes: typing.Dict[int, int] = dict(notes) if notes else {}


	def capture (self, slot: int, pitch_class: int) -> None:

		"""
		Store the pitch class chosen for a slot.
		"""

		if slot < 0:
			raise ValueError("Slot cannot be negative")

		self.notes[slot] = pitch_class % 12


	def recall (self, slot: int) -> typing.Optional[int]:

		"""Return the pitch class stored for a slot, wrapping around the motif length.

		A slot the motif never captured returns ``None``.
		"""

		length = len(self)

		if length == 0:
			return None

		return self.notes.get(slot % length)


	def varied (self, pitch_class: int, scale_pcs: typing.Collection[int], rng: random.Random) -> int:

		"""
		Nudge a recalled pitch class by up to two semitones and snap it back onto the scale.
		"""

		delta = rng.choice([-2, -1, 1, 2])

		return groovix.intervals.nearest_in_scale(pitch_class + delta, scale_pcs) % 12


	def copy (self) -> "Motif":

		"""
		Return an independent copy.
		"""

		return Motif(self.notes)


	def __len__ (self) -> int:

		"""
		Motif length in slots, from slot 0 to the last captured slot.
		"""

		if not self.notes:
			return 0

		return max(self.notes) + 1


	def __bool__ (self) -> bool:

		return bool(self.notes)
