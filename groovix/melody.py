"""Procedural melody generation over a chord progression.

The generator writes a single-note line one bar at a time, in phrases that
alternate between a *question* and an *answer*:

1. The progression is expanded to one parsed chord per bar.
2. A key context (tonic, mode, scale) is fixed for the whole melody: an
   explicit `PreferredScale` wins, then an explicit ``scale_mode`` on the
   first chord root, otherwise the mode is inferred from the first chord.
3. Each bar picks one of the genre's rhythm templates. Every slot in the
   template is rolled against ``density`` and ``rest_chance``; surviving
   slots choose a target pitch class (chord tones on strong beats, a
   cadence toward the chord root or tonic in the last beat, light scale
   colour elsewhere). Question phrases record their choices as a `Motif`;
   later phrases may replay it, answers with small variations.
4. Each target is placed in the octave nearest the previous note, shaped by
   the stepwise and leap settings, clamped to the register and snapped back
   onto the scale. Approach notes and short fills decorate the line.

Every random decision is drawn from one ``random.Random`` seeded from
``MelodyParams.seed``, so the same inputs always produce the same events.

Example:
	```python
	events = generate_melody(["Cmaj7", "Am7", "Dm7", "G7"], MelodyParams(seed=7))
	```
"""

import dataclasses
import logging
import random
import typing

import groovix.chords
import groovix.constants.durations
import groovix.constants.velocity
import groovix.events
import groovix.intervals
import groovix.motif
import groovix.pitches
import groovix.progression
import groovix.sequence_utils


logger = logging.getLogger(__name__)


QUESTION = "question"
ANSWER = "answer"

AUTO_MODE = "auto"

# Relative scale degrees given slightly more weight as non-chord tones (2nd, 4th, 6th, 7th).
COLOUR_DEGREES = (2, 5, 9, 11)
COLOUR_WEIGHT = 1.15

MAX_LEGATO_LENGTH = 8

FALLBACK_CHORD = groovix.chords.ChordSymbol(root_pc=0)


@dataclasses.dataclass(frozen=True)
class RhythmSlot:

	"""
	One note position in a one-bar rhythm template.
	"""

	step: int
	duration: int
	accent: float


def _slots (*triples: typing.Tuple[int, int, float]) -> typing.Tuple[RhythmSlot, ...]:

	return tuple(RhythmSlot(step, duration, accent) for step, duration, accent in triples)


RHYTHM_PATTERNS: typing.Dict[str, typing.Tuple[typing.Tuple[RhythmSlot, ...], ...]] = {
	"pop": (
		# Bouncy eighths with a pair of sixteenths.
		_slots((0, 2, 1.0), (2, 2, 0.6), (4, 2, 0.9), (6, 1, 0.7), (7, 1, 0.55), (8, 2, 0.85), (10, 2, 0.6), (12, 4, 0.95)),
		# Syncopated hook.
		_slots((0, 3, 1.0), (3, 1, 0.6), (4, 2, 0.9), (6, 2, 0.7), (8, 3, 0.95), (11, 1, 0.55), (12, 4, 0.9)),
	),
	"edm": (
		# Driving eighths.
		_slots((0, 2, 0.9), (2, 2, 0.7), (4, 2, 0.9), (6, 2, 0.7), (8, 2, 0.95), (10, 2, 0.7), (12, 2, 0.9), (14, 2, 0.7)),
		# Anthem: longer notes, bigger gaps.
		_slots((0, 4, 1.0), (4, 2, 0.85), (6, 2, 0.65), (8, 4, 0.95), (12, 4, 0.9)),
	),
	"hiphop": (
		# Laid back with rests.
		_slots((0, 2, 1.0), (3, 1, 0.55), (4, 2, 0.8), (7, 1, 0.5), (8, 3, 0.85), (12, 4, 0.9)),
		# Dense sixteenths.
		_slots((0, 2, 1.0), (2, 1, 0.6), (3, 1, 0.55), (4, 2, 0.85), (8, 2, 0.9), (10, 1, 0.6), (11, 1, 0.55), (12, 4, 0.9)),
	),
	"jazz": (
		# Long-short pairs.
		_slots((0, 3, 0.9), (3, 1, 0.6), (4, 3, 0.85), (7, 1, 0.55), (8, 3, 0.9), (11, 1, 0.55), (12, 4, 0.8)),
		# Bebop run into the downbeats.
		_slots((0, 1, 0.8), (1, 1, 0.55), (2, 1, 0.55), (3, 1, 0.55), (4, 2, 0.85), (6, 2, 0.65), (8, 2, 0.9), (10, 2, 0.65), (12, 4, 0.85)),
	),
}


def available_genres () -> typing.List[str]:

	"""Return the genre names accepted by `MelodyParams.genre`."""

	return sorted(RHYTHM_PATTERNS)


@dataclasses.dataclass(frozen=True)
class PreferredScale:

	"""A scale chosen up front instead of inferred from the chords.

	Either a tonic plus a registered mode, or a custom list of note names
	whose first entry is the tonic.

	Example:
		```python
		PreferredScale(root="A", mode="dorian")
		PreferredScale(notes=("D", "E", "F", "A", "Bb"))
		```
	"""

	root: str = "C"
	mode: str = "ionian"
	notes: typing.Tuple[str, ...] = ()


	def __post_init__ (self) -> None:

		# Resolving validates the root, the mode and any custom notes.
		self.resolve()


	def resolve (self) -> "KeyContext":

		"""Return the key context this scale describes."""

		if self.notes:
			pcs: typing.List[int] = []

			for name in self.notes:
				pc = groovix.pitches.note_name_to_pc(name)
				if pc not in pcs:
					pcs.append(pc)

			return KeyContext(tonic_pc=pcs[0], mode="custom", scale_pcs=tuple(pcs))

		tonic_pc = groovix.pitches.note_name_to_pc(self.root)

		return KeyContext(
			tonic_pc = tonic_pc,
			mode = groovix.intervals.get_scale(self.mode).name,
			scale_pcs = tuple(groovix.intervals.scale_pitch_classes(tonic_pc, self.mode))
		)


@dataclasses.dataclass(frozen=True)
class KeyContext:

	"""
	The tonic, mode and scale a melody is written in.
	"""

	tonic_pc: int
	mode: str
	scale_pcs: typing.Tuple[int, ...]


	@property
	def scale_set (self) -> typing.FrozenSet[int]:

		return frozenset(self.scale_pcs)


	def snap (self, pitch: int) -> int:

		"""Snap a pitch or pitch class onto the scale."""

		return groovix.intervals.nearest_in_scale(pitch, self.scale_set)


def _unit (name: str, value: float) -> None:

	if not 0.0 <= value <= 1.0:
		raise ValueError(f"{name} must be between 0.0 and 1.0, got {value}")


@dataclasses.dataclass(frozen=True)
class MelodyParams:

	"""All tunable knobs of the melody generator.

	Probabilities and biases are 0.0-1.0. Velocities are on a 0.0-1.0 scale
	and converted to MIDI velocities when notes are emitted. Use
	`dataclasses.replace` to derive variants; instances are never mutated.
	"""

	genre: str = "pop"
	bars_per_phrase: int = 4
	start_bar: int = 0
	beats_per_bar: int = 4

	preferred_octave: int = 4
	range_semitones: int = 12
	preferred_scale: typing.Optional[PreferredScale] = None
	scale_mode: str = AUTO_MODE

	avoid_out_of_scale_chord_tones: bool = True
	allow_chromatic_passing: bool = False
	chromatic_passing_chance: float = 0.08
	target_chord_tones_bias: float = 0.72

	approach_note_chance: float = 0.25
	stepwise_bias: float = 0.70
	max_leap_semitones: int = 9
	motif_reuse_chance: float = 0.55

	question_cadence_bias: float = 0.35
	answer_cadence_bias: float = 0.85
	answer_variation: float = 0.30

	density: float = 0.65
	syncopation: float = 0.35
	rest_chance: float = 0.18
	use_triplets_chance: float = 0.08
	legato_chance: float = 0.35

	velocity_humanize: float = 0.12
	base_velocity: float = 0.82

	seed: typing.Optional[int] = None
	randomness: float = 0.35


	def __post_init__ (self) -> None:

		if self.genre not in RHYTHM_PATTERNS:
			raise ValueError(f"Unknown genre '{self.genre}'. Available: {available_genres()}")

		if self.bars_per_phrase < 1:
			raise ValueError("Bars per phrase must be at least 1")

		if self.beats_per_bar < 1:
			raise ValueError("Beats per bar must be at least 1")

		if self.start_bar < 0:
			raise ValueError("Start bar cannot be negative")

		if self.range_semitones < 0:
			raise ValueError("Range cannot be negative")

		if self.max_leap_semitones < 1:
			raise ValueError("Max leap must be at least one semitone")

		if self.scale_mode.lower() != AUTO_MODE:
			groovix.intervals.get_scale(self.scale_mode)

		for field in (
			"chromatic_passing_chance", "target_chord_tones_bias", "approach_note_chance",
			"stepwise_bias", "motif_reuse_chance", "question_cadence_bias", "answer_cadence_bias",
			"answer_variation", "density", "syncopation", "rest_chance", "use_triplets_chance",
			"legato_chance", "velocity_humanize", "base_velocity", "randomness",
		):
			_unit(field, getattr(self, field))


	@property
	def steps_per_bar (self) -> int:

		return self.beats_per_bar * groovix.constants.durations.STEPS_PER_BEAT


def phrase_role (index: int) -> str:

	"""Phrases alternate question, answer, question, ... starting at index 0."""

	return QUESTION if index % 2 == 0 else ANSWER


def expand_progression (
	progression: typing.Iterable[groovix.progression.ProgressionLike]
) -> typing.List[typing.Optional[groovix.chords.ChordSymbol]]:

	"""Return one parsed chord per bar (``None`` where a symbol cannot be read)."""

	bars: typing.List[typing.Optional[groovix.chords.ChordSymbol]] = []

	for entry in groovix.progression.coerce_progression(progression):

		parsed = groovix.chords.parse_chord_symbol(entry.chord)

		if parsed is None:
			logger.warning(f"Could not read chord {entry.chord!r}; using C major for its bars")

		bars.extend([parsed] * entry.bars)

	return bars


def derive_key_context (
	chords: typing.Sequence[typing.Optional[groovix.chords.ChordSymbol]],
	params: MelodyParams
) -> KeyContext:

	"""Decide the tonic, mode and scale for a melody.

	Order of precedence: ``params.preferred_scale``, then ``params.scale_mode``
	applied to the first chord's root, then inference from the first chord
	(minor → aeolian, dominant seventh → mixolydian, otherwise ionian). A
	missing or unreadable first chord counts as C major.

	Example:
		```python
		chords = expand_progression(["Am", "F", "C", "G"])
		derive_key_context(chords, MelodyParams()).mode  # → "aeolian"
		```
	"""

	if params.preferred_scale is not None:
		return params.preferred_scale.resolve()

	first = chords[0] if chords and chords[0] is not None else FALLBACK_CHORD
	tonic_pc = first.root_pc

	if params.scale_mode.lower() != AUTO_MODE:
		mode = groovix.intervals.get_scale(params.scale_mode).name

	elif first.quality == "minor":
		mode = "aeolian"

	elif first.seventh == "dominant7":
		mode = "mixolydian"

	else:
		mode = "ionian"

	return KeyContext(
		tonic_pc = tonic_pc,
		mode = mode,
		scale_pcs = tuple(groovix.intervals.scale_pitch_classes(tonic_pc, mode))
	)


def to_midi_velocity (value: float) -> int:

	"""Convert a 0.0-1.0 velocity to MIDI 1-127."""

	return groovix.sequence_utils.clamp(int(round(value * groovix.constants.velocity.MAX_VELOCITY)), 1, groovix.constants.velocity.MAX_VELOCITY)


class MelodyGenerator:

	"""Builds one melody for one progression.

	An instance carries the random generator and key context for a single
	`generate()` call; make a new one for each melody.
	"""

	def __init__ (
		self,
		progression: typing.Iterable[groovix.progression.ProgressionLike],
		params: typing.Optional[MelodyParams] = None,
		rng: typing.Optional[random.Random] = None
	) -> None:

		"""
		Parameters:
			progression: Chord symbols with bar counts (see `groovix.progression`).
			params: Generator settings; defaults to `MelodyParams()`.
			rng: Random source. Defaults to one seeded from ``params.seed``.
		"""

		self.params = params if params is not None else MelodyParams()
		self.rng = rng if rng is not None else groovix.sequence_utils.make_rng(self.params.seed)
		self.chords = expand_progression(progression)
		self.key = derive_key_context(self.chords, self.params)
		self.steps_per_bar = self.params.steps_per_bar

		# Register centre: the tonic in the preferred octave.
		self.centre = groovix.pitches.absolute_pitch(self.key.tonic_pc, self.params.preferred_octave)


	def _chance (self, probability: float) -> bool:

		return groovix.sequence_utils.chance(probability, self.rng)


	def _is_strong (self, step: int) -> bool:

		return step % groovix.constants.durations.STEPS_PER_BEAT == 0


	def _choose_target_pc (self, chord: groovix.chords.ChordSymbol, step: int, role: str) -> int:

		"""Pick the pitch class a slot aims for."""

		p = self.params
		chord_pcs = chord.pitch_classes()
		in_scale = [pc for pc in chord_pcs if pc in self.key.scale_set]
		strong = self._is_strong(step)

		bias = p.target_chord_tones_bias if strong else p.target_chord_tones_bias * 0.55
		want_chord_tone = self._chance(bias)

		cadence_bias = p.question_cadence_bias if role == QUESTION else p.answer_cadence_bias
		at_cadence = step >= self.steps_per_bar - groovix.constants.durations.STEPS_PER_BEAT

		if at_cadence and self._chance(cadence_bias):
			cadence_pc = groovix.sequence_utils.weighted_choice([(chord.root_pc, 0.65), (self.key.tonic_pc, 0.35)], self.rng)
			return self.key.snap(cadence_pc) % 12

		if want_chord_tone:

			# Strong beats never take an out-of-scale chord tone.
			if p.avoid_out_of_scale_chord_tones and strong:
				if in_scale:
					return self.rng.choice(in_scale)
				return self.key.snap(chord.root_pc) % 12

			if p.allow_chromatic_passing and not strong and self._chance(p.chromatic_passing_chance * (0.5 + p.randomness)):
				return self.rng.choice(chord_pcs)

			return self.key.snap(self.rng.choice(chord_pcs)) % 12

		options = [
			(pc, COLOUR_WEIGHT if (pc - self.key.tonic_pc) % 12 in COLOUR_DEGREES else 1.0)
			for pc in self.key.scale_pcs
		]

		return groovix.sequence_utils.weighted_choice(options, self.rng)


	def _nearest_octave (self, pc: int, last_pitch: typing.Optional[int]) -> int:

		"""Place a pitch class in the octave closest to the previous note."""

		centre = groovix.pitches.absolute_pitch(pc, self.params.preferred_octave)

		if last_pitch is None:
			return centre

		candidates = [centre - 12, centre, centre + 12, centre + 24, centre - 24]

		return min(candidates, key=lambda pitch: abs(pitch - last_pitch))


	def _place (self, pitch: int) -> int:

		"""Clamp to the register around the tonic, then snap to the scale."""

		low = self.centre - self.params.range_semitones
		high = self.centre + self.params.range_semitones
		pitch = groovix.sequence_utils.clamp(pitch, low, high)

		return groovix.sequence_utils.clamp(self.key.snap(pitch), 0, 127)


	def _choose_next_pitch (self, last_pitch: typing.Optional[int], target_pc: int) -> int:

		"""Turn a target pitch class into an absolute pitch that follows the line."""

		p = self.params
		centre = self._nearest_octave(target_pc, last_pitch)

		if last_pitch is None:
			return self._place(centre)

		distance = centre - last_pitch
		prefer_step = self._chance(p.stepwise_bias)
		pitch = centre

		# The nearest octave is already the smallest move; only the leap branch changes it.
		if not prefer_step and abs(distance) < 3:
			if self._chance(0.35 + 0.35 * p.randomness):
				pitch = centre + (7 if self._chance(0.5) else -7)

		leap = pitch - last_pitch

		if abs(leap) > p.max_leap_semitones:
			pitch = last_pitch + (p.max_leap_semitones if leap > 0 else -p.max_leap_semitones)

		return self._place(pitch)


	def _approach_pitch (self, last_pitch: typing.Optional[int], target_pitch: int) -> typing.Optional[int]:

		"""A neighbour note leading into the target, or ``None``."""

		if last_pitch is None:
			return None

		if not self._chance(self.params.approach_note_chance):
			return None

		approach = target_pitch - 1 if target_pitch >= last_pitch else target_pitch + 1

		return groovix.sequence_utils.clamp(self.key.snap(approach), 0, 127)


	def _velocity (self, accent: float) -> float:

		p = self.params
		value = p.base_velocity * (0.75 + 0.5 * accent) + (self.rng.random() * 2 - 1) * p.velocity_humanize

		return groovix.sequence_utils.clamp(value, 0.2, 1.0)


	def build_phrase (
		self,
		bar_start: int,
		bar_count: int,
		role: str,
		motif: typing.Optional[groovix.motif.Motif] = None
	) -> typing.Tuple[typing.List[groovix.events.NoteEvent], groovix.motif.Motif]:

		"""Write ``bar_count`` bars starting at bar ``bar_start``.

		Returns the phrase's notes and its motif. A question phrase records
		each freshly chosen target in the motif; an answer only replays it.
		"""

		p = self.params
		notes: typing.List[groovix.events.NoteEvent] = []
		phrase_motif = motif.copy() if motif is not None else groovix.motif.Motif()
		patterns = RHYTHM_PATTERNS[p.genre]
		last_pitch: typing.Optional[int] = None

		for b in range(bar_count):

			bar_index = bar_start + b
			chord = self.chords[bar_index] or FALLBACK_CHORD
			bar_tick = (p.start_bar + bar_index) * self.steps_per_bar

			pattern = self.rng.choice(patterns)

			if self._chance(p.syncopation):
				slots = list(pattern)
			else:
				slots = [slot for slot in pattern if slot.step % 2 == 0]

			slots = [slot for slot in slots if slot.step < self.steps_per_bar]
			reuse_motif = bool(phrase_motif) and self._chance(p.motif_reuse_chance)

			for i, slot in enumerate(slots):

				if self.rng.random() > p.density:
					continue

				if self.rng.random() < p.rest_chance:
					continue

				recalled = phrase_motif.recall(i) if reuse_motif else None

				if recalled is not None:
					if role == ANSWER and self._chance(p.answer_variation):
						target_pc = phrase_motif.varied(recalled, self.key.scale_set, self.rng)
					else:
						target_pc = recalled

				else:
					target_pc = self._choose_target_pc(chord, slot.step, role)
					if role == QUESTION:
						phrase_motif.capture(i, target_pc)

				pitch = self._choose_next_pitch(last_pitch, target_pc)
				approach = self._approach_pitch(last_pitch, pitch)

				length = slot.duration

				if self._chance(p.legato_chance):
					length = groovix.sequence_utils.clamp(length + self.rng.choice([1, 2]), 1, MAX_LEGATO_LENGTH)

				velocity = self._velocity(slot.accent)

				if approach is not None and slot.step > 0 and self._chance(0.55 + 0.25 * p.randomness):
					notes.append(groovix.events.NoteEvent(
						pitch = approach,
						start_tick = bar_tick + slot.step - 1,
						length_ticks = 1,
						velocity = to_midi_velocity(groovix.sequence_utils.clamp(velocity * 0.78, 0.2, 1.0))
					))

				notes.append(groovix.events.NoteEvent(
					pitch = pitch,
					start_tick = bar_tick + slot.step,
					length_ticks = length,
					velocity = to_midi_velocity(velocity)
				))

				last_pitch = pitch

				if self._chance(p.use_triplets_chance * p.randomness) and slot.step <= self.steps_per_bar - 4:

					for fill_step in (slot.step + 1, slot.step + 2):

						if fill_step >= self.steps_per_bar or self._chance(0.55):
							continue

						fill_pc = self.key.snap(target_pc + self.rng.choice([-2, -1, 1, 2])) % 12
						fill_pitch = self._choose_next_pitch(last_pitch, fill_pc)

						notes.append(groovix.events.NoteEvent(
							pitch = fill_pitch,
							start_tick = bar_tick + fill_step,
							length_ticks = 1,
							velocity = to_midi_velocity(groovix.sequence_utils.clamp(velocity * 0.7, 0.2, 1.0))
						))

						last_pitch = fill_pitch

		return notes, phrase_motif


	def generate (self) -> typing.List[groovix.events.NoteEvent]:

		"""Write the whole melody: alternating phrases, sorted, one note per tick."""

		total_bars = len(self.chords)
		notes: typing.List[groovix.events.NoteEvent] = []
		motif: typing.Optional[groovix.motif.Motif] = None
		cursor = 0
		index = 0

		while cursor < total_bars:

			bar_count = min(self.params.bars_per_phrase, total_bars - cursor)
			phrase_notes, motif = self.build_phrase(cursor, bar_count, phrase_role(index), motif)
			notes.extend(phrase_notes)

			cursor += bar_count
			index += 1

		return dedupe_collisions(notes)


def dedupe_collisions (notes: typing.Iterable[groovix.events.NoteEvent]) -> typing.List[groovix.events.NoteEvent]:

	"""Sort by start tick and keep only the loudest note on each tick.

	On equal velocity the earlier-written note wins.
	"""

	kept: typing.Dict[int, groovix.events.NoteEvent] = {}

	for note in sorted(notes, key=lambda n: n.start_tick):

		current = kept.get(note.start_tick)

		if current is None or note.velocity > current.velocity:
			kept[note.start_tick] = note

	return [kept[tick] for tick in sorted(kept)]


def generate_melody (
	progression: typing.Iterable[groovix.progression.ProgressionLike],
	params: typing.Optional[MelodyParams] = None,
	rng: typing.Optional[random.Random] = None
) -> typing.List[groovix.events.NoteEvent]:

	"""Generate a melody over a chord progression.

	Parameters:
		progression: Chord symbols, ``(symbol, bars)`` pairs or `ProgressionEntry` items.
		params: Generator settings. ``params.seed`` makes the result repeatable.
		rng: Optional explicit random source, overriding ``params.seed``.

	Returns:
		Note events sorted by start tick, at most one per tick. An empty
		progression gives an empty list.

	Example:
		```python
		melody = generate_melody([("Am", 2), ("F", 1), ("G", 1)], MelodyParams(seed=3, genre="edm"))
		```
	"""

	return MelodyGenerator(progression, params, rng).generate()
