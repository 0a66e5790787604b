"""Score generated melodies and search for a good one.

`score_melody()` rates a finished melody against its progression with a
weighted rubric. Higher is better; nothing here raises on odd input, and a
melody too short to judge scores `DEGENERATE_SCORE`.

`generate_best_melody()` generates a batch of candidates with different
seeds, sorts them by score and picks one of the best few, so repeated calls
can still vary while staying good.
"""

import collections
import concurrent.futures
import dataclasses
import logging
import random
import typing

import groovix.constants.durations
import groovix.events
import groovix.melody
import groovix.progression
import groovix.sequence_utils


logger = logging.getLogger(__name__)


DEGENERATE_SCORE = -9999.0
MIN_SCORED_NOTES = 4

# Seeds of successive candidates are spaced by a prime.
SEED_STRIDE = 9973

LEAP_SEMITONES = 7
COMFORTABLE_RANGE = 16
MAX_BIGRAM_INTERVAL = 12

ANSWER_OFF_TONIC_PENALTY = 0.8
QUESTION_ON_TONIC_PENALTY = 0.6


@dataclasses.dataclass(frozen=True)
class ScoreWeights:

	"""
	Relative weights of each part of the melody rubric.
	"""

	chord_tone_strong: float = 2.2
	scale_penalty: float = 6.0
	too_many_leaps_penalty: float = 1.8
	direction_jitter_penalty: float = 1.1
	motif_reuse_bonus: float = 1.6
	cadence_answer_bonus: float = 2.0
	cadence_question_bonus: float = 1.0
	rhythm_motif_bonus: float = 1.1
	range_penalty: float = 1.0


@dataclasses.dataclass(frozen=True)
class CandidateMelody:

	"""
	One generated melody with its score and the seed that produced it.
	"""

	events: typing.Tuple[groovix.events.NoteEvent, ...]
	score: float
	seed: typing.Optional[int]


def _sign (value: int) -> int:

	return (value > 0) - (value < 0)


def _interval_score (pitches: typing.Sequence[int], weights: ScoreWeights) -> float:

	"""Penalise big leaps and changes of direction; reward repeated interval pairs."""

	score = 0.0
	leaps = 0
	jitter = 0
	previous_direction = 0

	for a, b in zip(pitches, pitches[1:]):

		step = b - a

		if abs(step) >= LEAP_SEMITONES:
			leaps += 1

		direction = _sign(step)

		if previous_direction and direction and direction != previous_direction:
			jitter += 1

		if direction:
			previous_direction = direction

	score -= leaps * weights.too_many_leaps_penalty
	score -= jitter * weights.direction_jitter_penalty

	bigrams: typing.Counter[typing.Tuple[typing.Tuple[int, int], typing.Tuple[int, int]]] = collections.Counter()

	for a, b, c in zip(pitches, pitches[1:], pitches[2:]):
		first = b - a
		second = c - b
		bigrams[((_sign(first), min(MAX_BIGRAM_INTERVAL, abs(first))), (_sign(second), min(MAX_BIGRAM_INTERVAL, abs(second))))] += 1

	repeats = sum(count - 1 for count in bigrams.values() if count >= 2)
	score += repeats * weights.motif_reuse_bonus

	return score


def score_melody (
	events: typing.Sequence[groovix.events.NoteEvent],
	progression: typing.Iterable[groovix.progression.ProgressionLike],
	params: typing.Optional[groovix.melody.MelodyParams] = None,
	weights: typing.Optional[ScoreWeights] = None
) -> float:

	"""Rate a melody against its progression.

	The rubric rewards chord tones on strong beats, repeated interval shapes,
	repeated rhythmic gaps, question phrases that end away from the tonic and
	answer phrases that end on it. It penalises notes outside the scale, a
	range wider than 16 semitones, leaps of a fifth or more and frequent
	changes of direction.

	Parameters:
		events: The melody, in any order.
		progression: The progression it was written over.
		params: The generator settings used (key context, phrase length, bar size).
		weights: Rubric weights; defaults to `ScoreWeights()`.

	Returns:
		The score, or `DEGENERATE_SCORE` for fewer than four notes.
	"""

	params = params if params is not None else groovix.melody.MelodyParams()
	weights = weights if weights is not None else ScoreWeights()

	notes = sorted(events, key=lambda e: e.start_tick)

	if len(notes) < MIN_SCORED_NOTES:
		return DEGENERATE_SCORE

	chords = groovix.melody.expand_progression(progression)
	key = groovix.melody.derive_key_context(chords, params)
	steps_per_bar = params.steps_per_bar
	offset = params.start_bar * steps_per_bar

	score = 0.0
	pitches = [note.pitch for note in notes]

	for note in notes:

		if note.pitch % 12 not in key.scale_set:
			score -= weights.scale_penalty

		step = note.start_tick - offset

		if step < 0 or step % groovix.constants.durations.STEPS_PER_BEAT != 0:
			continue

		bar = step // steps_per_bar

		if bar < len(chords) and chords[bar] is not None and note.pitch % 12 in chords[bar].pitch_classes():
			score += weights.chord_tone_strong

	span = max(pitches) - min(pitches)

	if span > COMFORTABLE_RANGE:
		score -= (span - COMFORTABLE_RANGE) * weights.range_penalty

	score += _interval_score(pitches, weights)

	# Cadences: judge the last note of each phrase's final bar.
	total_bars = len(chords)

	for phrase_index, phrase_start in enumerate(range(0, total_bars, params.bars_per_phrase)):

		last_bar = min(total_bars - 1, phrase_start + params.bars_per_phrase - 1)
		bar_start = offset + last_bar * steps_per_bar
		in_bar = [note for note in notes if bar_start <= note.start_tick < bar_start + steps_per_bar]

		if not in_bar:
			continue

		on_tonic = in_bar[-1].pitch % 12 == key.tonic_pc

		if groovix.melody.phrase_role(phrase_index) == groovix.melody.ANSWER:
			score += weights.cadence_answer_bonus if on_tonic else -ANSWER_OFF_TONIC_PENALTY
		else:
			score += weights.cadence_question_bonus if not on_tonic else -QUESTION_ON_TONIC_PENALTY

	gaps = collections.Counter(b.start_tick - a.start_tick for a, b in zip(notes, notes[1:]))
	score += sum(1 for count in gaps.values() if count >= 3) * weights.rhythm_motif_bonus

	return score


def candidate_seeds (base_seed: typing.Optional[int], count: int) -> typing.List[typing.Optional[int]]:

	"""Seeds for ``count`` candidates: ``base + i * 9973``, or all ``None`` when unseeded."""

	if base_seed is None:
		return [None] * count

	return [base_seed + i * SEED_STRIDE for i in range(count)]


def _build_candidate (
	progression: typing.Sequence[groovix.progression.ProgressionEntry],
	params: groovix.melody.MelodyParams,
	weights: ScoreWeights
) -> CandidateMelody:

	events = groovix.melody.generate_melody(progression, params)

	return CandidateMelody(
		events = tuple(events),
		score = score_melody(events, progression, params, weights),
		seed = params.seed
	)


def generate_candidates (
	progression: typing.Iterable[groovix.progression.ProgressionLike],
	params: typing.Optional[groovix.melody.MelodyParams] = None,
	count: int = 24,
	workers: int = 1,
	weights: typing.Optional[ScoreWeights] = None
) -> typing.List[CandidateMelody]:

	"""Generate and score ``count`` melodies, in seed order.

	With ``workers > 1`` candidates are built on a thread pool. Each candidate
	owns its random generator, so the output is the same as a serial run.
	"""

	if count < 1:
		raise ValueError("Candidate count must be at least 1")

	params = params if params is not None else groovix.melody.MelodyParams()
	weights = weights if weights is not None else ScoreWeights()
	entries = groovix.progression.coerce_progression(progression)

	variants = [dataclasses.replace(params, seed=seed) for seed in candidate_seeds(params.seed, count)]

	if workers > 1:
		with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
			return list(executor.map(lambda variant: _build_candidate(entries, variant, weights), variants))

	return [_build_candidate(entries, variant, weights) for variant in variants]


def generate_best_melody (
	progression: typing.Iterable[groovix.progression.ProgressionLike],
	params: typing.Optional[groovix.melody.MelodyParams] = None,
	count: int = 24,
	keep_top: int = 3,
	rng: typing.Optional[random.Random] = None,
	workers: int = 1,
	weights: typing.Optional[ScoreWeights] = None
) -> CandidateMelody:

	"""Generate candidates and return one of the ``keep_top`` highest scoring.

	Parameters:
		progression: Chord symbols with bar counts.
		params: Generator settings. A seed makes the candidate set repeatable.
		count: How many candidates to generate.
		keep_top: Size of the shortlist the final pick comes from (1 = always the best).
		rng: Random source for the final pick; unseeded by default.
		workers: Threads used to build candidates.

	Example:
		```python
		best = generate_best_melody(["Am", "F", "C", "G"], MelodyParams(seed=11), rng=random.Random(0))
		best.score, len(best.events)
		```
	"""

	candidates = generate_candidates(progression, params, count, workers, weights)
	ranked = sorted(candidates, key=lambda candidate: candidate.score, reverse=True)

	shortlist = ranked[:groovix.sequence_utils.clamp(keep_top, 1, len(ranked))]
	pick = (rng if rng is not None else groovix.sequence_utils.make_rng()).choice(shortlist)

	logger.debug(f"Picked candidate seed={pick.seed} score={pick.score:.2f} (best {ranked[0].score:.2f})")

	return pick
