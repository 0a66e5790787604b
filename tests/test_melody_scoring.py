import dataclasses
import random

import pytest

import groovix.events
import groovix.melody
import groovix.melody_scoring


def _line (*pitches: int, step: int = 4) -> list:

	return [groovix.events.NoteEvent(pitch, i * step, 1) for i, pitch in enumerate(pitches)]


def test_too_few_notes_is_degenerate ():

	assert groovix.melody_scoring.score_melody(_line(60, 64, 67), ["C"]) == groovix.melody_scoring.DEGENERATE_SCORE
	assert groovix.melody_scoring.score_melody([], ["C"]) == groovix.melody_scoring.DEGENERATE_SCORE


def test_arpeggio_over_its_chord ():

	"""Four strong-beat chord tones (+8.8), question ending on the tonic (-0.6), even gaps (+1.1)."""

	assert groovix.melody_scoring.score_melody(_line(60, 64, 67, 72), ["C"]) == pytest.approx(9.3)


def test_out_of_scale_note_costs ():

	good = groovix.melody_scoring.score_melody(_line(60, 64, 67, 72), ["C"])
	bad = groovix.melody_scoring.score_melody(_line(60, 63, 67, 72), ["C"])

	assert good - bad == pytest.approx(6.0 + 2.2)


def test_leaps_and_direction_changes ():

	assert groovix.melody_scoring.score_melody(_line(60, 72, 60, 72), ["C"]) == pytest.approx(8.8 - 3 * 1.8 - 2 * 1.1 - 0.6 + 1.1)


def test_wide_range ():

	assert groovix.melody_scoring.score_melody(_line(48, 52, 55, 72), ["C"]) == pytest.approx(8.8 - 8.0 - 1.8 - 0.6 + 1.1)


def test_custom_weights ():

	weights = groovix.melody_scoring.ScoreWeights(chord_tone_strong=0.0, rhythm_motif_bonus=0.0)

	assert groovix.melody_scoring.score_melody(_line(60, 64, 67, 72), ["C"], weights=weights) == pytest.approx(-0.6)


def test_score_order_independent ():

	line = _line(60, 64, 67, 72)

	assert groovix.melody_scoring.score_melody(list(reversed(line)), ["C"]) == groovix.melody_scoring.score_melody(line, ["C"])


def test_candidate_seeds ():

	assert groovix.melody_scoring.candidate_seeds(10, 3) == [10, 9983, 19956]
	assert groovix.melody_scoring.candidate_seeds(None, 2) == [None, None]


def test_generate_candidates_are_reproducible (progression) -> None:

	params = groovix.melody.MelodyParams(seed=1)
	candidates = groovix.melody_scoring.generate_candidates(progression, params, count=4)

	assert [c.seed for c in candidates] == [1, 9974, 19947, 29920]

	for candidate in candidates:
		expected = groovix.melody.generate_melody(progression, dataclasses.replace(params, seed=candidate.seed))
		assert candidate.events == tuple(expected)


def test_workers_give_the_same_result (progression) -> None:

	params = groovix.melody.MelodyParams(seed=7)

	serial = groovix.melody_scoring.generate_candidates(progression, params, count=6)
	threaded = groovix.melody_scoring.generate_candidates(progression, params, count=6, workers=3)

	assert serial == threaded


def test_best_melody_with_keep_top_one (progression) -> None:

	params = groovix.melody.MelodyParams(seed=3)
	candidates = groovix.melody_scoring.generate_candidates(progression, params, count=8)
	best = groovix.melody_scoring.generate_best_melody(progression, params, count=8, keep_top=1)

	assert best.score == max(c.score for c in candidates)


def test_best_melody_comes_from_the_shortlist (progression) -> None:

	params = groovix.melody.MelodyParams(seed=3)
	ranked = sorted((c.score for c in groovix.melody_scoring.generate_candidates(progression, params, count=8)), reverse=True)

	for i in range(5):
		pick = groovix.melody_scoring.generate_best_melody(progression, params, count=8, keep_top=3, rng=random.Random(i))
		assert pick.score >= ranked[2]


def test_unseeded_search_still_works (progression) -> None:

	best = groovix.melody_scoring.generate_best_melody(progression, count=3)

	assert best.seed is None
	assert isinstance(best.score, float)


def test_candidate_count_must_be_positive (progression) -> None:

	with pytest.raises(ValueError):
		groovix.melody_scoring.generate_candidates(progression, count=0)
