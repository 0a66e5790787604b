import pytest

import groovix.progression


def test_one_bar_each_by_default ():

	entries = groovix.progression.parse_progression("Cmaj7 Am7 Dm7 G7")

	assert [(e.chord, e.bars) for e in entries] == [("Cmaj7", 1), ("Am7", 1), ("Dm7", 1), ("G7", 1)]


def test_numbers_set_length_in_beats ():

	entries = groovix.progression.parse_progression("8 Cmaj7 Am7 4 G7")

	assert [(e.chord, e.bars) for e in entries] == [("Cmaj7", 2), ("Am7", 2), ("G7", 1)]


def test_short_lengths_round_up_to_one_bar ():

	assert groovix.progression.parse_progression("2 C")[0].bars == 1


def test_other_bar_sizes ():

	assert groovix.progression.parse_progression("6 C", beats_per_bar=3)[0].bars == 2


def test_explicit_bar_counts ():

	entries = groovix.progression.parse_progression("Cmaj7:2 G7")

	assert [(e.chord, e.bars) for e in entries] == [("Cmaj7", 2), ("G7", 1)]


def test_bad_bar_count_raises ():

	with pytest.raises(ValueError):
		groovix.progression.parse_progression("C:0")

	with pytest.raises(ValueError):
		groovix.progression.parse_progression("C:x")


def test_entry_needs_a_bar ():

	with pytest.raises(ValueError):
		groovix.progression.ProgressionEntry("C", bars=0)


def test_coerce_entry ():

	assert groovix.progression.coerce_entry("Am") == groovix.progression.ProgressionEntry("Am", 1)
	assert groovix.progression.coerce_entry(("Am", 2)) == groovix.progression.ProgressionEntry("Am", 2)
	assert groovix.progression.coerce_entry({"chord": "F", "bars": 3}) == groovix.progression.ProgressionEntry("F", 3)

	with pytest.raises(ValueError):
		groovix.progression.coerce_entry(42)


def test_chord_events ():

	events = groovix.progression.chord_events([("Cmaj7", 1), ("G7", 2)], octave=4)

	first = [e for e in events if e.start_tick == 0]
	second = [e for e in events if e.start_tick == 16]

	assert [e.pitch for e in first] == [60, 64, 67, 71]
	assert {e.length_ticks for e in first} == {16}
	assert [e.pitch for e in second] == [67, 71, 74, 77]
	assert {e.length_ticks for e in second} == {32}


def test_chord_events_skip_unknown_chords ():

	events = groovix.progression.chord_events(["Xmaj", "C"], octave=4)

	assert {e.start_tick for e in events} == {16}


def test_chord_events_read_lenient_symbols ():

	events = groovix.progression.chord_events(["Am", "F", "Cdom7"], octave=3)

	assert [e.pitch for e in events if e.start_tick == 0] == [57, 60, 64]
	assert [e.pitch for e in events if e.start_tick == 16] == [53, 57, 60]
	assert [e.pitch for e in events if e.start_tick == 32] == [48, 52, 55, 58]
