import itertools

import pytest

import groovix.arpeggio


def test_three_note_permutations ():

	patterns = groovix.arpeggio.generate(3)

	assert len(patterns.straight) == 6
	assert patterns.straight[0] == (0, 1, 2)
	assert all(len(p) == 4 for p in patterns.looped)
	assert patterns.looped[0] == (0, 1, 2, 1)


def test_enumeration_order_is_lexicographic ():

	for n in (3, 4):
		assert list(groovix.arpeggio.generate(n).straight) == list(itertools.permutations(range(n)))


def test_four_note_sizes ():

	patterns = groovix.arpeggio.generate(4)

	assert len(patterns.straight) == 24
	assert patterns.looped[0] == (0, 1, 2, 3, 2, 1)
	assert {len(p) for p in patterns.looped} == {6}


def test_small_sizes ():

	assert groovix.arpeggio.generate(1).straight == ((0,),)
	assert groovix.arpeggio.generate(1).looped == ((0,),)
	assert groovix.arpeggio.generate(2).looped == ((0, 1), (1, 0))


def test_results_are_cached ():

	assert groovix.arpeggio.generate(3) is groovix.arpeggio.generate(3)


def test_cache_is_bounded ():

	assert groovix.arpeggio.generate.cache_info().maxsize is not None

	for n in range(1, 7):
		groovix.arpeggio.generate(n)

	assert groovix.arpeggio.generate.cache_info().currsize <= groovix.arpeggio.generate.cache_info().maxsize


def test_non_positive_size_raises ():

	with pytest.raises(ValueError):
		groovix.arpeggio.generate(0)


def test_parse_pattern ():

	assert groovix.arpeggio.parse_pattern("0 2 1 3") == (0, 2, 1, 3)

	with pytest.raises(ValueError):
		groovix.arpeggio.parse_pattern("0 x")

	with pytest.raises(ValueError):
		groovix.arpeggio.parse_pattern("0 -1")


def test_arpeggiate_with_pattern ():

	"""I then V in C: block chords in octave 4, the arpeggio in octave 5."""

	events = groovix.arpeggio.arpeggiate([0, 4], key="C", pattern=(0, 1, 2, 1))

	arp = [e.pitch for e in events if e.length_ticks == 1]
	chords = sorted(e.pitch for e in events if e.length_ticks == 4)

	assert arp == [72, 76, 79, 76, 79, 83, 86, 83]
	assert chords == [60, 64, 67, 67, 71, 74]
	assert len(events) == 14


def test_arpeggiate_high_indices_wrap_up_an_octave ():

	events = groovix.arpeggio.arpeggiate([0], pattern=(3,), include_chords=False)

	assert [e.pitch for e in events] == [84]


def test_arpeggiate_block_chords_only ():

	events = groovix.arpeggio.arpeggiate([0, 1], chord_length=4)

	assert [(e.start_tick, e.pitch) for e in events] == [(0, 60), (0, 64), (0, 67), (4, 62), (4, 65), (4, 69)]


def test_arpeggiate_repeat_and_step_length ():

	events = groovix.arpeggio.arpeggiate([0, 0], pattern=(0, 1), repeat=2, step_length=2, include_chords=False)

	assert [e.start_tick for e in events] == [0, 2, 4, 6, 8, 10, 12, 14]
	assert {e.length_ticks for e in events} == {2}


def test_arpeggiate_out_of_range_octave_raises ():

	with pytest.raises(ValueError):
		groovix.arpeggio.arpeggiate([0], pattern=(0, 1, 2), arp_octave=10, include_chords=False)
