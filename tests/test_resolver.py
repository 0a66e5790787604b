import pytest

import groovix.constants.velocity
import groovix.resolver


@pytest.mark.parametrize("operator, operand, expected", [
	("*", 2, 8),
	("/", 2, 2),
	("/", 1, 4),
	("+", 1, 5),
	("-", 1, 3),
	("-", 9, 1),
	("/", 8, 1),
	("", 0, 4),
])
def test_apply_length_operator (operator: str, operand: int, expected: int) -> None:

	assert groovix.resolver.apply_length_operator(4, operator, operand) == expected


def test_rest_advances_without_events ():

	"""CEG then a four-times rest: the next note lands 4 + 16 ticks in."""

	result = groovix.resolver.resolve_note_line(["CEG", "Z*4", "C"], default_octave=4, default_length=4)

	assert len(result.events) == 4
	assert result.events[-1].start_tick == 20
	assert result.end_tick == 24


def test_grouped_notes_advance_by_longest ():

	events, failures, advance = groovix.resolver.resolve_note_token("C*2E/2G", 0, 4, 4)

	assert [e.length_ticks for e in events] == [8, 2, 4]
	assert {e.start_tick for e in events} == {0}
	assert failures == []
	assert advance == 8


def test_note_octave_digit_and_accidentals ():

	result = groovix.resolver.resolve_note_line(["C5", "C#", "Db", "B3", "E♭"], default_octave=4, default_length=1)

	assert [e.pitch for e in result.events] == [72, 61, 61, 59, 63]


def test_multi_digit_operand ():

	result = groovix.resolver.resolve_note_line(["C*12", "D"], default_octave=4, default_length=1)

	assert result.events[0].length_ticks == 12
	assert result.events[1].start_tick == 12


def test_commas_are_ignored ():

	result = groovix.resolver.resolve_note_line(["C,E", "G,"], default_octave=4, default_length=2)

	assert [(e.pitch, e.start_tick) for e in result.events] == [(60, 0), (64, 0), (67, 2)]
	assert result.failures == []


def test_unknown_characters_become_failures ():

	result = groovix.resolver.resolve_note_line(["CQ", "D"], default_octave=4, default_length=2)

	assert [e.pitch for e in result.events] == [60, 62]
	assert len(result.failures) == 1
	assert result.failures[0].text == "Q"
	assert result.failures[0].token_index == 0


def test_failed_token_keeps_its_slot ():

	result = groovix.resolver.resolve_note_line(["Q", "C"], default_octave=4, default_length=4)

	assert result.events[0].start_tick == 4


def test_operator_without_number_is_a_failure ():

	result = groovix.resolver.resolve_note_line(["C*"], default_octave=4, default_length=4)

	assert len(result.events) == 1
	assert result.events[0].length_ticks == 4
	assert len(result.failures) == 1


def test_out_of_range_pitch_is_a_failure ():

	result = groovix.resolver.resolve_note_line(["G", "A"], default_octave=9, default_length=1)

	assert [e.pitch for e in result.events] == [127]
	assert len(result.failures) == 1
	assert result.end_tick == 2


def test_note_velocity ():

	result = groovix.resolver.resolve_note_line(["C"], default_octave=4)

	assert result.events[0].velocity == groovix.constants.velocity.DEFAULT_VELOCITY


def test_empty_line ():

	result = groovix.resolver.resolve_note_line([])

	assert result.events == []
	assert result.failures == []
	assert result.end_tick == 0


def test_chord_line_failure_keeps_timing ():

	"""An unknown root is reported but the next chord stays in place."""

	result = groovix.resolver.resolve_chord_line(["Cmaj7", "Xmaj", "G7*2"], default_octave=4, default_length=4)

	assert len(result.failures) == 1
	assert result.events[-1].start_tick == 8
	assert [e.pitch for e in result.events if e.start_tick == 8] == [67, 71, 74, 77]
	assert result.end_tick == 16


def test_chord_line_lengths_and_velocity ():

	result = groovix.resolver.resolve_chord_line(["Cmaj*2", "Amin/2"], default_octave=4, default_length=4)

	assert {e.length_ticks for e in result.events if e.start_tick == 0} == {8}
	assert {e.length_ticks for e in result.events if e.start_tick == 8} == {2}
	assert {e.velocity for e in result.events} == {groovix.constants.velocity.DEFAULT_CHORD_VELOCITY}


def test_chord_line_trailing_comma ():

	result = groovix.resolver.resolve_chord_line(["Cmaj,", "Dmin"], default_octave=4, default_length=4)

	assert result.failures == []
	assert len(result.events) == 6


def test_chord_line_rest ():

	result = groovix.resolver.resolve_chord_line(["Z*2", "Cmaj"], default_octave=4, default_length=4)

	assert [e.start_tick for e in result.events] == [8, 8, 8]


def test_chord_line_bad_operand_keeps_default_length ():

	result = groovix.resolver.resolve_chord_line(["Cmaj*x", "Dmin"], default_octave=4, default_length=4)

	assert len(result.failures) == 1
	assert {e.start_tick for e in result.events} == {4}
