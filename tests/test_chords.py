import pytest

import groovix.chords


def test_major_seventh_pitches ():

	assert groovix.chords.parse_chord_token("Cmaj7", 4).pitches == (60, 64, 67, 71)


def test_dominant_seventh_is_not_an_octave ():

	"""``G7`` is a dominant seventh at the default octave."""

	token = groovix.chords.parse_chord_token("G7", 4)

	assert token.ok
	assert token.pitches == (67, 71, 74, 77)
	assert token.formula == "7"


def test_octave_digit ():

	token = groovix.chords.parse_chord_token("C4maj7", 5)

	assert token.octave == 4
	assert token.pitches == (60, 64, 67, 71)


def test_octave_digit_without_quality_is_major ():

	assert groovix.chords.parse_chord_token("C4", 5).pitches == (60, 64, 67)


def test_eleventh_and_thirteenth ():

	assert groovix.chords.parse_chord_token("C11", 4).pitches == (60, 64, 67, 70, 74, 77)
	assert groovix.chords.parse_chord_token("C13", 4).pitches == (60, 64, 67, 70, 74, 81)


def test_empty_quality_is_major ():

	assert groovix.chords.parse_chord_token("D", 4).pitches == (62, 66, 69)


def test_quality_is_case_insensitive ():

	assert groovix.chords.parse_chord_token("CMaj", 4).pitches == (60, 64, 67)


@pytest.mark.parametrize("quality, intervals", [
	("sus2", (0, 2, 7)),
	("sus4", (0, 5, 7)),
	("min7", (0, 3, 7, 10)),
	("dim7", (0, 3, 6, 9)),
	("m7b5", (0, 3, 6, 10)),
	("maj9", (0, 4, 7, 11, 14)),
	("min9", (0, 3, 7, 10, 14)),
	("min", (0, 3, 7)),
	("dim", (0, 3, 6)),
	("aug", (0, 4, 8)),
	("m7", (0, 3, 7, 10)),
	("9", (0, 4, 7, 10, 14)),
])
def test_formula_table (quality: str, intervals: tuple) -> None:

	token = groovix.chords.parse_chord_token("C" + quality, 4)

	assert token.ok
	assert token.pitches == tuple(60 + i for i in intervals)


def test_first_prefix_wins ():

	assert groovix.chords.find_formula("maj7")[0] == "maj7"
	assert groovix.chords.find_formula("major")[0] == "maj"
	assert groovix.chords.find_formula("m7b5")[0] == "m7b5"
	assert groovix.chords.find_formula("") == ("maj", (0, 4, 7))
	assert groovix.chords.find_formula("xyz") is None


def test_enharmonic_roots ():

	assert groovix.chords.parse_chord_token("C#maj", 4).pitches == groovix.chords.parse_chord_token("Dbmaj", 4).pitches
	assert groovix.chords.parse_chord_token("F♯min", 4).pitches == groovix.chords.parse_chord_token("Gbmin", 4).pitches


def test_length_operator_is_returned ():

	token = groovix.chords.parse_chord_token("Amin7*2", 4)

	assert token.length_operator == "*"
	assert token.length_operand == 2
	assert token.pitches == (69, 72, 76, 79)


def test_unknown_root ():

	token = groovix.chords.parse_chord_token("Xmaj", 4)

	assert not token.ok
	assert token.pitches == ()
	assert "root" in token.error


def test_unknown_quality ():

	token = groovix.chords.parse_chord_token("Cfoo", 4)

	assert not token.ok
	assert "quality" in token.error


def test_non_numeric_operand ():

	token = groovix.chords.parse_chord_token("Cmaj*x", 4)

	assert not token.ok
	assert token.length_operator == ""


def test_rest_token ():

	token = groovix.chords.parse_chord_token("Z/2", 4)

	assert token.ok
	assert token.is_rest
	assert token.pitches == ()
	assert token.length_operator == "/"
	assert token.length_operand == 2


@pytest.mark.parametrize("symbol, root_pc, quality, seventh", [
	("C", 0, "major", "none"),
	("Am", 9, "minor", "none"),
	("Am7", 9, "minor", "dominant7"),
	("Cmaj7", 0, "major", "major7"),
	("G7", 7, "major", "dominant7"),
	("Bdim", 11, "diminished", "none"),
	("Caug", 0, "augmented", "none"),
	("Dsus4", 2, "major", "none"),
	("F#m", 6, "minor", "none"),
	("Ebmin7", 3, "minor", "dominant7"),
	("C7", 0, "major", "dominant7"),
	("E9", 4, "major", "dominant7"),
	("Cmaj9", 0, "major", "major7"),
	("Cadd9", 0, "major", "none"),
	("Bbm7b5", 10, "diminished", "dominant7"),
	("Aminor", 9, "minor", "none"),
	("Cmajor", 0, "major", "none"),
	("Cdom7", 0, "major", "dominant7"),
	("Co", 0, "diminished", "none"),
	("Co7", 0, "diminished", "dominant7"),
	("C°", 0, "diminished", "none"),
])
def test_parse_chord_symbol (symbol: str, root_pc: int, quality: str, seventh: str) -> None:

	assert groovix.chords.parse_chord_symbol(symbol) == groovix.chords.ChordSymbol(root_pc=root_pc, quality=quality, seventh=seventh)


def test_parse_chord_symbol_without_root ():

	assert groovix.chords.parse_chord_symbol("H7") is None
	assert groovix.chords.parse_chord_symbol("") is None


def test_chord_symbol_tones_and_name ():

	g7 = groovix.chords.ChordSymbol(root_pc=7, quality="major", seventh="dominant7")

	assert g7.tones(4) == [67, 71, 74, 77]
	assert g7.pitch_classes() == [7, 11, 2, 5]
	assert g7.name() == "G7"
	assert groovix.chords.ChordSymbol(root_pc=9, quality="minor").name() == "Am"
	assert groovix.chords.parse_chord_symbol("Bm7b5").name() == "Bm7b5"


def test_chord_symbol_rejects_unknown_quality ():

	with pytest.raises(ValueError):
		groovix.chords.ChordSymbol(root_pc=0, quality="weird").intervals()
