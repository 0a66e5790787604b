import argparse
import logging
import sys
import typing

import groovix.arpeggio
import groovix.clip
import groovix.config
import groovix.melody_scoring
import groovix.midi_file
import groovix.progression


logger = logging.getLogger(__name__)


def _notation (args: argparse.Namespace, settings: groovix.config.Settings) -> int:

	with open(args.file, 'r') as f:
		text = f.read()

	clip = groovix.clip.Clip(
		bars = args.bars,
		beats_per_bar = settings.beats_per_bar,
		bpm = settings.bpm,
		default_octave = settings.default_octave,
		default_length = settings.default_length
	)

	result = clip.import_notation(text, settings.max_expanded_tokens)

	for failure in result.failures:
		logger.info(f"Could not resolve {failure.text!r}: {failure.reason}")

	for error in result.errors:
		logger.warning(error)

	groovix.midi_file.write_note_events(clip.events(), args.output, bpm=settings.bpm)

	return 0


def _melody (args: argparse.Namespace, settings: groovix.config.Settings) -> int:

	progression = groovix.progression.parse_progression(args.progression, settings.beats_per_bar)

	if not progression:
		logger.error("Progression is empty")
		return 1

	params = groovix.config.melody_params_from_config(settings.melody, settings.beats_per_bar, args.seed)

	best = groovix.melody_scoring.generate_best_melody(
		progression,
		params,
		count = args.candidates,
		keep_top = args.keep_top,
		workers = args.workers
	)

	logger.info(f"Best melody: {len(best.events)} notes, score {best.score:.2f}")

	events = list(best.events)

	if args.with_chords:
		events.extend(groovix.progression.chord_events(progression, steps_per_bar=params.steps_per_bar))

	groovix.midi_file.write_note_events(events, args.output, bpm=settings.bpm)

	return 0


def _arpeggio (args: argparse.Namespace, settings: groovix.config.Settings) -> int:

	degrees = [int(part) for part in args.degrees.replace(",", " ").split()]
	pattern = groovix.arpeggio.parse_pattern(args.pattern) if args.pattern else groovix.arpeggio.generate(3).looped[0]

	events = groovix.arpeggio.arpeggiate(
		degrees,
		key = args.key,
		mode = args.mode,
		pattern = pattern,
		repeat = args.repeat,
		include_chords = not args.no_chords
	)

	groovix.midi_file.write_note_events(events, args.output, bpm=settings.bpm)

	return 0


def build_parser () -> argparse.ArgumentParser:

	"""
	Build the command line parser.
	"""

	parser = argparse.ArgumentParser(prog="groovix", description="Groovix notation compiler and melody generator")
	parser.add_argument("--config", default=groovix.config.DEFAULT_CONFIG_PATH, help="YAML config file (default: groovix.yaml)")
	parser.add_argument("--output", "-o", default="groovix.mid", help="Output MIDI file (default: groovix.mid)")
	parser.add_argument("--bpm", type=float, help="Tempo written to the MIDI file")
	parser.add_argument("--verbose", "-v", action="store_true", help="Log every dropped notation item")

	commands = parser.add_subparsers(dest="command", required=True)

	notation = commands.add_parser("notation", help="Compile a notation file to MIDI")
	notation.add_argument("file", help="Text file of # note lines and & chord lines")
	notation.add_argument("--bars", type=int, default=64, help="Clip length in bars (default: 64)")
	notation.set_defaults(handler=_notation)

	melody = commands.add_parser("melody", help="Generate a melody over a chord progression")
	melody.add_argument("progression", help="Chord progression, e.g. \"Am F C G\" or \"8 Cmaj7 4 Dm7 G7\"")
	melody.add_argument("--seed", type=int, help="Random seed for reproducible output")
	melody.add_argument("--candidates", type=int, default=24, help="Melodies to generate and score (default: 24)")
	melody.add_argument("--keep-top", type=int, default=3, help="Pick at random among this many best (default: 3)")
	melody.add_argument("--workers", type=int, default=1, help="Threads used for candidate search (default: 1)")
	melody.add_argument("--with-chords", action="store_true", help="Add the progression as block chords")
	melody.set_defaults(handler=_melody)

	arpeggio = commands.add_parser("arpeggio", help="Arpeggiate diatonic triads on scale degrees")
	arpeggio.add_argument("degrees", help="0-based scale degrees, e.g. \"0 5 3 4\"")
	arpeggio.add_argument("--key", default="C", help="Tonic (default: C)")
	arpeggio.add_argument("--mode", default="ionian", help="Scale mode (default: ionian)")
	arpeggio.add_argument("--pattern", help="Chord-tone indices, e.g. \"0 1 2 1\"")
	arpeggio.add_argument("--repeat", type=int, default=1, help="Pattern repeats per chord (default: 1)")
	arpeggio.add_argument("--no-chords", action="store_true", help="Leave out the sustained block chords")
	arpeggio.set_defaults(handler=_arpeggio)

	return parser


def main (argv: typing.Optional[typing.Sequence[str]] = None) -> int:

	"""
	Main entry point for the groovix command line.
	"""

	args = build_parser().parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

	try:
		settings = groovix.config.settings_from_config(groovix.config.load_config(args.config))

		if args.bpm is not None:
			settings.bpm = args.bpm

		return args.handler(args, settings)

	except (OSError, ValueError) as exc:
		logger.error(str(exc))
		return 1


if __name__ == "__main__":
	sys.exit(main())
