"""
Groovix - a text notation compiler and procedural melody generator for MIDI clips.

Groovix turns compact text into note events on a sixteenth-note grid, and
writes catchy single-note melodies over a chord progression. Everything it
produces is a list of `NoteEvent` values (pitch, start tick, length,
velocity) that can be dropped into a clip or saved as a standard MIDI file.

What it does:

- **Note and chord notation.** ``#`` lines hold notes (``C D# EbA``,
  grouped notes sound together), ``&`` lines hold chords (``Cmaj7 Amin7
  G7*2``). ``N(...)`` repeats a group, ``*k /k +k -k`` change one note's
  length and ``Z`` is a rest. Unreadable items are reported, never raised.
- **Chord theory.** An ordered table of chord formulas (triads, sevenths,
  ninths, elevenths, thirteenths, suspended) and the church modes plus
  harmonic and melodic minor, with ``register_scale()`` for your own.
- **Arpeggios.** Every ordering of a chord's tones, straight or looped,
  and an arpeggiator for diatonic progressions.
- **Melody generation.** Question-and-answer phrases over a progression,
  genre rhythm templates (pop, edm, hiphop, jazz), motif reuse, cadences,
  approach notes and fills. A seed makes every decision repeatable.
- **Candidate search.** Generate many melodies, score them against a
  musical rubric and keep one of the best.
- **MIDI files.** Read and write standard MIDI files with ``mido``.

Minimal example:

    ```python
    import groovix

    result = groovix.parse_notation("#44 C E G 2(C D)\\n&44 Cmaj7 Amin7")
    melody = groovix.generate_melody(["Am", "F", "C", "G"], groovix.MelodyParams(seed=7))
    ```

Command line: ``python -m groovix notation song.txt -o song.mid``,
``python -m groovix melody "Am F C G" --seed 7``.

Package-level exports: ``Clip``, ``MelodyParams``, ``NoteEvent``,
``generate_best_melody``, ``generate_melody``, ``parse_notation``, ``register_scale``.
"""

import groovix.clip
import groovix.events
import groovix.intervals
import groovix.melody
import groovix.melody_scoring
import groovix.notation


Clip = groovix.clip.Clip
MelodyParams = groovix.melody.MelodyParams
NoteEvent = groovix.events.NoteEvent
generate_best_melody = groovix.melody_scoring.generate_best_melody
generate_melody = groovix.melody.generate_melody
parse_notation = groovix.notation.parse_notation
register_scale = groovix.intervals.register_scale
