"""MIDI velocity constants.

Notation has no dynamics, so every compiled note takes one of these defaults.
Generated melodies compute their own velocities and only use the range limits.
"""

DEFAULT_VELOCITY = 100          # Note lines, arpeggio steps
DEFAULT_CHORD_VELOCITY = 90     # Chord lines, block chords

MIN_VELOCITY = 0
MAX_VELOCITY = 127
