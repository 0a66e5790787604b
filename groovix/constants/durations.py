"""Tick-based duration constants.

All values are in **ticks**, where 1 tick = one sixteenth note. Every
timestamp and length produced by the notation compiler and the melody
generator is expressed in these units::

    import groovix.constants.durations as dur

    # "2 bars of 4/4"
    length = 2 * dur.BAR            # 32 ticks

    # "a dotted quarter"
    length = dur.DOTTED_QUARTER     # 6 ticks
"""

SIXTEENTH = 1
EIGHTH = 2
DOTTED_EIGHTH = 3
QUARTER = 4
DOTTED_QUARTER = 6
HALF = 8
DOTTED_HALF = 12
WHOLE = 16

STEPS_PER_BEAT = 4
BAR = 16

# MIDI file resolution used when writing
MIDI_TICKS_PER_BEAT = 480
