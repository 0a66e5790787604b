"""Constants for Groovix.

This package contains two sets of constants:

- ``groovix.constants.durations`` - Tick-based note lengths (1 tick = one sixteenth note)
- ``groovix.constants.velocity`` - MIDI velocity constants
"""
