"""MIDI performance -> monophonic synth track literal."""
