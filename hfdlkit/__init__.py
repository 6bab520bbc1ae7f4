"""HFDL building blocks: HFNPDU parsing, Viterbi decoding, filter design and I/Q input."""

__version__ = "1.3.0"