"""
Error types for the processing core.

All transforms are pure functions. They never retry and never coerce
invalid parameters to a nearby valid value.
"""


class InvalidParameterError(ValueError):
    """A caller passed a parameter outside the supported contract."""


class ChannelMismatchError(AssertionError):
    """Channel arrays of a buffer differ in length (programming error)."""


class WavFormatError(ValueError):
    """A byte stream is not a supported PCM RIFF/WAVE stream."""
