"""
Storage size estimation.

Pure arithmetic, no validation of bit depth against the encoder's
supported set: any positive depth is accepted.
"""

from .buffer import SampleBuffer
from .errors import InvalidParameterError
from .wav import WAV_HEADER_SIZE

# Decoded audio is held as 32-bit float by the original capture path
ORIGINAL_BIT_DEPTH = 32


def estimated_bytes(frame_count: int, channel_count: int, bit_depth: int) -> int:
    """
    Bytes needed to store raw samples at the given depth.

    frame_count * channel_count * bit_depth / 8, rounded up to whole
    bytes when the depth is not a multiple of 8.
    """
    if frame_count < 0:
        raise InvalidParameterError(f"Frame count must not be negative, got: {frame_count}")
    if channel_count <= 0:
        raise InvalidParameterError(f"Channel count must be positive, got: {channel_count}")
    if bit_depth <= 0:
        raise InvalidParameterError(f"Bit depth must be positive, got: {bit_depth}")

    total_bits = frame_count * channel_count * bit_depth
    return -(-total_bits // 8)


def buffer_bytes(buffer: SampleBuffer, bit_depth: int) -> int:
    """Raw sample size of a buffer stored at bit_depth."""
    return estimated_bytes(buffer.num_frames, buffer.num_channels, bit_depth)


def wav_file_bytes(frame_count: int, channel_count: int, bit_depth: int) -> int:
    """Size of the WAV file encode_wav produces, header included."""
    return WAV_HEADER_SIZE + estimated_bytes(frame_count, channel_count, bit_depth)
