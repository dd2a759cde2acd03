"""
PCM/WAV Encoding

Serializes a SampleBuffer into a canonical 44-byte-header RIFF/WAVE
stream and parses such streams back.

Technical assumptions:
- Linear PCM only (AudioFormat 1), 8/16/24 bits per sample
- 8-bit is unsigned with offset 128: round(s * 127 + 128)
- 16/24-bit are signed: round(s * max_level), max_level = 2^(N-1) - 1,
  the same scale factor as the quantizer
- 24-bit samples are stored as three bytes, no padding byte
- Data is interleaved frame-major (all channels of frame 0, then frame 1)
- All multi-byte integers are little-endian
"""

import logging
import struct
import warnings

import numpy as np

from .buffer import SampleBuffer
from .errors import InvalidParameterError, WavFormatError
from .quantization import QuantizationSpec, round_half_away

logger = logging.getLogger(__name__)

WAV_HEADER_SIZE = 44
PCM_FORMAT_TAG = 1
FMT_CHUNK_SIZE = 16

# RIFF, size, WAVE, "fmt ", 16, format, channels, rate, byte rate,
# block align, bits, "data", data size
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")
_CHUNK = struct.Struct("<4sI")
_FMT = struct.Struct("<HHIIHH")


def encode_wav(buffer: SampleBuffer, bits_per_sample: int) -> bytes:
    """
    Encode a buffer as a RIFF/WAVE byte stream.

    Header fields are derived from the buffer's channel count and sample
    rate and the requested depth. Samples outside [-1.0, 1.0] cannot be
    represented in integer PCM; they are clipped with a warning.

    Args:
        buffer: Audio to encode
        bits_per_sample: 8, 16 or 24

    Returns:
        Complete WAV file contents (44-byte header + PCM data)

    Raises:
        InvalidParameterError: Unsupported bit depth
    """
    spec = QuantizationSpec(bits_per_sample)
    pcm = _to_pcm_bytes(buffer.data, spec)
    header = build_wav_header(
        num_channels=buffer.num_channels,
        sample_rate=buffer.sample_rate,
        bits_per_sample=spec.bit_depth,
        data_size=len(pcm),
    )

    logger.debug(
        "Encoded %d frames x %d channels at %d bit (%d data bytes)",
        buffer.num_frames, buffer.num_channels, spec.bit_depth, len(pcm),
    )
    return header + pcm


def build_wav_header(
    num_channels: int,
    sample_rate: int,
    bits_per_sample: int,
    data_size: int,
) -> bytes:
    """
    Build the canonical 44-byte PCM WAV header.

    Returns:
        Header bytes; ChunkSize = 36 + data_size
    """
    bytes_per_sample = bits_per_sample // 8
    block_align = num_channels * bytes_per_sample
    byte_rate = sample_rate * block_align

    return _HEADER.pack(
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        FMT_CHUNK_SIZE,
        PCM_FORMAT_TAG,
        num_channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        b"data",
        data_size,
    )


def _to_pcm_bytes(data: np.ndarray, spec: QuantizationSpec) -> bytes:
    """Convert normalized (frames, channels) data to interleaved PCM."""
    if data.size and np.any(np.abs(data) > 1.0):
        warnings.warn(
            "Audio data exceeds [-1.0, 1.0]. Clipping will be applied.",
            UserWarning,
            stacklevel=3,
        )
        data = np.clip(data, -1.0, 1.0)

    # Row-major (frames, channels) is already interleaved order
    if spec.bit_depth == 8:
        values = round_half_away(data * 127 + 128)
        return values.astype(np.uint8).tobytes()

    values = round_half_away(data * spec.max_level).astype(np.int32)

    if spec.bit_depth == 16:
        return values.astype("<i2").tobytes()

    # 24-bit: low three bytes of the little-endian int32
    low24 = (values & 0xFFFFFF).astype("<u4")
    return low24.view(np.uint8).reshape(-1, 4)[:, :3].tobytes()


def decode_wav(data: bytes) -> SampleBuffer:
    """
    Decode a PCM RIFF/WAVE byte stream.

    Uses the same scale factors as encode_wav, so decoding an encoded
    buffer reproduces it within half a quantization step. Chunks other
    than "fmt " and "data" are skipped.

    Args:
        data: WAV file contents

    Returns:
        Decoded buffer

    Raises:
        WavFormatError: Not a RIFF/WAVE stream, not PCM, unsupported
            depth or truncated data
    """
    if len(data) < 12 or data[0:4] != b"RIFF" or data[8:12] != b"WAVE":
        raise WavFormatError("Not a RIFF/WAVE stream")

    fmt = None
    payload = None
    offset = 12

    while offset + _CHUNK.size <= len(data):
        chunk_id, chunk_size = _CHUNK.unpack_from(data, offset)
        body_start = offset + _CHUNK.size
        body = data[body_start:body_start + chunk_size]

        if chunk_id in (b"fmt ", b"data") and len(body) < chunk_size:
            raise WavFormatError(
                f"Truncated {chunk_id.decode().strip()} chunk: "
                f"declares {chunk_size} bytes, {len(body)} present"
            )

        if chunk_id == b"fmt ":
            if len(body) < _FMT.size:
                raise WavFormatError("fmt chunk too short")
            fmt = _FMT.unpack_from(body)
        elif chunk_id == b"data":
            payload = body
            break

        # Chunks are padded to even sizes
        offset = body_start + chunk_size + (chunk_size & 1)

    if fmt is None:
        raise WavFormatError("Missing fmt chunk")
    if payload is None:
        raise WavFormatError("Missing data chunk")

    audio_format, num_channels, sample_rate, _, _, bits_per_sample = fmt

    if audio_format != PCM_FORMAT_TAG:
        raise WavFormatError(f"Unsupported audio format: {audio_format}")
    if num_channels < 1:
        raise WavFormatError("WAV stream declares no channels")

    try:
        spec = QuantizationSpec(bits_per_sample)
    except InvalidParameterError as e:
        raise WavFormatError(str(e)) from e

    block_align = num_channels * spec.bit_depth // 8
    if len(payload) % block_align:
        raise WavFormatError(
            f"Data size {len(payload)} is not a multiple of block align {block_align}"
        )
    num_frames = len(payload) // block_align
    raw = np.frombuffer(payload, dtype=np.uint8)

    if spec.bit_depth == 8:
        samples = (raw.astype(np.float64) - 128) / 127
    elif spec.bit_depth == 16:
        samples = raw.view("<i2").astype(np.float64) / spec.max_level
    else:
        triples = raw.reshape(-1, 3).astype(np.int32)
        values = triples[:, 0] | (triples[:, 1] << 8) | (triples[:, 2] << 16)
        # Sign-extend from 24 bits
        values = np.where(values & 0x800000, values - 0x1000000, values)
        samples = values.astype(np.float64) / spec.max_level

    logger.debug(
        "Decoded %d frames x %d channels at %d bit, %d Hz",
        num_frames, num_channels, spec.bit_depth, sample_rate,
    )
    return SampleBuffer(
        data=samples.reshape(num_frames, num_channels),
        sample_rate=sample_rate,
    )
