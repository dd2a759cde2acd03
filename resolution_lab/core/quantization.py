"""
Bit-Depth Quantization

Simulates fixed-point storage at a reduced bit depth while staying in the
floating-point domain.

Technical assumptions:
- Scale factor is max_level = 2^(bit_depth-1) - 1 (symmetric, no -2^(N-1))
- Rounding is half away from zero, the same in the quantizer and the
  WAV encoder
- No clamping: values outside [-1, 1] stay outside after quantization
- No dithering or noise shaping
"""

from dataclasses import dataclass
import logging
from typing import Union

import numpy as np

from .buffer import SampleBuffer
from .errors import InvalidParameterError
from .signal_processing import compute_rms

logger = logging.getLogger(__name__)

SUPPORTED_BIT_DEPTHS = (8, 16, 24)


@dataclass(frozen=True)
class QuantizationSpec:
    """
    Target bit depth of a quantization.

    Attributes:
        bit_depth: Bits per sample, one of 8, 16 or 24
    """
    bit_depth: int

    def __post_init__(self):
        depth = self.bit_depth
        if (isinstance(depth, bool) or not isinstance(depth, (int, np.integer))
                or depth not in SUPPORTED_BIT_DEPTHS):
            raise InvalidParameterError(
                f"Unsupported bit depth: {self.bit_depth!r} "
                f"(supported: {', '.join(map(str, SUPPORTED_BIT_DEPTHS))})"
            )

    @property
    def max_level(self) -> int:
        """Largest positive signed integer at this depth."""
        return 2 ** (self.bit_depth - 1) - 1

    @property
    def num_levels(self) -> int:
        """Number of representable levels in [-1, 1]."""
        return 2 * self.max_level + 1

    @property
    def step_size(self) -> float:
        """Distance between two adjacent normalized levels."""
        return 1.0 / self.max_level


def round_half_away(values: np.ndarray) -> np.ndarray:
    """
    Round to nearest integer, ties away from zero.

    Unlike np.round (ties to even), 0.5 -> 1, 1.5 -> 2, -0.5 -> -1.
    """
    whole = np.trunc(values)
    # Fractional part is exact, so no rounding happens before the comparison
    return whole + np.sign(values) * (np.abs(values - whole) >= 0.5)


def quantize(
    buffer: SampleBuffer,
    spec: Union[QuantizationSpec, int],
) -> SampleBuffer:
    """
    Quantize every sample to the nearest level of the target bit depth.

    For each sample s: q = round(s * max_level), output q / max_level.
    Applying the same quantization twice is a no-op.

    Args:
        buffer: Input buffer
        spec: QuantizationSpec or bit depth (8, 16, 24)

    Returns:
        New buffer with the same rate and shape

    Raises:
        InvalidParameterError: Unsupported bit depth
    """
    if not isinstance(spec, QuantizationSpec):
        spec = QuantizationSpec(spec)

    max_level = spec.max_level
    logger.debug(
        "Quantizing %d frames x %d channels to %d bit (max_level=%d)",
        buffer.num_frames, buffer.num_channels, spec.bit_depth, max_level,
    )

    levels = round_half_away(buffer.data * max_level)
    return buffer.with_data(levels / max_level)


def quantization_snr_db(original: SampleBuffer, quantized: SampleBuffer) -> float:
    """
    Signal-to-quantization-noise ratio in dB.

    Both buffers must share rate and shape, i.e. quantized must come
    from original without resampling.

    Returns:
        SNR in dB; inf if the buffers are identical, -inf for silence
    """
    if (original.sample_rate != quantized.sample_rate
            or original.data.shape != quantized.data.shape):
        raise InvalidParameterError(
            "SNR requires buffers with equal sample rate and shape"
        )

    signal_rms = compute_rms(original.data)
    noise_rms = compute_rms(quantized.data - original.data)

    if signal_rms == 0:
        return -np.inf
    if noise_rms == 0:
        return np.inf
    return 20 * np.log10(signal_rms / noise_rms)


def theoretical_snr_db(bit_depth: int) -> float:
    """
    Ideal SNR of a full-scale sine at the given depth (6.02 N + 1.76 dB).

    Any positive depth is accepted, this is a reference value only.
    """
    if bit_depth <= 0:
        raise InvalidParameterError(f"Bit depth must be positive, got: {bit_depth}")
    return 6.02 * bit_depth + 1.76
