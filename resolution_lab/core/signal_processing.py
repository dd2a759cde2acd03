"""
General Signal Processing

Contains sample-rate conversion and level measurement.
All functions are EXPLICIT - no automatic conversions.

Technical assumptions:
- Resampling uses scipy.signal.resample_poly for anti-aliasing
- Output length is derived from the original duration, never from a
  rounded intermediate duration
- All operations work on copies, original data remains unchanged
"""

from dataclasses import dataclass
import logging
from math import gcd

import numpy as np
from scipy import signal

from .buffer import SampleBuffer
from .errors import InvalidParameterError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResampleRequest:
    """
    Source and target rate of a sample-rate conversion.

    Attributes:
        source_rate: Original sample rate in Hz
        target_rate: Target sample rate in Hz
    """
    source_rate: int
    target_rate: int

    def __post_init__(self):
        for name in ("source_rate", "target_rate"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidParameterError(f"{name} must be an integer, got: {value!r}")
            if value <= 0:
                raise InvalidParameterError(f"{name} must be positive, got: {value}")

    @property
    def is_identity(self) -> bool:
        return self.source_rate == self.target_rate

    @property
    def up(self) -> int:
        """Upsampling factor of the polyphase filter."""
        return self.target_rate // gcd(self.source_rate, self.target_rate)

    @property
    def down(self) -> int:
        """Downsampling factor of the polyphase filter."""
        return self.source_rate // gcd(self.source_rate, self.target_rate)

    def output_frames(self, num_frames: int) -> int:
        """
        Frame count after conversion.

        round(num_frames * target_rate / source_rate) in exact integer
        arithmetic, ties rounded up. A non-empty input never yields zero
        frames.
        """
        frames = (2 * num_frames * self.target_rate + self.source_rate) // (
            2 * self.source_rate
        )
        if num_frames > 0:
            return max(frames, 1)
        return frames


def resample(buffer: SampleBuffer, target_rate: int) -> SampleBuffer:
    """
    Resample a buffer to a new sample rate.

    Every channel is converted independently with the same polyphase
    factors, so the channel structure is preserved.

    Args:
        buffer: Input buffer
        target_rate: Target sample rate in Hz

    Returns:
        New buffer at target_rate with
        round(num_frames * target_rate / sample_rate) frames

    Raises:
        InvalidParameterError: target_rate is not a positive integer
    """
    request = ResampleRequest(buffer.sample_rate, target_rate)

    if buffer.is_empty:
        logger.debug("Empty buffer, returning zero-length buffer at %d Hz", target_rate)
        return buffer.with_data(
            np.zeros((0, buffer.num_channels)),
            sample_rate=request.target_rate,
        )

    data = _resample_frames(buffer.data, request)
    return buffer.with_data(data, sample_rate=request.target_rate)


def resample_audio(
    data: np.ndarray,
    original_sr: int,
    target_sr: int,
) -> np.ndarray:
    """
    Resample raw audio data to new sample rate.

    Uses scipy.signal.resample_poly with automatic anti-aliasing filtering.

    Technical details:
    - Polyphase resampling for efficient computation
    - Anti-aliasing filter: Kaiser window FIR
    - Output trimmed/padded to the exact duration-derived length

    Args:
        data: Audio data (1D or 2D with shape (samples, channels))
        original_sr: Original sample rate
        target_sr: Target sample rate

    Returns:
        Resampled audio data (same dimensionality)
    """
    request = ResampleRequest(original_sr, target_sr)

    if data.ndim == 1:
        return _resample_frames(data[:, np.newaxis], request)[:, 0]
    return _resample_frames(data, request)


def _resample_frames(data: np.ndarray, request: ResampleRequest) -> np.ndarray:
    """Resample (frames, channels) data to the exact target length."""
    if request.is_identity:
        return data.copy()

    num_out = request.output_frames(data.shape[0])
    result = np.zeros((num_out, data.shape[1]), dtype=np.float64)

    if data.shape[0] == 0:
        return result

    logger.debug(
        "Resampling %d frames %d -> %d Hz (up=%d, down=%d, out=%d)",
        data.shape[0], request.source_rate, request.target_rate,
        request.up, request.down, num_out,
    )

    # resample_poly yields ceil(n * up / down) samples
    converted = signal.resample_poly(data, request.up, request.down, axis=0)
    count = min(num_out, converted.shape[0])
    result[:count] = converted[:count]
    return result


def compute_rms(data: np.ndarray, as_db: bool = False) -> float:
    """
    Compute RMS (Root Mean Square) of the signal.

    For multi-channel audio, RMS is computed over all channels.

    Args:
        data: Audio data
        as_db: If True, return in dB (reference: 1.0)

    Returns:
        RMS value (linear or dB)
    """
    if data.size == 0:
        return -np.inf if as_db else 0.0

    rms = float(np.sqrt(np.mean(data ** 2)))

    if as_db:
        if rms == 0:
            return -np.inf
        return 20 * np.log10(rms)

    return rms


def compute_peak(data: np.ndarray, as_db: bool = False) -> float:
    """
    Compute peak value (absolute maximum) of the signal.

    Args:
        data: Audio data
        as_db: If True, return in dB (reference: 1.0)

    Returns:
        Peak value (linear or dB)
    """
    if data.size == 0:
        return -np.inf if as_db else 0.0

    peak = float(np.max(np.abs(data)))

    if as_db:
        if peak == 0:
            return -np.inf
        return 20 * np.log10(peak)

    return peak
