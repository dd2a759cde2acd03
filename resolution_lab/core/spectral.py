"""
Spectral Analysis Module

Computes the time-averaged magnitude spectrum of one channel with a
radix-2 Cooley-Tukey FFT.

Technical assumptions:
- Non-overlapping chunks of exactly fft_size samples; a trailing partial
  chunk is discarded, never zero-padded
- Symmetric Hann window w[j] = 0.5 * (1 - cos(2*pi*j / (N-1)))
- Magnitude per bin is |X[k]| / N for the first N/2 bins
- Chunk spectra are combined by arithmetic mean
- fft_size must be a power of two (no silent rounding up)
"""

from dataclasses import dataclass
from functools import lru_cache
import logging

import numpy as np
from scipy import signal

from .buffer import SampleBuffer
from .errors import InvalidParameterError

logger = logging.getLogger(__name__)

DEFAULT_FFT_SIZE = 2048


@dataclass(frozen=True, eq=False)
class SpectrumResult:
    """
    Averaged magnitude spectrum of one channel.

    Attributes:
        magnitudes: Averaged magnitude per bin, length fft_size // 2
        bin_hz: Frequency resolution in Hz (sample_rate / fft_size)
        fft_size: FFT size used
        sample_rate: Sample rate of input data
        num_chunks: Number of full chunks averaged (0 = signal too short)
        channel: Analyzed channel index
    """
    magnitudes: np.ndarray
    bin_hz: float
    fft_size: int
    sample_rate: int
    num_chunks: int
    channel: int = 0

    @property
    def frequencies(self) -> np.ndarray:
        """Center frequency of each bin in Hz."""
        return np.arange(len(self.magnitudes)) * self.bin_hz

    @property
    def peak_bin(self) -> int:
        return int(np.argmax(self.magnitudes))

    @property
    def peak_frequency(self) -> float:
        return self.peak_bin * self.bin_hz

    def magnitude_db(self, ref: float = 1.0, min_db: float = -120.0) -> np.ndarray:
        """
        Magnitude in dB.

        Args:
            ref: Reference value (1.0 for dBFS)
            min_db: Minimum dB value (to avoid log(0))

        Returns:
            Magnitude in dB, length fft_size // 2
        """
        # Avoid log(0)
        mag = np.maximum(self.magnitudes, 10 ** (min_db / 20) * ref)
        return 20 * np.log10(mag / ref)


def analyze(
    buffer: SampleBuffer,
    fft_size: int = DEFAULT_FFT_SIZE,
    channel: int = 0,
) -> SpectrumResult:
    """
    Compute the averaged magnitude spectrum of one channel.

    Multi-channel analysis is done by calling this once per channel.

    Args:
        buffer: Input buffer
        fft_size: FFT size, power of two >= 2
        channel: Channel index to analyze

    Returns:
        SpectrumResult with fft_size // 2 magnitudes. A signal shorter
        than fft_size yields all-zero magnitudes.

    Raises:
        InvalidParameterError: fft_size not a power of two, or channel
            out of range
    """
    _validate_fft_size(fft_size)
    samples = buffer.get_channel(channel)

    num_bins = fft_size // 2
    num_chunks = len(samples) // fft_size
    bin_hz = buffer.sample_rate / fft_size

    logger.debug(
        "Analyzing channel %d: %d samples, fft_size=%d, %d chunk(s)",
        channel, len(samples), fft_size, num_chunks,
    )

    if num_chunks == 0:
        return SpectrumResult(
            magnitudes=np.zeros(num_bins),
            bin_hz=bin_hz,
            fft_size=fft_size,
            sample_rate=buffer.sample_rate,
            num_chunks=0,
            channel=channel,
        )

    # One row per chunk, fresh arrays so the buffer stays untouched
    real = samples[:num_chunks * fft_size].reshape(num_chunks, fft_size) * hann_window(fft_size)
    imag = np.zeros_like(real)

    fft(real, imag)

    magnitudes = np.sqrt(real[:, :num_bins] ** 2 + imag[:, :num_bins] ** 2) / fft_size
    average = magnitudes.sum(axis=0) / num_chunks

    return SpectrumResult(
        magnitudes=average,
        bin_hz=bin_hz,
        fft_size=fft_size,
        sample_rate=buffer.sample_rate,
        num_chunks=num_chunks,
        channel=channel,
    )


def fft(real: np.ndarray, imag: np.ndarray) -> None:
    """
    In-place radix-2 decimation-in-time FFT along the last axis.

    Leading axes are independent transforms, so many chunks can be
    processed in a single call.

    Technical details:
    - Bit-reversal permutation of input indices (log2(N) bits)
    - Butterfly stages for stage_size = 2, 4, ..., N with twiddle
      factors cos/sin(-2*pi*k / stage_size), k in [0, stage_size/2)

    Args:
        real: Real part, modified in place, C-contiguous float array
        imag: Imaginary part, same shape, modified in place
    """
    if real.shape != imag.shape:
        raise InvalidParameterError("Real and imaginary parts differ in shape")
    if not (real.flags.c_contiguous and imag.flags.c_contiguous):
        raise InvalidParameterError("FFT operates in place on C-contiguous arrays")

    n = real.shape[-1]
    _validate_fft_size(n)
    lead = real.shape[:-1]

    order = bit_reverse_indices(n)
    real[...] = real[..., order]
    imag[...] = imag[..., order]

    stage_size = 2
    while stage_size <= n:
        half = stage_size // 2
        angle = -2 * np.pi * np.arange(half) / stage_size
        w_re = np.cos(angle)
        w_im = np.sin(angle)

        # Views: (..., groups, stage_size), writes go through to real/imag
        re = real.reshape(*lead, n // stage_size, stage_size)
        im = imag.reshape(*lead, n // stage_size, stage_size)
        even_re, odd_re = re[..., :half], re[..., half:]
        even_im, odd_im = im[..., :half], im[..., half:]

        t_re = odd_re * w_re - odd_im * w_im
        t_im = odd_re * w_im + odd_im * w_re

        odd_re[...] = even_re - t_re
        odd_im[...] = even_im - t_im
        even_re += t_re
        even_im += t_im

        stage_size *= 2


@lru_cache(maxsize=16)
def _bit_reverse_table(n: int) -> tuple:
    bits = n.bit_length() - 1
    return tuple(_reverse_bits(i, bits) for i in range(n))


def bit_reverse_indices(n: int) -> np.ndarray:
    """Index permutation that reverses the log2(n) low bits of each index."""
    _validate_fft_size(n)
    return np.array(_bit_reverse_table(n), dtype=np.intp)


def _reverse_bits(x: int, bits: int) -> int:
    result = 0
    for _ in range(bits):
        result = (result << 1) | (x & 1)
        x >>= 1
    return result


def hann_window(size: int) -> np.ndarray:
    """Symmetric Hann window, zero at both ends."""
    return signal.windows.hann(size, sym=True)


def is_power_of_two(value: int) -> bool:
    return value > 0 and value & (value - 1) == 0


def _validate_fft_size(fft_size: int) -> None:
    if (isinstance(fft_size, bool) or not isinstance(fft_size, (int, np.integer))
            or fft_size < 2 or not is_power_of_two(int(fft_size))):
        raise InvalidParameterError(
            f"FFT size must be a power of two >= 2, got: {fft_size!r}"
        )
