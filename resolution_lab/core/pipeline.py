"""
Processing Pipeline

Connects the core components the way the comparison workflow uses them:
resample, then quantize, then analyze and size both versions.
"""

from dataclasses import dataclass
import logging
from typing import Literal

from .buffer import SampleBuffer
from .errors import InvalidParameterError
from .quantization import QuantizationSpec, quantize, quantization_snr_db
from .signal_processing import ResampleRequest, resample
from .size import ORIGINAL_BIT_DEPTH, buffer_bytes
from .spectral import DEFAULT_FFT_SIZE, SpectrumResult, analyze

logger = logging.getLogger(__name__)

SAMPLE_RATE_CHOICES = (8000, 16000, 44100, 48000, 96000)
EXPORT_KINDS = ("original", "processed")


def process(buffer: SampleBuffer, target_rate: int, bit_depth: int) -> SampleBuffer:
    """
    Resample to target_rate, then quantize to bit_depth.

    Both parameters are validated before any work is done.

    Returns:
        Processed buffer at target_rate
    """
    spec = QuantizationSpec(bit_depth)
    ResampleRequest(buffer.sample_rate, target_rate)

    logger.info(
        "Processing %d Hz / %d ch -> %d Hz / %d bit",
        buffer.sample_rate, buffer.num_channels, target_rate, spec.bit_depth,
    )
    return quantize(resample(buffer, target_rate), spec)


@dataclass(frozen=True)
class ComparisonReport:
    """
    Side-by-side figures for an original and a processed buffer.

    Attributes:
        original_spectrum: Spectrum of the original (first channel)
        processed_spectrum: Spectrum of the processed buffer
        original_bytes: Raw size of the original at 32-bit float
        processed_bytes: Raw size of the processed buffer at bit_depth
        bit_depth: Depth of the processed buffer
        snr_db: Quantization SNR, only when no resampling took place
    """
    original_spectrum: SpectrumResult
    processed_spectrum: SpectrumResult
    original_bytes: int
    processed_bytes: int
    bit_depth: int
    snr_db: float | None = None

    @property
    def size_ratio(self) -> float:
        """processed_bytes / original_bytes (0.0 for empty input)."""
        if self.original_bytes == 0:
            return 0.0
        return self.processed_bytes / self.original_bytes


def compare(
    original: SampleBuffer,
    processed: SampleBuffer,
    bit_depth: int,
    fft_size: int = DEFAULT_FFT_SIZE,
) -> ComparisonReport:
    """
    Build a ComparisonReport for two buffers.

    Args:
        original: Unprocessed buffer
        processed: Output of process()
        bit_depth: Depth processed was quantized to
        fft_size: FFT size for both spectra

    Returns:
        ComparisonReport
    """
    QuantizationSpec(bit_depth)

    snr_db = None
    if (original.sample_rate == processed.sample_rate
            and original.data.shape == processed.data.shape):
        snr_db = quantization_snr_db(original, processed)

    return ComparisonReport(
        original_spectrum=analyze(original, fft_size),
        processed_spectrum=analyze(processed, fft_size),
        original_bytes=buffer_bytes(original, ORIGINAL_BIT_DEPTH),
        processed_bytes=buffer_bytes(processed, bit_depth),
        bit_depth=bit_depth,
        snr_db=snr_db,
    )


def export_filename(
    kind: Literal["original", "processed"],
    sample_rate: int,
    bit_depth: int,
) -> str:
    """
    File name for an exported buffer.

    Format: audio-<original|processed>-<sample_rate>hz-<bit_depth>bit.wav
    """
    if kind not in EXPORT_KINDS:
        raise InvalidParameterError(f"Unknown export kind: {kind!r}")
    return f"audio-{kind}-{sample_rate}hz-{bit_depth}bit.wav"
