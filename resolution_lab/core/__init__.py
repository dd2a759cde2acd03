"""
Core DSP module - fully testable without GUI dependencies.

This module contains all signal processing logic:
- Sample buffers and audio I/O (WAV, MP3)
- Resampling and bit-depth quantization
- FFT-based spectral analysis
- PCM/WAV encoding and size estimation
"""

from .errors import InvalidParameterError, ChannelMismatchError, WavFormatError
from .buffer import SampleBuffer
from .signal_processing import (
    ResampleRequest,
    resample,
    resample_audio,
    compute_rms,
    compute_peak,
)
from .quantization import (
    SUPPORTED_BIT_DEPTHS,
    QuantizationSpec,
    quantize,
    quantization_snr_db,
    theoretical_snr_db,
)
from .spectral import DEFAULT_FFT_SIZE, SpectrumResult, analyze, fft
from .wav import encode_wav, decode_wav
from .size import ORIGINAL_BIT_DEPTH, estimated_bytes, buffer_bytes, wav_file_bytes
from .pipeline import ComparisonReport, process, compare, export_filename
from .audio_io import AudioFile, load_audio, save_audio, export_audio

__all__ = [
    "InvalidParameterError",
    "ChannelMismatchError",
    "WavFormatError",
    "SampleBuffer",
    "ResampleRequest",
    "resample",
    "resample_audio",
    "compute_rms",
    "compute_peak",
    "SUPPORTED_BIT_DEPTHS",
    "QuantizationSpec",
    "quantize",
    "quantization_snr_db",
    "theoretical_snr_db",
    "DEFAULT_FFT_SIZE",
    "SpectrumResult",
    "analyze",
    "fft",
    "encode_wav",
    "decode_wav",
    "ORIGINAL_BIT_DEPTH",
    "estimated_bytes",
    "buffer_bytes",
    "wav_file_bytes",
    "ComparisonReport",
    "process",
    "compare",
    "export_filename",
    "AudioFile",
    "load_audio",
    "save_audio",
    "export_audio",
]
