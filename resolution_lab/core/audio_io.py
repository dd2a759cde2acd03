"""
Audio I/O Module

Loads audio files (WAV, MP3) into SampleBuffers and writes buffers as
PCM WAV files. Loading performs no implicit signal manipulation.

Technical assumptions:
- WAV files are loaded with soundfile (high precision, no conversion)
- MP3 files are decoded with pydub (requires ffmpeg)
- All audio data is returned as float64 (range -1.0 to 1.0)
- Writing always goes through encode_wav, so exported files match the
  in-memory quantization exactly
"""

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Literal, Optional

import numpy as np
import soundfile as sf

from .buffer import SampleBuffer
from .pipeline import export_filename
from .wav import encode_wav

logger = logging.getLogger(__name__)


@dataclass
class AudioFile:
    """
    Represents a loaded audio file with all metadata.

    The audio signal is NOT automatically modified.
    Resampling/quantization only occurs on explicit user instruction.

    Attributes:
        buffer: Decoded samples and sample rate
        file_path: Path to source file
        format_info: Format information (Subtype, Endianness)
        bit_depth: Bit depth of original (if known)
    """
    buffer: SampleBuffer
    file_path: Path
    format_info: dict = field(default_factory=dict)
    bit_depth: Optional[int] = None

    @property
    def sample_rate(self) -> int:
        return self.buffer.sample_rate

    @property
    def channels(self) -> int:
        return self.buffer.num_channels

    @property
    def num_samples(self) -> int:
        return self.buffer.num_frames

    @property
    def duration_seconds(self) -> float:
        return self.buffer.duration_seconds


def load_audio(file_path: str | Path) -> AudioFile:
    """
    Load an audio file without implicit conversion.

    Supported formats:
    - WAV (all common subtypes: PCM_U8, PCM_16, PCM_24, PCM_32, FLOAT)
    - MP3 (via pydub)

    NO automatic conversion of sample rate or channel count.

    Args:
        file_path: Path to audio file

    Returns:
        AudioFile object with all metadata

    Raises:
        FileNotFoundError: File does not exist
        ValueError: Unsupported format
    """
    path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"Audio file not found: {path}")

    suffix = path.suffix.lower()

    if suffix == ".wav":
        audio = _load_wav(path)
    elif suffix == ".mp3":
        audio = _load_mp3(path)
    else:
        raise ValueError(f"Nicht unterstütztes Format: {suffix}")

    logger.info(
        "Loaded %s: %d Hz, %d ch, %d frames",
        path.name, audio.sample_rate, audio.channels, audio.num_samples,
    )
    return audio


def _load_wav(path: Path) -> AudioFile:
    """
    Load WAV file with soundfile.

    soundfile uses libsndfile and provides precise results
    without unwanted conversions.
    """
    data, sample_rate = sf.read(path, dtype='float64', always_2d=True)
    info = sf.info(path)

    format_info = {
        "format": info.format,
        "subtype": info.subtype,
        "endian": info.endian,
        "sections": info.sections,
    }

    return AudioFile(
        buffer=SampleBuffer(data=data, sample_rate=sample_rate),
        file_path=path,
        format_info=format_info,
        bit_depth=_extract_bit_depth(info.subtype),
    )


def _load_mp3(path: Path) -> AudioFile:
    """
    Load MP3 file with pydub.

    Requires ffmpeg in system PATH for decoding.
    If ffmpeg is not available, an error is raised.
    """
    from pydub import AudioSegment

    try:
        audio = AudioSegment.from_mp3(path)
    except Exception as e:
        raise RuntimeError(
            f"MP3 could not be loaded: {e}\n"
            "Please ensure ffmpeg is installed:\n"
            "  macOS: brew install ffmpeg\n"
            "  Windows: https://ffmpeg.org/download.html"
        ) from e

    samples = np.array(audio.get_array_of_samples())

    # Normalize to float64 in range [-1, 1]
    # pydub returns int16 or int32
    if audio.sample_width == 2:  # 16-bit
        samples = samples.astype(np.float64) / 32768.0
    elif audio.sample_width == 4:  # 32-bit
        samples = samples.astype(np.float64) / 2147483648.0
    else:  # 8-bit
        samples = (samples.astype(np.float64) - 128) / 128.0

    format_info = {
        "format": "MP3",
        "subtype": "MPEG Layer 3",
        "note": "MP3 is lossy, original data cannot be reconstructed",
    }

    return AudioFile(
        buffer=SampleBuffer(
            data=samples.reshape(-1, audio.channels),
            sample_rate=audio.frame_rate,
        ),
        file_path=path,
        format_info=format_info,
        bit_depth=None,  # MP3 has no fixed bit depth
    )


def save_audio(
    buffer: SampleBuffer,
    file_path: str | Path,
    bit_depth: int = 16,
) -> Path:
    """
    Save a buffer as PCM WAV file.

    Args:
        buffer: Audio to write
        file_path: Target path
        bit_depth: 8, 16 or 24

    Returns:
        Path of the written file

    Raises:
        InvalidParameterError: Unsupported bit depth
    """
    path = Path(file_path)
    payload = encode_wav(buffer, bit_depth)
    path.write_bytes(payload)

    logger.info("Wrote %s (%d bytes)", path, len(payload))
    return path


def export_audio(
    buffer: SampleBuffer,
    directory: str | Path,
    kind: Literal["original", "processed"],
    sample_rate: int,
    bit_depth: int,
) -> Path:
    """
    Export a buffer using the audio-<kind>-<rate>hz-<depth>bit.wav naming.

    sample_rate and bit_depth name the selected processing settings; the
    file itself is written at the buffer's own rate.

    Returns:
        Path of the written file
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / export_filename(kind, sample_rate, bit_depth)
    return save_audio(buffer, target, bit_depth)


def _extract_bit_depth(subtype: str) -> Optional[int]:
    """Extract bit depth from soundfile subtype string."""
    bit_depth_map = {
        "PCM_16": 16,
        "PCM_24": 24,
        "PCM_32": 32,
        "FLOAT": 32,
        "DOUBLE": 64,
        "PCM_S8": 8,
        "PCM_U8": 8,
    }
    return bit_depth_map.get(subtype)
