"""
Sample Buffer

In-memory representation of decoded audio shared by every core component.

Technical assumptions:
- Samples are float64, conceptually in range [-1.0, 1.0] (never clamped)
- Data is always 2D with shape (frames, channels), frame-major like
  interleaved PCM
- Buffers are immutable; every transform returns a new buffer
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence
import numpy as np

from .errors import ChannelMismatchError, InvalidParameterError


@dataclass(frozen=True, eq=False)
class SampleBuffer:
    """
    Decoded audio with its sample rate.

    The array is copied on construction and marked read-only, so a
    buffer can be shared between callers without defensive copies.

    Attributes:
        data: Audio data, Shape: (frames, channels)
        sample_rate: Sample rate in Hz
    """
    data: np.ndarray
    sample_rate: int

    def __post_init__(self):
        """Validate and freeze data."""
        data = np.array(self.data, dtype=np.float64)

        if data.ndim == 1:
            data = data.reshape(-1, 1)
        elif data.ndim != 2:
            raise ValueError("Audio array must be 1D or 2D")

        if data.shape[1] < 1:
            raise InvalidParameterError("Buffer needs at least one channel")
        if int(self.sample_rate) != self.sample_rate or self.sample_rate <= 0:
            raise InvalidParameterError(
                f"Sample rate must be a positive integer, got: {self.sample_rate}"
            )

        data.flags.writeable = False
        object.__setattr__(self, "data", data)
        object.__setattr__(self, "sample_rate", int(self.sample_rate))

    @classmethod
    def from_channels(
        cls,
        channels: Sequence[Sequence[float]],
        sample_rate: int,
    ) -> "SampleBuffer":
        """
        Build a buffer from one sample sequence per channel.

        Args:
            channels: Per-channel samples, all of equal length
            sample_rate: Sample rate in Hz

        Raises:
            InvalidParameterError: No channels given
            ChannelMismatchError: Channels differ in length
        """
        if len(channels) == 0:
            raise InvalidParameterError("Buffer needs at least one channel")

        arrays = [np.asarray(ch, dtype=np.float64) for ch in channels]
        lengths = {len(a) for a in arrays}
        if len(lengths) != 1:
            raise ChannelMismatchError(
                f"Channel lengths differ: {[len(a) for a in arrays]}"
            )

        return cls(data=np.column_stack(arrays), sample_rate=sample_rate)

    @property
    def num_channels(self) -> int:
        return self.data.shape[1]

    @property
    def num_frames(self) -> int:
        return self.data.shape[0]

    @property
    def duration_seconds(self) -> float:
        return self.num_frames / self.sample_rate

    @property
    def is_empty(self) -> bool:
        return self.num_frames == 0

    def get_channel(self, channel: int) -> np.ndarray:
        """
        Extract a single channel.

        Args:
            channel: Channel index (0 = first/left)

        Returns:
            Read-only 1D view of the channel samples
        """
        if not 0 <= channel < self.num_channels:
            raise InvalidParameterError(
                f"Channel {channel} out of range for {self.num_channels} channel(s)"
            )
        return self.data[:, channel]

    def channels(self) -> Iterator[np.ndarray]:
        """Iterate over channels as read-only 1D views."""
        for ch in range(self.num_channels):
            yield self.data[:, ch]

    def with_data(
        self,
        data: np.ndarray,
        sample_rate: Optional[int] = None,
    ) -> "SampleBuffer":
        """Create a new buffer, keeping the sample rate unless given."""
        return SampleBuffer(
            data=data,
            sample_rate=self.sample_rate if sample_rate is None else sample_rate,
        )
