"""
Tests für SampleBuffer.
"""

import pytest
import numpy as np

from resolution_lab.core.buffer import SampleBuffer
from resolution_lab.core.errors import ChannelMismatchError, InvalidParameterError


class TestSampleBuffer:
    """Tests für SampleBuffer Dataclass."""

    def test_mono_buffer(self):
        """1D-Daten werden zu einem Kanal."""
        buffer = SampleBuffer(data=np.zeros(44100), sample_rate=44100)

        assert buffer.num_channels == 1
        assert buffer.num_frames == 44100
        assert buffer.duration_seconds == 1.0
        assert buffer.data.shape == (44100, 1)

    def test_stereo_buffer(self):
        """Stereo-Daten behalten ihre Form."""
        data = np.random.randn(1000, 2)
        buffer = SampleBuffer(data=data, sample_rate=48000)

        assert buffer.num_channels == 2
        assert buffer.get_channel(1).shape == (1000,)
        np.testing.assert_array_equal(buffer.get_channel(1), data[:, 1])

    def test_from_channels(self):
        """Aufbau aus einzelnen Kanälen."""
        left = [0.0, 0.5, 1.0]
        right = [0.0, -0.5, -1.0]
        buffer = SampleBuffer.from_channels([left, right], 8000)

        assert buffer.num_channels == 2
        assert buffer.num_frames == 3
        np.testing.assert_array_equal(buffer.data[1], [0.5, -0.5])

    def test_channel_mismatch(self):
        """Unterschiedliche Kanallängen sind ein Programmierfehler."""
        with pytest.raises(ChannelMismatchError):
            SampleBuffer.from_channels([[0.0, 1.0], [0.0]], 8000)

        with pytest.raises(AssertionError):
            SampleBuffer.from_channels([[0.0, 1.0], [0.0]], 8000)

    def test_no_channels(self):
        """Mindestens ein Kanal ist erforderlich."""
        with pytest.raises(InvalidParameterError):
            SampleBuffer.from_channels([], 8000)

    def test_invalid_sample_rate(self):
        """Samplerate muss positiv sein."""
        with pytest.raises(InvalidParameterError):
            SampleBuffer(data=np.zeros(10), sample_rate=0)

        with pytest.raises(InvalidParameterError):
            SampleBuffer(data=np.zeros(10), sample_rate=-44100)

    def test_immutable(self):
        """Daten sind schreibgeschützt."""
        buffer = SampleBuffer(data=np.zeros(10), sample_rate=8000)

        assert not buffer.data.flags.writeable
        with pytest.raises(ValueError):
            buffer.data[0, 0] = 1.0

    def test_source_array_is_copied(self):
        """Änderungen am Quellarray wirken nicht auf den Buffer."""
        source = np.zeros(10)
        buffer = SampleBuffer(data=source, sample_rate=8000)

        source[0] = 1.0
        assert buffer.data[0, 0] == 0.0

    def test_empty_buffer(self):
        """Leerer Buffer ist gültig."""
        buffer = SampleBuffer(data=np.zeros((0, 2)), sample_rate=8000)

        assert buffer.is_empty
        assert buffer.num_channels == 2
        assert buffer.duration_seconds == 0.0

    def test_get_channel_out_of_range(self):
        """Ungültiger Kanalindex wird abgelehnt."""
        buffer = SampleBuffer(data=np.zeros(10), sample_rate=8000)

        with pytest.raises(InvalidParameterError):
            buffer.get_channel(1)

    def test_with_data(self):
        """with_data behält Samplerate, außer sie wird angegeben."""
        buffer = SampleBuffer(data=np.zeros(10), sample_rate=8000)

        assert buffer.with_data(np.ones(5)).sample_rate == 8000
        assert buffer.with_data(np.ones(5), sample_rate=16000).sample_rate == 16000
        assert buffer.num_frames == 10

    def test_channels_iteration(self):
        """Iteration liefert alle Kanäle."""
        buffer = SampleBuffer(data=np.random.randn(100, 3), sample_rate=8000)

        assert len(list(buffer.channels())) == 3
