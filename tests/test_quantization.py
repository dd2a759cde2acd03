"""
Tests für Bittiefen-Quantisierung.
"""

import pytest
import numpy as np

from resolution_lab.core.buffer import SampleBuffer
from resolution_lab.core.errors import InvalidParameterError
from resolution_lab.core.quantization import (
    SUPPORTED_BIT_DEPTHS,
    QuantizationSpec,
    quantize,
    quantization_snr_db,
    round_half_away,
    theoretical_snr_db,
)


def _random_buffer(num_frames=10000, channels=2, seed=0):
    rng = np.random.default_rng(seed)
    return SampleBuffer(
        data=rng.uniform(-1.0, 1.0, size=(num_frames, channels)),
        sample_rate=44100,
    )


class TestQuantizationSpec:
    """Tests für Quantisierungsparameter."""

    def test_max_levels(self):
        """Maximaler Pegel pro Bittiefe."""
        assert QuantizationSpec(8).max_level == 127
        assert QuantizationSpec(16).max_level == 32767
        assert QuantizationSpec(24).max_level == 8388607

    def test_num_levels(self):
        """Anzahl der Stufen = 2 * max_level + 1."""
        assert QuantizationSpec(8).num_levels == 255

    @pytest.mark.parametrize("bit_depth", [0, 4, 12, 32, -16, 16.0, True])
    def test_invalid_bit_depth(self, bit_depth):
        """Nicht unterstützte Bittiefen werden abgelehnt."""
        with pytest.raises(InvalidParameterError):
            QuantizationSpec(bit_depth)

    def test_invalid_is_value_error(self):
        """InvalidParameterError ist ein ValueError."""
        with pytest.raises(ValueError):
            QuantizationSpec(12)


class TestRounding:
    """Tests für Rundungsmodus."""

    def test_half_away_from_zero(self):
        """Halbe Werte werden von Null weg gerundet."""
        values = np.array([0.5, 1.5, 2.5, -0.5, -1.5, 0.49, -0.51])
        expected = np.array([1, 2, 3, -1, -2, 0, -1])

        np.testing.assert_array_equal(round_half_away(values), expected)

    def test_just_below_half(self):
        """Der größte Wert unter 0.5 rundet auf 0."""
        below = np.nextafter(0.5, 0.0)
        values = np.array([below, -below, np.nextafter(1.5, 1.0)])

        np.testing.assert_array_equal(round_half_away(values), [0.0, 0.0, 1.0])

    def test_large_values_unchanged(self):
        """Ganzzahlige Werte jenseits 2^52 bleiben unverändert."""
        values = np.array([2.0 ** 53, -(2.0 ** 53) - 2, 4503599627370497.0])

        np.testing.assert_array_equal(round_half_away(values), values)

    def test_step_size(self):
        """Stufenabstand ist 1 / max_level."""
        assert QuantizationSpec(8).step_size == 1 / 127
        assert QuantizationSpec(24).step_size == 1 / 8388607


class TestQuantize:
    """Tests für Quantisierung."""

    @pytest.mark.parametrize("bit_depth", SUPPORTED_BIT_DEPTHS)
    def test_idempotence(self, bit_depth):
        """Doppelte Quantisierung ändert nichts."""
        spec = QuantizationSpec(bit_depth)
        once = quantize(_random_buffer(), spec)
        twice = quantize(once, spec)

        np.testing.assert_array_equal(twice.data, once.data)

    @pytest.mark.parametrize("bit_depth", SUPPORTED_BIT_DEPTHS)
    def test_boundedness(self, bit_depth):
        """Ausgabe bleibt in [-1, 1]."""
        data = np.concatenate([np.linspace(-1, 1, 1001), [-1.0, 1.0]])
        result = quantize(SampleBuffer(data=data, sample_rate=8000), bit_depth)

        assert np.all(result.data <= 1.0)
        assert np.all(result.data >= -1.0)
        assert result.data.max() == 1.0
        assert result.data.min() == -1.0

    def test_level_count_8bit(self):
        """8 Bit ergibt höchstens 255 Stufen."""
        data = np.linspace(-1, 1, 100001)
        result = quantize(SampleBuffer(data=data, sample_rate=8000), 8)

        assert len(np.unique(result.data)) <= 255

    def test_values_on_grid(self):
        """Alle Werte liegen auf dem Raster q / max_level."""
        result = quantize(_random_buffer(), 16)
        scaled = result.data * 32767

        np.testing.assert_allclose(scaled, np.round(scaled), atol=1e-6)

    def test_error_bounded_by_half_step(self):
        """Quantisierungsfehler <= halbe Stufe."""
        buffer = _random_buffer()
        result = quantize(buffer, 8)

        half_step = QuantizationSpec(8).step_size / 2
        assert np.max(np.abs(result.data - buffer.data)) <= half_step + 1e-12

    def test_no_clamping(self):
        """Werte außerhalb [-1, 1] werden nicht begrenzt."""
        buffer = SampleBuffer(data=np.array([1.5, -1.5]), sample_rate=8000)
        result = quantize(buffer, 8)

        # 1.5 * 127 = 190.5 -> 191
        assert result.data[0, 0] == pytest.approx(191 / 127)
        assert result.data[1, 0] == pytest.approx(-191 / 127)
        assert result.data[0, 0] > 1.0

    def test_spec_and_int_equivalent(self):
        """QuantizationSpec und int liefern dasselbe Ergebnis."""
        buffer = _random_buffer(1000)

        np.testing.assert_array_equal(
            quantize(buffer, 16).data,
            quantize(buffer, QuantizationSpec(16)).data,
        )

    def test_preserves_shape_and_rate(self):
        """Form und Samplerate bleiben erhalten."""
        buffer = _random_buffer(500, channels=3)
        result = quantize(buffer, 24)

        assert result.data.shape == (500, 3)
        assert result.sample_rate == 44100

    def test_empty_buffer(self):
        """Leerer Buffer bleibt leer."""
        buffer = SampleBuffer(data=np.zeros((0, 1)), sample_rate=8000)

        assert quantize(buffer, 8).num_frames == 0

    def test_invalid_bit_depth(self):
        """Ungültige Bittiefe wird abgelehnt."""
        with pytest.raises(InvalidParameterError):
            quantize(_random_buffer(10), 12)


class TestQuantizationNoise:
    """Tests für Quantisierungsrauschen."""

    def test_snr_16bit_sine(self):
        """SNR eines Sinustons nahe 6.02 N + 1.76 dB."""
        t = np.arange(44100) / 44100
        amplitude = 0.9
        sine = amplitude * np.sin(2 * np.pi * 440 * t)
        buffer = SampleBuffer(data=sine, sample_rate=44100)

        snr = quantization_snr_db(buffer, quantize(buffer, 16))
        expected = theoretical_snr_db(16) + 20 * np.log10(amplitude)

        assert snr == pytest.approx(expected, abs=2.0)

    def test_snr_increases_with_depth(self):
        """Mehr Bits, weniger Rauschen."""
        buffer = _random_buffer(5000)

        snrs = [quantization_snr_db(buffer, quantize(buffer, d)) for d in SUPPORTED_BIT_DEPTHS]

        assert snrs[0] < snrs[1] < snrs[2]

    def test_snr_identical(self):
        """Identische Buffer haben unendliches SNR."""
        buffer = _random_buffer(100)

        assert quantization_snr_db(buffer, buffer) == np.inf

    def test_snr_shape_mismatch(self):
        """Unterschiedliche Form wird abgelehnt."""
        a = SampleBuffer(data=np.zeros(100), sample_rate=8000)
        b = SampleBuffer(data=np.zeros(50), sample_rate=8000)

        with pytest.raises(InvalidParameterError):
            quantization_snr_db(a, b)
