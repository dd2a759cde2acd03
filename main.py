#!/usr/bin/env python3
"""
Resolution Lab - Einstiegspunkt

Vergleicht ein Audiosignal vor und nach Reduktion von Samplerate und
Bittiefe: Spektrum, Quantisierungsrauschen und Speicherbedarf.

Verwendung:
    python main.py audio_file [--sample-rate HZ] [--bit-depth BITS]
                              [--fft-size N] [--output-dir DIR]

Beispiel:
    python main.py recording.wav --sample-rate 8000 --bit-depth 8 --output-dir out
"""

import argparse
import logging
import sys

logger = logging.getLogger("resolution_lab")


def build_parser() -> argparse.ArgumentParser:
    from resolution_lab.core.pipeline import SAMPLE_RATE_CHOICES
    from resolution_lab.core.quantization import SUPPORTED_BIT_DEPTHS
    from resolution_lab.core.spectral import DEFAULT_FFT_SIZE

    parser = argparse.ArgumentParser(
        prog="resolution-lab",
        description="Compare audio before and after sample-rate and bit-depth reduction.",
    )
    parser.add_argument("input", help="Input audio file (WAV or MP3)")
    parser.add_argument(
        "--sample-rate", type=int, default=44100,
        help=f"Target sample rate in Hz (common: {', '.join(map(str, SAMPLE_RATE_CHOICES))})",
    )
    parser.add_argument(
        "--bit-depth", type=int, default=16, choices=SUPPORTED_BIT_DEPTHS,
        help="Target bit depth",
    )
    parser.add_argument(
        "--fft-size", type=int, default=DEFAULT_FFT_SIZE,
        help="FFT size for the spectrum (power of two)",
    )
    parser.add_argument(
        "--output-dir", default=None,
        help="Export original and processed WAV files into this directory",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    """Run the comparison and print a summary."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from resolution_lab.core import (
        InvalidParameterError,
        compare,
        compute_peak,
        export_audio,
        load_audio,
        process,
    )
    from resolution_lab.utils import (
        format_channels,
        format_db,
        format_duration,
        format_file_size,
        format_frequency,
        format_sample_rate,
    )

    try:
        audio = load_audio(args.input)
        original = audio.buffer
        processed = process(original, args.sample_rate, args.bit_depth)
        report = compare(original, processed, args.bit_depth, args.fft_size)
    except (FileNotFoundError, ValueError, RuntimeError) as e:
        # InvalidParameterError and WavFormatError are ValueErrors
        logger.error("%s", e)
        return 1

    print(f"Original:  {format_sample_rate(original.sample_rate)}, "
          f"{format_channels(original.num_channels)}, "
          f"{format_duration(original.duration_seconds)}, "
          f"{format_file_size(report.original_bytes)} (32-bit float)")
    print(f"Processed: {format_sample_rate(processed.sample_rate)}, "
          f"{args.bit_depth} bit, "
          f"{format_file_size(report.processed_bytes)} "
          f"({report.size_ratio:.1%} of original)")

    print(f"Peak level: original {format_db(compute_peak(original.data, as_db=True))}, "
          f"processed {format_db(compute_peak(processed.data, as_db=True))}")

    if report.snr_db is not None:
        print(f"Quantization SNR: {format_db(report.snr_db)}")

    for label, spectrum in (
        ("Original", report.original_spectrum),
        ("Processed", report.processed_spectrum),
    ):
        if spectrum.num_chunks == 0:
            print(f"{label} spectrum: signal shorter than {spectrum.fft_size} samples")
        else:
            print(f"{label} spectrum peak: {format_frequency(spectrum.peak_frequency)} "
                  f"({spectrum.num_chunks} chunks, {spectrum.bin_hz:.2f} Hz/bin)")

    if args.output_dir:
        try:
            for kind, buffer in (("original", original), ("processed", processed)):
                path = export_audio(
                    buffer, args.output_dir, kind, args.sample_rate, args.bit_depth
                )
                print(f"Exported {path}")
        except (OSError, InvalidParameterError) as e:
            logger.error("Export failed: %s", e)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
