"""CLI for inspecting log-Mel features of a WAV file."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np

from whisper_frontend.audio import ExtractorConfig, FeatureExtractor, load_audio
from whisper_frontend.errors import DecodeError, InvalidConfigurationError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract Whisper-style log-Mel features from a PCM WAV file and print shape statistics"
    )
    parser.add_argument("audio", type=Path, help="Input WAV file (16-bit PCM)")
    parser.add_argument(
        "--chunk-length",
        type=float,
        default=None,
        help="Split into chunks of this many seconds (default: whole file as one segment)",
    )
    parser.add_argument("--n-mels", type=int, default=80, help="Mel bins (default: 80)")
    parser.add_argument("--n-fft", type=int, default=400, help="FFT size (default: 400)")
    parser.add_argument("--hop-length", type=int, default=160, help="Hop length (default: 160)")
    parser.add_argument(
        "--sample-rate",
        type=int,
        default=16_000,
        help="Target sample rate in Hz (default: 16000)",
    )
    parser.add_argument(
        "--pad-to-frames",
        action="store_true",
        help="Pad or trim each matrix to the model's fixed frame count",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ExtractorConfig(
            n_mels=args.n_mels,
            sample_rate=args.sample_rate,
            hop_length=args.hop_length,
            n_fft=args.n_fft,
        )
        waveform = load_audio(args.audio, sample_rate=config.sample_rate)
        extractor = FeatureExtractor(config)
        chunks = extractor.extract_chunks(waveform, args.chunk_length)
    except (DecodeError, InvalidConfigurationError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(f"{args.audio}: {waveform.duration:.2f}s at {waveform.sample_rate} Hz ({len(waveform)} samples)")
    if not chunks:
        print("No audio: empty feature matrix")
        return 0

    for i, features in enumerate(chunks):
        if args.pad_to_frames:
            features = extractor.pad_or_trim_frames(features)
        print(
            f"chunk {i}: {features.shape[0]} mel bins x {features.shape[1]} frames, "
            f"min={features.min():.3f} max={features.max():.3f} mean={features.mean():.3f}"
        )
    total = sum(c.shape[1] for c in chunks)
    print(f"Total: {len(chunks)} chunk(s), {total} frames ({total * extractor.time_per_frame:.2f}s)")
    if np.isfinite(np.concatenate(chunks, axis=1)).all():
        print("All values finite")
    return 0


if __name__ == "__main__":
    sys.exit(main())
