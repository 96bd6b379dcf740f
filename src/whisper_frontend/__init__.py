"""Whisper frontend - audio decoding, FFT/STFT, mel filterbank and log-Mel features."""

from whisper_frontend.audio import ExtractorConfig, FeatureExtractor, Waveform, load_audio
from whisper_frontend.errors import (
    DecodeError,
    FrontendError,
    InvalidConfigurationError,
    TransformPreconditionError,
)

__all__ = [
    "DecodeError",
    "ExtractorConfig",
    "FeatureExtractor",
    "FrontendError",
    "InvalidConfigurationError",
    "TransformPreconditionError",
    "Waveform",
    "load_audio",
]
