"""Audio loading, waveform processing and log-Mel feature extraction."""

from whisper_frontend.audio.config import ExtractorConfig
from whisper_frontend.audio.features import FeatureExtractor
from whisper_frontend.audio.loader import Waveform, load_audio, load_audio_split_stereo, resample
from whisper_frontend.audio.processing import (
    apply_preemphasis,
    normalize_audio,
    pad_or_trim,
    slice_features,
)

__all__ = [
    "ExtractorConfig",
    "FeatureExtractor",
    "Waveform",
    "apply_preemphasis",
    "load_audio",
    "load_audio_split_stereo",
    "normalize_audio",
    "pad_or_trim",
    "resample",
    "slice_features",
]
