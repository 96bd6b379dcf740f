"""Log-Mel feature extraction for Whisper-family acoustic models.

Recipe, applied per segment:
STFT (periodic Hann, centered reflect padding) -> power spectrum ->
mel projection -> log10 with a 1e-10 floor -> clamp to 8.0 below the
segment maximum -> (x + 4) / 4.
"""

import logging
import math
from numbers import Real
from typing import List, Optional, Union

import numpy as np

from whisper_frontend.audio.config import ExtractorConfig
from whisper_frontend.audio.loader import Waveform
from whisper_frontend.audio.processing import pad_or_trim
from whisper_frontend.errors import InvalidConfigurationError
from whisper_frontend.spectral.filterbank import MelFilterCache
from whisper_frontend.spectral.stft import hann_window, stft

logger = logging.getLogger(__name__)

LOG_FLOOR = 1e-10
DYNAMIC_RANGE = 8.0

AudioInput = Union[np.ndarray, Waveform]


class FeatureExtractor:
    """Turn mono waveforms at ``config.sample_rate`` into log-Mel matrices.

    Output matrices have shape (n_mels, n_frames). A segment of L samples
    yields ``L // hop_length + 1`` frames.

    The window and the mel filterbank for the configured parameters are
    built at construction; other filterbanks requested through
    ``get_mel_filters`` are cached on the instance. Extraction holds no
    other state, so one instance can serve many waveforms and threads.
    """

    def __init__(
        self,
        config: Optional[ExtractorConfig] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.config = config or ExtractorConfig()
        self.log = log or logger
        self._window = hann_window(self.config.n_fft)
        self._window.flags.writeable = False
        self._filter_cache = MelFilterCache()
        self._mel_filters = self.get_mel_filters(
            self.config.sample_rate,
            self.config.n_fft,
            self.config.n_mels,
        )

    @property
    def sampling_rate(self) -> int:
        return self.config.sample_rate

    @property
    def n_mels(self) -> int:
        return self.config.n_mels

    @property
    def n_fft(self) -> int:
        return self.config.n_fft

    @property
    def hop_length(self) -> int:
        return self.config.hop_length

    @property
    def chunk_length(self) -> float:
        return self.config.chunk_length

    @property
    def n_samples(self) -> int:
        return self.config.n_samples

    @property
    def nb_max_frames(self) -> int:
        return self.config.nb_max_frames

    @property
    def time_per_frame(self) -> float:
        return self.config.time_per_frame

    @property
    def window(self) -> np.ndarray:
        return self._window

    @property
    def mel_filters(self) -> np.ndarray:
        """Filterbank for the configured parameters, (n_mels, n_fft // 2 + 1)."""
        return self._mel_filters

    def get_mel_filters(self, sample_rate: int, n_fft: int, n_mels: int) -> np.ndarray:
        """Read-only mel filterbank, built once per parameter triple."""
        return self._filter_cache.get(sample_rate, n_fft, n_mels)

    def _empty(self) -> np.ndarray:
        return np.zeros((self.config.n_mels, 0), dtype=np.float32)

    @staticmethod
    def _as_samples(audio: AudioInput) -> np.ndarray:
        if isinstance(audio, Waveform):
            return audio.samples
        samples = np.asarray(audio, dtype=np.float32)
        if samples.ndim != 1:
            raise ValueError(f"expected a mono 1-D waveform, got shape {samples.shape}")
        return samples

    def log_mel_spectrogram(self, samples: np.ndarray) -> np.ndarray:
        """Apply the full recipe to one segment, including its own range clamp."""
        if samples.size == 0:
            return self._empty()
        spec = stft(
            samples,
            n_fft=self.config.n_fft,
            hop_length=self.config.hop_length,
            window=self._window,
        )
        power = np.abs(spec) ** 2
        mel = self._mel_filters @ power
        log_spec = np.log10(np.maximum(mel, LOG_FLOOR))
        log_spec = np.maximum(log_spec, log_spec.max() - DYNAMIC_RANGE)
        return ((log_spec + 4.0) / 4.0).astype(np.float32)

    def extract(self, audio: AudioInput, padding: int = 0) -> np.ndarray:
        """Extract features from the whole waveform as a single segment.

        Args:
            audio: Mono waveform at ``config.sample_rate``.
            padding: Zero samples appended before extraction, e.g.
                ``n_samples`` so the trailing frames see a full window.

        Returns:
            float32 array (n_mels, n_frames); (n_mels, 0) for empty input.
        """
        if padding < 0:
            raise ValueError(f"padding must be non-negative, got {padding}")
        samples = self._as_samples(audio)
        if samples.size == 0:
            self.log.debug("Empty waveform, returning empty features")
            return self._empty()
        if padding:
            samples = np.pad(samples, (0, padding))
        features = self.log_mel_spectrogram(samples)
        self.log.debug(
            "Extracted log-Mel features",
            extra={"num_samples": samples.size, "shape": features.shape},
        )
        return features

    def extract_chunks(
        self,
        audio: AudioInput,
        chunk_length: Optional[float] = None,
    ) -> List[np.ndarray]:
        """Split into non-overlapping chunks and extract each independently.

        Every chunk gets its own centering pad and its own dynamic-range
        clamp, so loudness normalization is local to the chunk. The last
        chunk may be shorter.

        Args:
            audio: Mono waveform at ``config.sample_rate``.
            chunk_length: Chunk duration in seconds; None processes the
                whole waveform as one chunk.

        Returns:
            One (n_mels, n_frames) matrix per chunk; empty list for empty input.
        """
        samples = self._as_samples(audio)
        if samples.size == 0:
            return []
        if chunk_length is None:
            return [self.log_mel_spectrogram(samples)]

        if (
            isinstance(chunk_length, bool)
            or not isinstance(chunk_length, Real)
            or not math.isfinite(chunk_length)
        ):
            raise InvalidConfigurationError(
                f"chunk_length must be a finite number of seconds, got {chunk_length!r}"
            )
        chunk_samples = int(round(chunk_length * self.config.sample_rate))
        if chunk_samples < 1:
            raise InvalidConfigurationError(
                f"chunk_length must cover at least one sample, got {chunk_length}"
            )
        chunks = [
            self.log_mel_spectrogram(samples[start : start + chunk_samples])
            for start in range(0, samples.size, chunk_samples)
        ]
        self.log.debug(
            "Extracted chunked log-Mel features",
            extra={
                "num_samples": samples.size,
                "chunk_samples": chunk_samples,
                "num_chunks": len(chunks),
            },
        )
        return chunks

    def compute_mel_spectrogram(
        self,
        audio: AudioInput,
        padding: int = 0,
        chunk_length: Optional[float] = None,
    ) -> np.ndarray:
        """Chunk-wise extraction concatenated along the frame axis.

        ``padding`` zero samples are appended to non-empty input before
        chunking, as in ``extract``.
        """
        if padding < 0:
            raise ValueError(f"padding must be non-negative, got {padding}")
        samples = self._as_samples(audio)
        if padding and samples.size:
            samples = np.pad(samples, (0, padding))
        chunks = self.extract_chunks(samples, chunk_length)
        if not chunks:
            return self._empty()
        return np.concatenate(chunks, axis=1)

    def pad_or_trim_frames(self, features: np.ndarray, length: Optional[int] = None) -> np.ndarray:
        """Fit features to the model's fixed frame count (``nb_max_frames``)."""
        return pad_or_trim(features, self.nb_max_frames if length is None else length, axis=-1)
