"""Feature extractor configuration.

Canonical values for Whisper-family acoustic models:
- Audio: mono 16 kHz
- Features: 80-bin log-Mel (Slaney scale, area-normalized)
- STFT: 400-sample periodic Hann window (25 ms) / 160-sample hop (10 ms)
- Chunks: 30 s, i.e. 480000 samples and 3000 frames
"""

import math
from dataclasses import asdict, dataclass
from numbers import Integral, Real
from typing import Any, Dict

from whisper_frontend.errors import InvalidConfigurationError


@dataclass(frozen=True)
class ExtractorConfig:
    """Immutable log-Mel extraction parameters."""

    n_mels: int = 80
    sample_rate: int = 16_000
    hop_length: int = 160
    chunk_length: float = 30
    n_fft: int = 400

    def __post_init__(self) -> None:
        for name in ("n_mels", "sample_rate", "hop_length", "n_fft"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Integral) or value <= 0:
                raise InvalidConfigurationError(f"{name} must be a positive integer, got {value!r}")
        if (
            isinstance(self.chunk_length, bool)
            or not isinstance(self.chunk_length, Real)
            or not math.isfinite(self.chunk_length)
            or not self.chunk_length > 0
        ):
            raise InvalidConfigurationError(
                f"chunk_length must be a positive number of seconds, got {self.chunk_length!r}"
            )
        if self.n_fft < 2:
            raise InvalidConfigurationError(f"n_fft must be >= 2, got {self.n_fft}")

    @property
    def n_samples(self) -> int:
        """Samples in one nominal chunk."""
        return int(round(self.chunk_length * self.sample_rate))

    @property
    def nb_max_frames(self) -> int:
        """Frames the model expects for one nominal chunk."""
        return self.n_samples // self.hop_length

    @property
    def time_per_frame(self) -> float:
        """Seconds between consecutive frames."""
        return self.hop_length / self.sample_rate

    @property
    def frames_per_second(self) -> float:
        return self.sample_rate / self.hop_length

    @property
    def n_freqs(self) -> int:
        """Non-negative frequency bins per STFT frame."""
        return self.n_fft // 2 + 1

    def feature_kwargs(self) -> Dict[str, Any]:
        return asdict(self)
