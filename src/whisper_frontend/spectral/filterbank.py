"""Slaney-style mel filterbank."""

import threading
from typing import Dict, Optional, Tuple

import numpy as np

from whisper_frontend.errors import InvalidConfigurationError

# Slaney mel scale: linear below 1 kHz, logarithmic above.
_F_SP = 200.0 / 3
_MIN_LOG_HZ = 1000.0
_MIN_LOG_MEL = _MIN_LOG_HZ / _F_SP
_LOGSTEP = np.log(6.4) / 27.0


def hz_to_mel(frequencies):
    """Convert Hz to Slaney mels (scalar or array)."""
    f = np.asarray(frequencies, dtype=np.float64)
    linear = f / _F_SP
    log = _MIN_LOG_MEL + np.log(np.maximum(f, _MIN_LOG_HZ) / _MIN_LOG_HZ) / _LOGSTEP
    return np.where(f >= _MIN_LOG_HZ, log, linear)[()]


def mel_to_hz(mels):
    """Convert Slaney mels to Hz (scalar or array)."""
    m = np.asarray(mels, dtype=np.float64)
    linear = _F_SP * m
    log = _MIN_LOG_HZ * np.exp(_LOGSTEP * (np.maximum(m, _MIN_LOG_MEL) - _MIN_LOG_MEL))
    return np.where(m >= _MIN_LOG_MEL, log, linear)[()]


def mel_frequencies(n_mels: int, fmin: float, fmax: float) -> np.ndarray:
    """``n_mels`` frequencies in Hz, evenly spaced on the mel scale."""
    mels = np.linspace(hz_to_mel(fmin), hz_to_mel(fmax), n_mels)
    return mel_to_hz(mels)


def fft_frequencies(sample_rate: float, n_fft: int) -> np.ndarray:
    """Center frequency of each non-negative rfft bin."""
    return np.linspace(0.0, sample_rate / 2.0, n_fft // 2 + 1)


def mel_filterbank(
    sample_rate: int,
    n_fft: int,
    n_mels: int,
    fmin: float = 0.0,
    fmax: Optional[float] = None,
) -> np.ndarray:
    """Build a triangular mel filterbank with Slaney area normalization.

    Each filter rises from mel point i to i+1 and falls to i+2 and is
    scaled by ``2 / (f[i+2] - f[i])`` so every filter has equal area.

    Returns:
        float32 array, shape (n_mels, n_fft // 2 + 1), all weights >= 0.
    """
    if n_mels <= 0:
        raise InvalidConfigurationError(f"n_mels must be positive, got {n_mels}")
    if n_fft < 2:
        raise InvalidConfigurationError(f"n_fft must be >= 2, got {n_fft}")
    if sample_rate <= 0:
        raise InvalidConfigurationError(f"sample_rate must be positive, got {sample_rate}")
    if fmax is None:
        fmax = sample_rate / 2.0
    if not 0.0 <= fmin < fmax:
        raise InvalidConfigurationError(f"need 0 <= fmin < fmax, got fmin={fmin}, fmax={fmax}")

    fftfreqs = fft_frequencies(sample_rate, n_fft)
    mel_f = mel_frequencies(n_mels + 2, fmin, fmax)

    fdiff = np.diff(mel_f)
    ramps = np.subtract.outer(mel_f, fftfreqs)
    lower = -ramps[:-2] / fdiff[:-1, np.newaxis]
    upper = ramps[2:] / fdiff[1:, np.newaxis]
    weights = np.maximum(0.0, np.minimum(lower, upper))

    enorm = 2.0 / (mel_f[2 : n_mels + 2] - mel_f[:n_mels])
    weights *= enorm[:, np.newaxis]
    return weights.astype(np.float32)


class MelFilterCache:
    """Filterbanks keyed by (sample_rate, n_fft, n_mels).

    Entries are written once and marked read-only, so lookups never lock.
    """

    def __init__(self):
        self._filters: Dict[Tuple[int, int, int], np.ndarray] = {}
        self._lock = threading.Lock()

    def get(self, sample_rate: int, n_fft: int, n_mels: int) -> np.ndarray:
        key = (int(sample_rate), int(n_fft), int(n_mels))
        filters = self._filters.get(key)
        if filters is not None:
            return filters
        with self._lock:
            filters = self._filters.get(key)
            if filters is None:
                filters = mel_filterbank(*key)
                filters.flags.writeable = False
                self._filters[key] = filters
        return filters

    def __contains__(self, key: Tuple[int, int, int]) -> bool:
        return key in self._filters

    def __len__(self) -> int:
        return len(self._filters)
