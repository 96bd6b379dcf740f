"""Short-time Fourier transform with centered framing."""

from typing import Optional

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from whisper_frontend.errors import InvalidConfigurationError
from whisper_frontend.spectral.fft import rfft

# Frames per rfft call; bounds temporaries on long recordings.
FRAME_BATCH = 512

PAD_MODES = ("reflect", "constant")


def hann_window(length: int, periodic: bool = True) -> np.ndarray:
    """Hann window coefficients.

    Args:
        length: Number of coefficients.
        periodic: If True (the default, as used for spectral analysis) the
            window is one period of a length+1 symmetric window with the
            last sample dropped. If False the window is symmetric.
    """
    if length <= 0:
        raise InvalidConfigurationError(f"window length must be positive, got {length}")
    if length == 1:
        return np.ones(1)
    denom = length if periodic else length - 1
    n = np.arange(length)
    return 0.5 - 0.5 * np.cos(2.0 * np.pi * n / denom)


def frame_count(num_samples: int, n_fft: int, hop_length: int, center: bool = True) -> int:
    """Number of STFT frames produced for ``num_samples`` input samples."""
    if num_samples <= 0:
        return 0
    padded = num_samples + 2 * (n_fft // 2) if center else num_samples
    padded = max(padded, n_fft)
    return 1 + (padded - n_fft) // hop_length


def _pad_window(window: np.ndarray, n_fft: int) -> np.ndarray:
    win_length = window.shape[0]
    if win_length == n_fft:
        return window
    left = (n_fft - win_length) // 2
    padded = np.zeros(n_fft, dtype=window.dtype)
    padded[left : left + win_length] = window
    return padded


def _center(signal: np.ndarray, pad: int, pad_mode: str) -> np.ndarray:
    # Reflection needs more samples than the pad width.
    if pad_mode == "reflect" and signal.shape[0] > pad:
        return np.pad(signal, pad, mode="reflect")
    return np.pad(signal, pad, mode="constant")


def stft(
    waveform: np.ndarray,
    n_fft: int,
    hop_length: int,
    win_length: Optional[int] = None,
    window: Optional[np.ndarray] = None,
    center: bool = True,
    pad_mode: str = "reflect",
) -> np.ndarray:
    """Compute the STFT of a mono waveform.

    With ``center=True`` the signal is padded by ``n_fft // 2`` samples on
    both ends, so frame ``t`` is centered on sample ``t * hop_length`` and a
    signal of L samples yields ``L // hop_length + 1`` frames.

    Args:
        waveform: 1-D real signal.
        n_fft: Transform size.
        hop_length: Stride between frames in samples.
        win_length: Window length (<= n_fft). Defaults to n_fft; shorter
            windows are zero-padded on both sides to n_fft.
        window: Window coefficients of length win_length. Defaults to a
            periodic Hann window.
        center: Pad the signal so frames are centered on their hop.
        pad_mode: "reflect" or "constant" (zeros) centering pad.

    Returns:
        complex128 array, shape (n_fft // 2 + 1, n_frames).
    """
    if n_fft < 1 or hop_length < 1:
        raise InvalidConfigurationError(
            f"n_fft and hop_length must be positive, got n_fft={n_fft}, hop_length={hop_length}"
        )
    if win_length is None:
        win_length = n_fft if window is None else len(window)
    if not 0 < win_length <= n_fft:
        raise InvalidConfigurationError(f"win_length must be in [1, {n_fft}], got {win_length}")
    if pad_mode not in PAD_MODES:
        raise InvalidConfigurationError(f"pad_mode must be one of {PAD_MODES}, got {pad_mode!r}")

    signal = np.asarray(waveform, dtype=np.float64)
    if signal.ndim != 1:
        raise ValueError(f"stft expects a 1-D waveform, got shape {signal.shape}")

    n_freqs = n_fft // 2 + 1
    if signal.size == 0:
        return np.zeros((n_freqs, 0), dtype=np.complex128)

    if window is None:
        window = hann_window(win_length)
    else:
        window = np.asarray(window, dtype=np.float64)
        if window.shape != (win_length,):
            raise InvalidConfigurationError(
                f"window must have shape ({win_length},), got {window.shape}"
            )
    window = _pad_window(window, n_fft)

    if center:
        signal = _center(signal, n_fft // 2, pad_mode)
    if signal.shape[0] < n_fft:
        signal = np.pad(signal, (0, n_fft - signal.shape[0]))

    frames = sliding_window_view(signal, n_fft)[::hop_length]
    n_frames = frames.shape[0]
    out = np.empty((n_freqs, n_frames), dtype=np.complex128)
    for start in range(0, n_frames, FRAME_BATCH):
        block = frames[start : start + FRAME_BATCH] * window
        out[:, start : start + block.shape[0]] = rfft(block).T
    return out
