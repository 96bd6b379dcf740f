"""Waveform and feature-matrix helpers: padding, slicing, normalization."""

import numpy as np

DEFAULT_PREEMPHASIS = 0.97


def pad_or_trim(array: np.ndarray, length: int, axis: int = -1) -> np.ndarray:
    """Zero-pad or trim ``array`` to ``length`` along ``axis``.

    Trimming keeps the leading samples; padding appends zeros. Works for
    waveforms (1-D) and feature matrices (pad the frame axis to fit a
    model's fixed input size, e.g. 3000 frames).
    """
    if length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    array = np.asarray(array)
    current = array.shape[axis]
    if current > length:
        return np.take(array, np.arange(length), axis=axis)
    if current < length:
        pad_widths = [(0, 0)] * array.ndim
        pad_widths[axis] = (0, length - current)
        return np.pad(array, pad_widths)
    return array.copy()


def slice_features(features: np.ndarray, start: int, length: int) -> np.ndarray:
    """Frames ``[start, start + length)`` of a (n_mels, n_frames) matrix.

    The slice is clipped at the last frame; a start past the end yields a
    matrix with zero frames.
    """
    if start < 0 or length < 0:
        raise ValueError(f"start and length must be non-negative, got {start}, {length}")
    return features[:, start : start + length].copy()


def normalize_audio(samples: np.ndarray) -> np.ndarray:
    """float32 waveform, rescaled only if its peak exceeds 1.0."""
    audio = np.asarray(samples, dtype=np.float32)
    if audio.size == 0:
        return audio.copy()
    peak = float(np.abs(audio).max())
    if peak > 1.0:
        return audio / peak
    return audio.copy()


def apply_preemphasis(samples: np.ndarray, coeff: float = DEFAULT_PREEMPHASIS) -> np.ndarray:
    """First-order pre-emphasis filter y[n] = x[n] - coeff * x[n-1]."""
    x = np.asarray(samples, dtype=np.float32)
    if x.size == 0 or coeff == 0.0:
        return x.copy()
    return np.append(x[0], x[1:] - coeff * x[:-1]).astype(np.float32)
