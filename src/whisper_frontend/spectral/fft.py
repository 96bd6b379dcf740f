"""Discrete Fourier transform for arbitrary sizes.

Power-of-two sizes run an iterative radix-2 Cooley-Tukey transform. Every
other size is rewritten as a circular convolution (Bluestein's chirp-z
algorithm) that is itself evaluated with power-of-two transforms, so all
sizes are O(N log N).

All transforms operate on the last axis and accept any leading batch shape.
"""

from functools import lru_cache
from typing import Tuple

import numpy as np

from whisper_frontend.errors import TransformPreconditionError


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n (1 for n <= 1)."""
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def _read_only(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


@lru_cache(maxsize=32)
def _bit_reversal(n: int) -> np.ndarray:
    bits = n.bit_length() - 1
    idx = np.arange(n)
    rev = np.zeros(n, dtype=np.intp)
    for b in range(bits):
        rev |= ((idx >> b) & 1) << (bits - 1 - b)
    return _read_only(rev)


@lru_cache(maxsize=64)
def _twiddles(size: int) -> np.ndarray:
    """exp(-2j*pi*k/size) for k in [0, size/2)."""
    return _read_only(np.exp(-2j * np.pi * np.arange(size // 2) / size))


@lru_cache(maxsize=32)
def _rfft_twiddles(n: int) -> np.ndarray:
    return _read_only(np.exp(-2j * np.pi * np.arange(n // 2 + 1) / n))


def _radix2(x: np.ndarray) -> np.ndarray:
    """Radix-2 decimation in time over a (batch, n) array, n a power of two."""
    batch, n = x.shape
    out = x[:, _bit_reversal(n)]
    size = 2
    while size <= n:
        half = size // 2
        blocks = out.reshape(batch, n // size, size)
        even = blocks[..., :half]
        odd = blocks[..., half:] * _twiddles(size)
        out = np.concatenate((even + odd, even - odd), axis=-1).reshape(batch, n)
        size *= 2
    return out


def _inverse_radix2(x: np.ndarray) -> np.ndarray:
    return np.conj(_radix2(np.conj(x))) / x.shape[-1]


@lru_cache(maxsize=32)
def _bluestein_kernel(n: int) -> Tuple[np.ndarray, np.ndarray]:
    """Chirp sequence and the spectrum of its conjugate convolution kernel."""
    m = next_power_of_two(2 * n - 1)
    k = np.arange(n, dtype=np.int64)
    # k^2 mod 2n keeps the chirp phase accurate for large n
    chirp = np.exp(-1j * np.pi * ((k * k) % (2 * n)) / n)
    kernel = np.zeros(m, dtype=np.complex128)
    kernel[:n] = np.conj(chirp)
    kernel[m - n + 1:] = np.conj(chirp[1:])[::-1]
    kernel_spectrum = _radix2(kernel[np.newaxis, :])[0]
    return _read_only(chirp), _read_only(kernel_spectrum)


def _bluestein(x: np.ndarray) -> np.ndarray:
    batch, n = x.shape
    chirp, kernel_spectrum = _bluestein_kernel(n)
    padded = np.zeros((batch, kernel_spectrum.shape[0]), dtype=np.complex128)
    padded[:, :n] = x * chirp
    convolved = _inverse_radix2(_radix2(padded) * kernel_spectrum)
    return convolved[:, :n] * chirp


def _transform(batch: np.ndarray) -> np.ndarray:
    if is_power_of_two(batch.shape[-1]):
        return _radix2(batch)
    return _bluestein(batch)


def _transform_size(x: np.ndarray) -> int:
    if x.ndim == 0 or x.shape[-1] == 0:
        raise TransformPreconditionError("transform size must be a positive integer")
    return x.shape[-1]


def fft(x) -> np.ndarray:
    """N-point DFT of ``x`` over its last axis.

    Args:
        x: Real or complex array, shape (..., N), N >= 1.

    Returns:
        complex128 array with the same shape as ``x``.

    Raises:
        TransformPreconditionError: If N is 0.
    """
    x = np.asarray(x)
    n = _transform_size(x)
    batch = x.astype(np.complex128, copy=False).reshape(-1, n)
    return _transform(batch).reshape(x.shape)


def ifft(x) -> np.ndarray:
    """Inverse DFT over the last axis, scaled by 1/N."""
    x = np.asarray(x)
    n = _transform_size(x)
    return np.conj(fft(np.conj(x))) / n


def rfft(x) -> np.ndarray:
    """Non-negative frequency half of the DFT of real input.

    Returns the first ``N // 2 + 1`` bins. Even sizes pack the real signal
    into an N/2-point complex transform and split the result with the
    conjugate-symmetry identity; odd sizes truncate a full transform.
    """
    x = np.asarray(x)
    if np.iscomplexobj(x):
        raise TransformPreconditionError("rfft expects real-valued input")
    n = _transform_size(x)
    if n % 2:
        return fft(x)[..., : n // 2 + 1]

    half = n // 2
    batch = x.astype(np.float64, copy=False).reshape(-1, n)
    z = _transform(batch[:, 0::2] + 1j * batch[:, 1::2])

    k = np.arange(half + 1)
    zk = z[:, k % half]
    zc = np.conj(z[:, (-k) % half])
    even = 0.5 * (zk + zc)
    odd = -0.5j * (zk - zc)
    out = even + _rfft_twiddles(n) * odd
    return out.reshape(x.shape[:-1] + (half + 1,))
