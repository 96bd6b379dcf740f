"""PCM WAV decoding and resampling to the extractor's sample rate."""

import logging
import math
import struct
from dataclasses import dataclass
from numbers import Integral
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
import scipy.io.wavfile as wavfile
from scipy.signal import resample_poly

from whisper_frontend.errors import DecodeError, InvalidConfigurationError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Divisors mapping integer PCM to [-1, 1].
_PCM_SCALE = {
    np.dtype(np.int16): 32768.0,
    np.dtype(np.int32): 2147483648.0,
}


@dataclass(frozen=True, eq=False)
class Waveform:
    """Mono float32 samples tagged with their sample rate.

    ``samples`` is a private read-only copy of the input.
    """

    samples: np.ndarray
    sample_rate: int

    def __post_init__(self) -> None:
        samples = np.array(self.samples, dtype=np.float32)
        if samples.ndim != 1:
            raise ValueError(f"Waveform must be mono (1-D), got shape {samples.shape}")
        rate = self.sample_rate
        if isinstance(rate, bool) or not isinstance(rate, Integral) or rate <= 0:
            raise InvalidConfigurationError(f"sample_rate must be a positive integer, got {rate!r}")
        samples.flags.writeable = False
        object.__setattr__(self, "samples", samples)
        object.__setattr__(self, "sample_rate", int(rate))

    def __len__(self) -> int:
        return self.samples.shape[0]

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return len(self) / self.sample_rate


def _pcm_to_float(data: np.ndarray, path: Path) -> np.ndarray:
    """Integer or float PCM to float32 in [-1, 1], shape (n_samples, n_channels)."""
    if data.dtype in _PCM_SCALE:
        audio = data.astype(np.float32) / _PCM_SCALE[data.dtype]
    elif data.dtype == np.uint8:
        audio = (data.astype(np.float32) - 128.0) / 128.0
    elif data.dtype in (np.float32, np.float64):
        audio = data.astype(np.float32)
    else:
        raise DecodeError(path, f"unsupported PCM sample type {data.dtype}")
    if audio.ndim == 1:
        audio = audio[:, np.newaxis]
    return audio


def _read_wav(path: PathLike) -> Tuple[np.ndarray, int]:
    path = Path(path)
    if not path.is_file():
        raise DecodeError(path, "file not found")
    try:
        sample_rate, data = wavfile.read(str(path))
    except (OSError, ValueError, EOFError, struct.error) as e:
        raise DecodeError(path, str(e) or type(e).__name__) from e
    if data.ndim not in (1, 2):
        raise DecodeError(path, f"unexpected sample layout with shape {data.shape}")
    return _pcm_to_float(data, path), int(sample_rate)


def resample(
    waveform: Waveform,
    target_rate: int,
    log: Optional[logging.Logger] = None,
) -> Waveform:
    """Resample with a polyphase filter; no-op when already at ``target_rate``."""
    log = log or logger
    if isinstance(target_rate, bool) or not isinstance(target_rate, Integral) or target_rate <= 0:
        raise InvalidConfigurationError(f"target_rate must be a positive integer, got {target_rate!r}")
    if waveform.sample_rate == target_rate:
        return waveform

    log.info(
        f"Resampling audio from {waveform.sample_rate}Hz to {target_rate}Hz",
        extra={"num_samples": len(waveform)},
    )
    if len(waveform) == 0:
        return Waveform(np.zeros(0, dtype=np.float32), target_rate)

    g = math.gcd(waveform.sample_rate, target_rate)
    up, down = target_rate // g, waveform.sample_rate // g
    samples = resample_poly(waveform.samples.astype(np.float64), up, down)
    return Waveform(samples, target_rate)


def load_audio(
    path: PathLike,
    sample_rate: Optional[int] = None,
    log: Optional[logging.Logger] = None,
) -> Waveform:
    """Decode a PCM WAV file into a mono waveform.

    Args:
        path: WAV file. 16-bit PCM is the guaranteed layout; 32-bit int,
            8-bit unsigned and float WAV are also read.
        sample_rate: Resample to this rate (None keeps the file's rate).
        log: Logger for decode/resample messages.

    Returns:
        Mono Waveform; multi-channel files are averaged.

    Raises:
        DecodeError: If the file is missing, unreadable or not PCM WAV.
    """
    log = log or logger
    audio, file_rate = _read_wav(path)
    waveform = Waveform(audio.mean(axis=1), file_rate)
    log.debug(
        "Decoded audio",
        extra={
            "path": str(path),
            "sample_rate": file_rate,
            "channels": audio.shape[1],
            "duration": waveform.duration,
        },
    )
    if sample_rate is not None:
        waveform = resample(waveform, sample_rate, log=log)
    return waveform


def load_audio_split_stereo(
    path: PathLike,
    sample_rate: Optional[int] = None,
    log: Optional[logging.Logger] = None,
) -> Tuple[Waveform, Waveform]:
    """Decode the left and right channels of a WAV file separately.

    A mono file is returned as the same signal on both sides; channels
    beyond the second are ignored.
    """
    log = log or logger
    audio, file_rate = _read_wav(path)
    right_index = 1 if audio.shape[1] > 1 else 0
    left = Waveform(audio[:, 0], file_rate)
    right = Waveform(audio[:, right_index], file_rate)
    if sample_rate is not None:
        left = resample(left, sample_rate, log=log)
        right = resample(right, sample_rate, log=log)
    return left, right
