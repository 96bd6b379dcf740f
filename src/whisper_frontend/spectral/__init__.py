"""Spectral transforms: FFT, STFT and mel filterbanks."""

from whisper_frontend.spectral.fft import fft, ifft, rfft
from whisper_frontend.spectral.filterbank import MelFilterCache, hz_to_mel, mel_filterbank, mel_to_hz
from whisper_frontend.spectral.stft import frame_count, hann_window, stft

__all__ = [
    "MelFilterCache",
    "fft",
    "frame_count",
    "hann_window",
    "hz_to_mel",
    "ifft",
    "mel_filterbank",
    "mel_to_hz",
    "rfft",
    "stft",
]
