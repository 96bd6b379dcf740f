"""Unit tests for WAV decoding and resampling."""

from __future__ import annotations

import dataclasses
import tempfile
import unittest
from pathlib import Path

import numpy as np
import scipy.io.wavfile as wavfile

from whisper_frontend.audio.loader import (
    Waveform,
    load_audio,
    load_audio_split_stereo,
    resample,
)
from whisper_frontend.errors import DecodeError, FrontendError, InvalidConfigurationError


def _sine(sr: int, seconds: float, freq: float, amplitude: float = 0.5) -> np.ndarray:
    t = np.arange(int(sr * seconds)) / sr
    return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)


class TestWaveform(unittest.TestCase):
    def test_read_only_copy(self) -> None:
        source = np.array([0.1, 0.2, 0.3], dtype=np.float64)
        waveform = Waveform(source, 16_000)
        self.assertEqual(waveform.samples.dtype, np.float32)
        self.assertFalse(waveform.samples.flags.writeable)
        source[0] = 9.0
        self.assertAlmostEqual(float(waveform.samples[0]), 0.1, places=6)

    def test_frozen(self) -> None:
        waveform = Waveform(np.zeros(4), 16_000)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            waveform.sample_rate = 8_000  # type: ignore[misc]

    def test_duration_and_len(self) -> None:
        waveform = Waveform(np.zeros(24_000), 16_000)
        self.assertEqual(len(waveform), 24_000)
        self.assertAlmostEqual(waveform.duration, 1.5)

    def test_invalid(self) -> None:
        with self.assertRaises(ValueError):
            Waveform(np.zeros((2, 10)), 16_000)
        with self.assertRaises(InvalidConfigurationError):
            Waveform(np.zeros(10), 0)

    def test_sample_rate_must_be_integer(self) -> None:
        for rate in (44_100.0, True, "16000"):
            with self.subTest(rate=rate):
                with self.assertRaises(InvalidConfigurationError):
                    Waveform(np.zeros(10), rate)  # type: ignore[arg-type]
        waveform = Waveform(np.zeros(10), np.int64(8_000))
        self.assertIs(type(waveform.sample_rate), int)


class TestLoadAudio(unittest.TestCase):
    """Tests for load_audio() and load_audio_split_stereo()."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, name: str, sr: int, data: np.ndarray) -> Path:
        path = self.tmp / name
        wavfile.write(str(path), sr, data)
        return path

    def test_int16_mono(self) -> None:
        pcm = np.array([0, 16384, -32768, 32767, -1], dtype=np.int16)
        waveform = load_audio(self._write("mono.wav", 16_000, pcm))
        self.assertEqual(waveform.sample_rate, 16_000)
        np.testing.assert_array_equal(waveform.samples, pcm.astype(np.float32) / 32768.0)
        self.assertEqual(float(waveform.samples.min()), -1.0)

    def test_stereo_downmixed(self) -> None:
        left = np.full(100, 16384, dtype=np.int16)
        right = np.zeros(100, dtype=np.int16)
        path = self._write("stereo.wav", 16_000, np.stack([left, right], axis=1))
        waveform = load_audio(path)
        self.assertEqual(len(waveform), 100)
        np.testing.assert_allclose(waveform.samples, 0.25)

    def test_split_stereo(self) -> None:
        left = np.full(50, 8192, dtype=np.int16)
        right = np.full(50, -8192, dtype=np.int16)
        path = self._write("stereo.wav", 16_000, np.stack([left, right], axis=1))
        out_left, out_right = load_audio_split_stereo(path)
        np.testing.assert_allclose(out_left.samples, 0.25)
        np.testing.assert_allclose(out_right.samples, -0.25)

    def test_split_stereo_of_mono_file(self) -> None:
        pcm = (_sine(16_000, 0.1, 440.0) * 32767).astype(np.int16)
        left, right = load_audio_split_stereo(self._write("mono.wav", 16_000, pcm))
        np.testing.assert_array_equal(left.samples, right.samples)

    def test_float_and_uint8(self) -> None:
        floats = _sine(16_000, 0.1, 440.0)
        np.testing.assert_allclose(load_audio(self._write("f.wav", 16_000, floats)).samples, floats)
        bytes_ = np.array([0, 128, 255], dtype=np.uint8)
        np.testing.assert_allclose(
            load_audio(self._write("u8.wav", 16_000, bytes_)).samples,
            [-1.0, 0.0, 127 / 128],
        )

    def test_resample_on_load(self) -> None:
        pcm = (_sine(8_000, 1.0, 440.0) * 32767).astype(np.int16)
        waveform = load_audio(self._write("8k.wav", 8_000, pcm), sample_rate=16_000)
        self.assertEqual(waveform.sample_rate, 16_000)
        self.assertEqual(len(waveform), 16_000)

    def test_missing_file(self) -> None:
        missing = self.tmp / "nope.wav"
        with self.assertRaises(DecodeError) as ctx:
            load_audio(missing)
        self.assertEqual(ctx.exception.path, missing)
        self.assertIn("nope.wav", str(ctx.exception))

    def test_malformed_file(self) -> None:
        path = self.tmp / "garbage.wav"
        path.write_bytes(b"definitely not a RIFF header" * 4)
        with self.assertRaises(DecodeError) as ctx:
            load_audio(path)
        self.assertEqual(ctx.exception.path, path)
        self.assertIsInstance(ctx.exception, FrontendError)
        self.assertIsNotNone(ctx.exception.__cause__)

    def test_truncated_header(self) -> None:
        stubs = {
            "riff_only.wav": b"RIFF",
            "cut_fmt.wav": b"RIFF\x24\0\0\0WAVEfmt \x10\0\0\0\x01\0\x01\0",
            "empty.wav": b"",
        }
        for name, payload in stubs.items():
            path = self.tmp / name
            path.write_bytes(payload)
            with self.subTest(name=name):
                with self.assertRaises(DecodeError) as ctx:
                    load_audio(path)
                self.assertEqual(ctx.exception.path, path)
                self.assertIn(name, str(ctx.exception))


class TestResample(unittest.TestCase):
    def test_noop_at_target_rate(self) -> None:
        waveform = Waveform(_sine(16_000, 0.1, 440.0), 16_000)
        self.assertIs(resample(waveform, 16_000), waveform)

    def test_upsample_and_downsample_lengths(self) -> None:
        waveform = Waveform(_sine(44_100, 1.0, 440.0), 44_100)
        down = resample(waveform, 16_000)
        self.assertEqual(down.sample_rate, 16_000)
        self.assertEqual(len(down), 16_000)
        up = resample(Waveform(_sine(8_000, 0.5, 440.0), 8_000), 16_000)
        self.assertEqual(len(up), 8_000)

    def test_preserves_tone(self) -> None:
        down = resample(Waveform(_sine(48_000, 1.0, 1000.0), 48_000), 16_000)
        spectrum = np.abs(np.fft.rfft(down.samples))
        self.assertEqual(int(np.argmax(spectrum)), 1000)

    def test_empty(self) -> None:
        out = resample(Waveform(np.zeros(0), 8_000), 16_000)
        self.assertEqual(len(out), 0)
        self.assertEqual(out.sample_rate, 16_000)

    def test_invalid_target(self) -> None:
        with self.assertRaises(InvalidConfigurationError):
            resample(Waveform(np.zeros(10), 8_000), 0)
        with self.assertRaises(InvalidConfigurationError):
            resample(Waveform(np.zeros(10), 8_000), 16_000.0)  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main(verbosity=2)
