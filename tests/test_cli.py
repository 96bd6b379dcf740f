"""Tests for the feature inspection CLI."""

from __future__ import annotations

import contextlib
import io
import tempfile
import unittest
from pathlib import Path

import numpy as np
import scipy.io.wavfile as wavfile

from whisper_frontend.cli import main


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        t = np.arange(16_000 * 3) / 16_000
        pcm = (0.3 * np.sin(2 * np.pi * 440 * t) * 32767).astype(np.int16)
        self.wav = self.tmp / "tone.wav"
        wavfile.write(str(self.wav), 16_000, pcm)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, *args: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = main(list(args))
        return code, out.getvalue(), err.getvalue()

    def test_single_segment(self) -> None:
        code, out, _ = self._run(str(self.wav))
        self.assertEqual(code, 0)
        self.assertIn("chunk 0: 80 mel bins x 301 frames", out)
        self.assertIn("All values finite", out)

    def test_chunked_and_padded(self) -> None:
        code, out, _ = self._run(str(self.wav), "--chunk-length", "2", "--pad-to-frames")
        self.assertEqual(code, 0)
        self.assertIn("chunk 1: 80 mel bins x 3000 frames", out)
        self.assertIn("Total: 2 chunk(s)", out)

    def test_missing_file(self) -> None:
        code, _, err = self._run(str(self.tmp / "missing.wav"))
        self.assertEqual(code, 1)
        self.assertIn("missing.wav", err)

    def test_invalid_configuration(self) -> None:
        code, _, err = self._run(str(self.wav), "--n-mels", "0")
        self.assertEqual(code, 1)
        self.assertIn("n_mels", err)

    def test_non_finite_chunk_length(self) -> None:
        for value in ("nan", "inf"):
            with self.subTest(value=value):
                code, _, err = self._run(str(self.wav), "--chunk-length", value)
                self.assertEqual(code, 1)
                self.assertIn("chunk_length", err)

    def test_truncated_wav(self) -> None:
        stub = self.tmp / "stub.wav"
        stub.write_bytes(b"RIFF")
        code, _, err = self._run(str(stub))
        self.assertEqual(code, 1)
        self.assertIn("stub.wav", err)


if __name__ == "__main__":
    unittest.main(verbosity=2)
