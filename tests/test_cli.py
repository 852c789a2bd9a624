"""Tests for the command-line interface."""

import numpy as np
import pytest
from scipy.io import wavfile

from sound_alert_engine.cli import EXIT_CONFIG_ERROR, EXIT_OK, build_parser, load_config, main

SAMPLE_RATE = 16000


@pytest.fixture
def noisy_wav(tmp_path):
    """One second of silence, half a second of loud noise, four of silence."""
    rng = np.random.default_rng(1)
    noise = rng.normal(0, 0.3, SAMPLE_RATE // 2)
    audio = np.concatenate(
        [np.zeros(SAMPLE_RATE), noise, np.zeros(SAMPLE_RATE * 4)]
    )
    path = tmp_path / "noise.wav"
    wavfile.write(str(path), SAMPLE_RATE, (audio.clip(-1, 1) * 32767).astype(np.int16))
    return path


@pytest.fixture
def silent_wav(tmp_path):
    path = tmp_path / "silence.wav"
    wavfile.write(str(path), SAMPLE_RATE, np.zeros(SAMPLE_RATE * 2, dtype=np.int16))
    return path


def test_replay_detects_noise_burst(noisy_wav, capsys):
    assert main(["--wav", str(noisy_wav), "--log-level", "WARNING"]) == EXIT_OK

    out = capsys.readouterr().out
    assert "1 alert(s)" in out


def test_replay_silence(silent_wav, capsys):
    assert main(["--wav", str(silent_wav), "--log-level", "WARNING"]) == EXIT_OK
    assert "0 alert(s)" in capsys.readouterr().out


def test_replay_missing_file(tmp_path, capsys):
    code = main(["--wav", str(tmp_path / "missing.wav"), "--log-level", "WARNING"])
    assert code == EXIT_CONFIG_ERROR


def test_missing_config_file(tmp_path, capsys):
    assert main(["--config", str(tmp_path / "nope.yaml")]) == EXIT_CONFIG_ERROR
    assert "Configuration error" in capsys.readouterr().err


def test_overrides(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("detector:\n  threshold: 40\naudio:\n  device_index: 1\n")

    args = build_parser().parse_args(
        ["--config", str(path), "--threshold", "95", "--device", "4", "--log-level", "DEBUG"]
    )
    config = load_config(args)

    assert config.detector.threshold == 90
    assert config.audio.device_index == 4
    assert config.system.log_level == "DEBUG"
