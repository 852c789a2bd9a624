"""Tests for configuration loading."""

import logging

import pytest

from sound_alert_engine.config import (
    AudioSettings,
    DetectorConfig,
    GlobalConfig,
    SystemConfig,
    clamp_threshold,
    configure_logging,
)


def test_defaults():
    config = GlobalConfig()
    assert config.system.log_level == "INFO"
    assert config.audio.fft_size == 256
    assert config.audio.bin_count == 128
    assert config.detector.threshold == 30
    assert config.detector.history_capacity == 50
    assert config.detector.window == 20
    assert config.detector.dismiss_delay == 3.0
    assert config.detector.fire_alarm_dismiss_delay == 8.0


def test_load_full_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        """
system:
  log_level: DEBUG
audio:
  sample_rate: 16000
  fft_size: 512
  device_index: 3
detector:
  threshold: 45
  dismiss_delay: 5.0
"""
    )
    config = GlobalConfig.load(path)

    assert config.system.log_level == "DEBUG"
    assert config.audio.sample_rate == 16000
    assert config.audio.bin_count == 256
    assert config.audio.device_index == 3
    assert config.detector.threshold == 45
    assert config.detector.dismiss_delay == 5.0
    assert config.detector.window == 20


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert GlobalConfig.load(path) == GlobalConfig()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        GlobalConfig.load(tmp_path / "nope.yaml")


def test_section_must_be_mapping():
    with pytest.raises(ValueError):
        GlobalConfig.from_dict({"detector": [1, 2, 3]})


def test_unknown_keys_are_ignored(caplog):
    with caplog.at_level(logging.WARNING):
        config = GlobalConfig.from_dict({"detector": {"threshold": 40, "colour": "red"}})
    assert config.detector.threshold == 40
    assert "colour" in caplog.text


@pytest.mark.parametrize("value,expected", [(0, 10), (10, 10), (55, 55), (90, 90), (200, 90)])
def test_clamp_threshold(value, expected):
    assert clamp_threshold(value) == expected


def test_detector_config_clamps_threshold():
    assert DetectorConfig(threshold=3).threshold == 10


@pytest.mark.parametrize(
    "kwargs",
    [{"history_capacity": 0}, {"window": 0}, {"dismiss_delay": 0}, {"fire_alarm_dismiss_delay": -1}],
)
def test_detector_config_rejects_invalid(kwargs):
    with pytest.raises(ValueError):
        DetectorConfig(**kwargs)


def test_configure_logging_with_file(tmp_path):
    log_file = tmp_path / "engine.log"
    configure_logging(SystemConfig(log_level="debug", log_file=str(log_file)))
    try:
        logging.getLogger("sound_alert_engine.test").info("hello")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "hello" in log_file.read_text()
    finally:
        for handler in list(logging.getLogger().handlers):
            if isinstance(handler, logging.FileHandler):
                logging.getLogger().removeHandler(handler)
                handler.close()


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ValueError):
        configure_logging(SystemConfig(log_level="LOUD"))


def test_audio_settings_bin_count():
    assert AudioSettings(fft_size=1024).bin_count == 512
