"""Configuration for the sound alert engine.

Settings are grouped into dataclass sections with working defaults, so a
missing or partial YAML file still yields a complete configuration:

```yaml
system:
  log_level: INFO
audio:
  sample_rate: 44100
  fft_size: 256
detector:
  threshold: 30
  dismiss_delay: 3.0
```
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

MIN_THRESHOLD = 10
MAX_THRESHOLD = 90
DEFAULT_THRESHOLD = 30

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


def clamp_threshold(value: Union[int, float]) -> int:
    """Clamp a threshold into [MIN_THRESHOLD, MAX_THRESHOLD].

    Out-of-range values are pulled to the nearest bound and logged.
    """
    threshold = int(round(value))
    clamped = max(MIN_THRESHOLD, min(MAX_THRESHOLD, threshold))
    if clamped != threshold:
        logger.warning(
            f"Threshold {value} outside [{MIN_THRESHOLD}, {MAX_THRESHOLD}], using {clamped}"
        )
    return clamped


@dataclass
class SystemConfig:
    """System-level configuration settings.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
    """

    log_level: str = "INFO"
    log_file: Optional[str] = None


@dataclass
class AudioSettings:
    """Audio capture and analysis settings.

    Attributes:
        sample_rate: Audio sampling rate in Hz.
        chunk_size: Samples read per tick (1024 at 44.1 kHz is ~23 ms).
        fft_size: FFT length; the analyzer yields fft_size / 2 frequency bins.
        smoothing: Analyzer time constant in [0, 1).
        min_decibels: Level mapped to energy 0.
        max_decibels: Level mapped to energy 255.
        device_index: Specific audio device index (None for default).
        channels: Number of audio channels (only mono is analyzed).
    """

    sample_rate: int = 44100
    chunk_size: int = 1024
    fft_size: int = 256
    smoothing: float = 0.8
    min_decibels: float = -100.0
    max_decibels: float = -30.0
    device_index: Optional[int] = None
    channels: int = 1

    @property
    def bin_count(self) -> int:
        return self.fft_size // 2


@dataclass
class DetectorConfig:
    """Detection and alert timing settings.

    Attributes:
        threshold: Sensitivity threshold in [10, 90].
        history_capacity: Number of volume samples kept.
        window: Number of recent samples the classifier looks at.
        dismiss_delay: Seconds before an alert auto-dismisses.
        fire_alarm_dismiss_delay: Auto-dismiss delay for the fire_alarm category.
        tick_interval: Seconds between ticks for capture sources that do not block.
    """

    threshold: int = DEFAULT_THRESHOLD
    history_capacity: int = 50
    window: int = 20
    dismiss_delay: float = 3.0
    fire_alarm_dismiss_delay: float = 8.0
    tick_interval: float = 0.016

    def __post_init__(self):
        self.threshold = clamp_threshold(self.threshold)
        if self.history_capacity < 1:
            raise ValueError(f"history_capacity must be positive, got {self.history_capacity}")
        if self.window < 1:
            raise ValueError(f"window must be positive, got {self.window}")
        if self.dismiss_delay <= 0 or self.fire_alarm_dismiss_delay <= 0:
            raise ValueError("dismiss delays must be positive")


def _section(data: Dict[str, Any], name: str, cls):
    """Build a dataclass section from a YAML mapping, ignoring unknown keys."""
    raw = data.get(name) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config section '{name}' must be a mapping, got {type(raw).__name__}")

    known = {f.name for f in fields(cls)}
    unknown = set(raw) - known
    if unknown:
        logger.warning(f"Ignoring unknown keys in '{name}': {sorted(unknown)}")

    return cls(**{k: v for k, v in raw.items() if k in known})


@dataclass
class GlobalConfig:
    """Unified configuration for the entire application."""

    system: SystemConfig = field(default_factory=SystemConfig)
    audio: AudioSettings = field(default_factory=AudioSettings)
    detector: DetectorConfig = field(default_factory=DetectorConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "GlobalConfig":
        """Build a configuration from an already-parsed mapping."""
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError("Configuration root must be a mapping")

        return cls(
            system=_section(data, "system", SystemConfig),
            audio=_section(data, "audio", AudioSettings),
            detector=_section(data, "detector", DetectorConfig),
        )

    @classmethod
    def load(cls, path: Union[str, Path]) -> "GlobalConfig":
        """Load the global configuration from a YAML file.

        Args:
            path: Path to the configuration YAML file.

        Returns:
            A GlobalConfig object populated with the settings.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        config = cls.from_dict(data)
        logger.debug(f"Loaded configuration from {path}")
        return config


def configure_logging(system: SystemConfig) -> None:
    """Install console (and optional file) handlers on the root logger."""
    level = getattr(logging, system.log_level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {system.log_level}")

    handlers = [logging.StreamHandler()]
    if system.log_file:
        handlers.append(logging.FileHandler(system.log_file))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
