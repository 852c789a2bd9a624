"""Sound Alert Engine - Real-time sound event detection and alerting.

Turns a stream of audio levels into coarse sound categories (doorbell,
alarm, knocking, impact) and drives a debounced, auto-dismissing alert.

Usage:
    from sound_alert_engine import SoundMonitor, MicrophoneCapture

    monitor = SoundMonitor(MicrophoneCapture(), on_alert=print)
    monitor.run()
"""

__version__ = "1.0.0"

# Core exports
from sound_alert_engine.models import AlertState, NoiseLevel, SoundClassification
from sound_alert_engine.engine import SoundMonitor, TickResult
from sound_alert_engine.capture import ArrayCapture, CaptureSource, MicrophoneCapture
from sound_alert_engine.alert import AlertStateMachine
from sound_alert_engine.classifier import classify, count_peaks
from sound_alert_engine.history import HistoryBuffer
from sound_alert_engine.levels import noise_level, volume_level
from sound_alert_engine.processing import FrequencyAnalyzer, compute_volume
from sound_alert_engine.timers import ManualTimerSource, ThreadingTimerSource, TimerSource
from sound_alert_engine.config import (
    AudioSettings,
    DetectorConfig,
    GlobalConfig,
    SystemConfig,
    configure_logging,
)
from sound_alert_engine.errors import AccessDenied, CaptureContractError, SoundAlertError

__all__ = [
    # Version
    "__version__",
    # Core classes
    "SoundMonitor",
    "TickResult",
    "AlertStateMachine",
    "HistoryBuffer",
    "FrequencyAnalyzer",
    # Capture
    "CaptureSource",
    "MicrophoneCapture",
    "ArrayCapture",
    # Timers
    "TimerSource",
    "ThreadingTimerSource",
    "ManualTimerSource",
    # Functions
    "classify",
    "count_peaks",
    "compute_volume",
    "noise_level",
    "volume_level",
    # Configuration
    "GlobalConfig",
    "SystemConfig",
    "AudioSettings",
    "DetectorConfig",
    "configure_logging",
    # Models
    "SoundClassification",
    "AlertState",
    "NoiseLevel",
    # Errors
    "SoundAlertError",
    "AccessDenied",
    "CaptureContractError",
]
