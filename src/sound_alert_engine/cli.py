"""Command-line interface for the sound alert engine.

Usage:
    sound-alert                          # Listen on the default microphone
    sound-alert --threshold 45 --device 2
    sound-alert --wav recording.wav      # Replay a file offline
"""

import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional, Tuple

import yaml

from sound_alert_engine.capture import ArrayCapture, MicrophoneCapture
from sound_alert_engine.config import GlobalConfig, configure_logging
from sound_alert_engine.engine import SoundMonitor
from sound_alert_engine.levels import noise_level
from sound_alert_engine.models import AlertState, SoundClassification
from sound_alert_engine.timers import ManualTimerSource

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ACCESS_DENIED = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sound-alert",
        description="Detect doorbells, alarms, knocking and impacts from audio levels.",
    )
    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument("--threshold", type=int, help="Sensitivity threshold (10-90)")
    parser.add_argument("--device", type=int, help="Audio input device index")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level",
    )
    parser.add_argument("--wav", help="Replay a WAV file instead of using the microphone")
    return parser


def load_config(args: argparse.Namespace) -> GlobalConfig:
    """Load the configuration file and apply command-line overrides."""
    config = GlobalConfig.load(args.config) if args.config else GlobalConfig()

    if args.threshold is not None:
        config.detector = replace(config.detector, threshold=args.threshold)
    if args.device is not None:
        config.audio = replace(config.audio, device_index=args.device)
    if args.log_level:
        config.system = replace(config.system, log_level=args.log_level)

    return config


def format_alert(state: AlertState, classification: Optional[SoundClassification]) -> str:
    if classification is not None and classification.type == state.detected_type:
        return f"🚨 {classification.type.upper()}: {classification.description}"
    return "🚨 LOUD SOUND detected"


def replay_wav(config: GlobalConfig, path: str) -> int:
    """Run the detector over a WAV file using simulated time."""
    try:
        capture = ArrayCapture.from_wav(path, config.audio)
    except (OSError, ValueError) as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    timers = ManualTimerSource()
    episodes: List[Tuple[float, Optional[str]]] = []

    def on_alert(state: AlertState) -> None:
        if state.active:
            episodes.append((timers.now(), state.detected_type))
            print(f"[{timers.now():7.2f}s] {format_alert(state, monitor.classification)}")

    monitor = SoundMonitor(capture, config.detector, timers, on_alert=on_alert)
    if not monitor.request_access() or not monitor.start():
        return EXIT_ACCESS_DENIED

    while not capture.exhausted:
        monitor.tick()
        timers.advance(capture.chunk_duration)
    monitor.stop()

    print(f"\n{len(episodes)} alert(s) in {timers.now():.1f}s of audio")
    for when, sound_type in episodes:
        print(f"  {when:7.2f}s  {sound_type or 'loud sound'}")
    return EXIT_OK


def listen(config: GlobalConfig) -> int:
    """Monitor the microphone until interrupted."""
    capture = MicrophoneCapture(config.audio)
    last_report = [0.0]

    def on_tick(volume: int, classification, state: AlertState) -> None:
        now = monitor.timers.now()
        if now - last_report[0] >= 1.0:
            last_report[0] = now
            level = noise_level(volume)
            label = classification.type if classification else "-"
            logger.info(f"Volume {volume:3d}% | {level.label:<10} | {label}")

    def on_alert(state: AlertState) -> None:
        if state.active:
            print(format_alert(state, monitor.classification))

    monitor = SoundMonitor(capture, config.detector, on_tick=on_tick, on_alert=on_alert)

    print("🎤 Listening... Press Ctrl+C to stop")
    try:
        monitor.run()
    finally:
        capture.close()

    if monitor.permission_required:
        print(monitor.error.message, file=sys.stderr)
        return EXIT_ACCESS_DENIED
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
        configure_logging(config.system)
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.wav:
        return replay_wav(config, args.wav)

    try:
        return listen(config)
    except ImportError as e:
        print(str(e), file=sys.stderr)
        return EXIT_CONFIG_ERROR
