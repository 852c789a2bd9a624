#!/usr/bin/env python3
"""Example: Basic sound alerting.

This example shows how to use the Sound Alert Engine to watch the
microphone and react to doorbells, alarms, knocking and loud impacts.
"""

import logging

from sound_alert_engine import DetectorConfig, MicrophoneCapture, SoundMonitor

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s | %(levelname)-8s | %(message)s", datefmt="%H:%M:%S"
)


def on_alert(state):
    """Callback when an alert starts or ends."""
    if state.active:
        print(f"\n🚨 ALERT: {state.detected_type or 'loud sound'}\n")
        # Here you could:
        # - Flash a light
        # - Vibrate a wearable
        # - Send a notification
    else:
        print("Alert cleared")


def on_error(error):
    print(f"⚠️  {error.message}")


def main():
    monitor = SoundMonitor(
        MicrophoneCapture(),
        config=DetectorConfig(threshold=35),
        on_alert=on_alert,
        on_error=on_error,
    )

    print("🎤 Starting audio capture...")
    print("   Press Ctrl+C to stop\n")

    # Start listening (blocking)
    try:
        monitor.run()
    finally:
        monitor.close()


if __name__ == "__main__":
    main()
