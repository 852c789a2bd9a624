#!/usr/bin/env python3
"""Example: Feed the monitor without a microphone.

This example shows how to drive the engine with synthetic frequency
frames and a simulated clock, useful for:
- Replaying recorded levels
- Custom audio sources
- Testing and simulation
"""

import numpy as np

from sound_alert_engine import ArrayCapture, ManualTimerSource, SoundMonitor

TICK = 0.02  # seconds per simulated frame
BINS = 128


def frame(volume: int) -> np.ndarray:
    """Build a flat frame whose computed volume is `volume`."""
    energy = int(round(volume / 100 * 255))
    return np.full(BINS, energy, dtype=np.uint8)


def main():
    # Quiet room, then two short chimes, then quiet again
    levels = [5] * 20 + [12, 55, 20, 12, 60, 18] + [5] * 200
    capture = ArrayCapture([frame(v) for v in levels], bin_count=BINS)
    timers = ManualTimerSource()

    def on_alert(state):
        status = f"ALERT ({state.detected_type or 'loud sound'})" if state.active else "cleared"
        print(f"t={timers.now():5.2f}s  {status}")

    monitor = SoundMonitor(capture, timers=timers, on_alert=on_alert)
    monitor.request_access()
    monitor.start()

    print(f"Processing {len(levels)} frames...")
    while not capture.exhausted:
        result = monitor.tick()
        if result.classification:
            print(f"t={timers.now():5.2f}s  volume={result.volume:3d}  {result.classification}")
        timers.advance(TICK)

    monitor.stop()


if __name__ == "__main__":
    main()
