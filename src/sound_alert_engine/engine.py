"""Monitoring controller - orchestrates the detection pipeline."""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from sound_alert_engine.alert import AlertStateMachine
from sound_alert_engine.capture import CaptureSource
from sound_alert_engine.classifier import classify
from sound_alert_engine.config import DetectorConfig, clamp_threshold
from sound_alert_engine.errors import AccessDenied
from sound_alert_engine.history import HistoryBuffer
from sound_alert_engine.models import AlertState, SoundClassification
from sound_alert_engine.processing.dsp import compute_volume
from sound_alert_engine.timers import ThreadingTimerSource, TimerSource

logger = logging.getLogger(__name__)

TickCallback = Callable[[int, Optional[SoundClassification], AlertState], None]


@dataclass
class TickResult:
    """Everything the presentation layer needs after one tick."""

    volume: int
    classification: Optional[SoundClassification]
    alert: AlertState
    alert_started: bool = False


class SoundMonitor:
    """Sound event detection and alerting controller.

    Owns the history buffer, the threshold and the alert state, and runs the
    per-tick pipeline:
    Frequency energies → Volume → History → Classifier → Alert state → Callbacks

    Example:
        >>> from sound_alert_engine import SoundMonitor, MicrophoneCapture
        >>>
        >>> monitor = SoundMonitor(
        ...     MicrophoneCapture(),
        ...     on_alert=lambda state: print(state),
        ... )
        >>> monitor.run()  # Blocking
    """

    def __init__(
        self,
        capture: CaptureSource,
        config: Optional[DetectorConfig] = None,
        timers: Optional[TimerSource] = None,
        on_tick: Optional[TickCallback] = None,
        on_alert: Optional[Callable[[AlertState], None]] = None,
        on_error: Optional[Callable[[AccessDenied], None]] = None,
    ):
        """Initialize the monitor.

        Args:
            capture: Source of frequency-energy frames
            config: Detection settings (uses defaults if None)
            timers: Clock and timer provider (wall clock if None)
            on_tick: Called after every tick with (volume, classification, alert state)
            on_alert: Called whenever an alert starts or ends
            on_error: Called when capture access is denied
        """
        self.capture = capture
        self.config = config or DetectorConfig()
        self.timers = timers or ThreadingTimerSource()
        self.on_tick = on_tick
        self.on_alert = on_alert
        self.on_error = on_error

        # Ticks, stop() and the alert timer may come from different threads.
        # The alert machine shares this lock so there is a single writer.
        self._lock = threading.RLock()

        self.history = HistoryBuffer(self.config.history_capacity)
        self.alerts = AlertStateMachine(
            self.timers,
            dismiss_delay=self.config.dismiss_delay,
            fire_alarm_dismiss_delay=self.config.fire_alarm_dismiss_delay,
            on_change=self._alert_changed,
            lock=self._lock,
        )

        self._threshold = self.config.threshold
        self._running = False
        self._has_permission = False
        self.error: Optional[AccessDenied] = None

        self.volume = 0
        self.classification: Optional[SoundClassification] = None

    # -- Lifecycle ---------------------------------------------------------

    def request_access(self) -> bool:
        """Ask the capture source for access.

        On denial the AccessDenied condition is stored in `error` and
        reported through on_error; it is cleared by a later successful request.
        """
        if self.capture.request_access():
            self._has_permission = True
            self.error = None
            return True

        self._has_permission = False
        self.error = AccessDenied()
        logger.warning(f"Capture access denied: {self.error.message}")
        if self.on_error:
            try:
                self.on_error(self.error)
            except Exception as e:
                logger.error(f"Error in on_error callback: {e}")
        return False

    def start(self) -> bool:
        """Begin tick evaluation.

        Without a prior grant this only requests capture access and returns
        False; monitoring begins on the next start() once access is granted.

        Returns:
            True if the monitor is running
        """
        with self._lock:
            if self._running:
                return True

            if not self._has_permission:
                self.request_access()
                return False

            if self.capture.is_suspended():
                self.capture.resume()

            self._running = True

        logger.info(f"Monitoring started (threshold {self._threshold})")
        return True

    def stop(self) -> None:
        """Halt tick evaluation and reset the alert state.

        History is kept, so a later start() continues from it.
        """
        with self._lock:
            was_running = self._running
            self._running = False
            was_active = self.alerts.active
            self.alerts.reset()
            if was_active:
                self._alert_changed(self.alerts.state)

        if was_running:
            logger.info("Monitoring stopped")

    def close(self) -> None:
        """Stop monitoring and release the capture source."""
        self.stop()
        self.capture.close()

    # -- Configuration -----------------------------------------------------

    @property
    def threshold(self) -> int:
        return self._threshold

    def set_threshold(self, value: int) -> int:
        """Set the sensitivity threshold, clamped into [10, 90].

        Takes effect from the next tick.

        Returns:
            The threshold actually stored
        """
        threshold = clamp_threshold(value)
        with self._lock:
            self._threshold = threshold
        logger.info(f"Threshold set to {threshold}")
        return threshold

    def dismiss(self) -> bool:
        """Dismiss the active alert. No-op if there is none."""
        return self.alerts.dismiss()

    def reset_history(self) -> None:
        """Forget all recorded volume samples."""
        with self._lock:
            self.history.clear()

    # -- Tick pipeline -----------------------------------------------------

    def tick(self) -> Optional[TickResult]:
        """Pull one frame from the capture source and process it.

        Returns:
            The tick result, or None if the monitor is not running
        """
        with self._lock:
            if not self._running:
                return None
            energies = self.capture.get_frequency_energies()
            return self.process_energies(energies)

    def process_energies(self, energies: np.ndarray) -> TickResult:
        """Run one frame through the pipeline.

        This can be called directly if you're handling audio capture yourself.

        Args:
            energies: One frame of frequency energies, each in [0, 255]

        Raises:
            CaptureContractError: If the frame has the wrong length or range
        """
        with self._lock:
            threshold = self._threshold

            volume = compute_volume(energies, expected_bins=self.capture.bin_count)
            self.history.append(volume)
            classification = classify(
                volume, self.history.snapshot(self.config.window), threshold, self.config.window
            )
            # on_alert observers read these during evaluate()
            self.volume = volume
            self.classification = classification
            started = self.alerts.evaluate(volume, classification, threshold)

            result = TickResult(volume, classification, self.alerts.state, started)

            logger.debug(
                f"Tick: volume={volume} class={classification.type if classification else None} "
                f"alert={result.alert.active}"
            )

            if self.on_tick:
                try:
                    self.on_tick(volume, classification, result.alert)
                except Exception as e:
                    logger.error(f"Error in on_tick callback: {e}")

            return result

    def run(self, max_ticks: Optional[int] = None, interval: Optional[float] = None) -> int:
        """Start monitoring and tick until stopped (blocking).

        Capture access is requested first if it has not been granted yet.

        Args:
            max_ticks: Stop after this many ticks (None for no limit)
            interval: Seconds to sleep between ticks. Defaults to 0 for
                blocking capture sources and to config.tick_interval otherwise.

        Returns:
            Number of ticks processed
        """
        if not self._has_permission and not self.request_access():
            return 0
        if not self.start():
            return 0

        if interval is None:
            interval = 0.0 if self.capture.blocking else self.config.tick_interval

        ticks = 0
        try:
            while self._running and not self.capture.exhausted:
                if max_ticks is not None and ticks >= max_ticks:
                    break
                if self.tick() is not None:
                    ticks += 1
                if interval > 0:
                    time.sleep(interval)
        except KeyboardInterrupt:
            logger.info("Keyboard interrupt received")
        finally:
            self.stop()

        return ticks

    def start_async(self, **kwargs) -> threading.Thread:
        """Run the monitor in a background thread.

        Returns:
            The background thread (already started)
        """
        thread = threading.Thread(target=self.run, kwargs=kwargs, daemon=True)
        thread.start()
        return thread

    # -- Observers ---------------------------------------------------------

    def _alert_changed(self, state: AlertState) -> None:
        if self.on_alert:
            try:
                self.on_alert(state)
            except Exception as e:
                logger.error(f"Error in on_alert callback: {e}")

    @property
    def is_running(self) -> bool:
        """Check if the monitor is currently evaluating ticks."""
        return self._running

    @property
    def has_permission(self) -> bool:
        return self._has_permission

    @property
    def permission_required(self) -> bool:
        """True while a capture-access denial is outstanding."""
        return self.error is not None

    @property
    def alert_state(self) -> AlertState:
        return self.alerts.state
