"""Debounced alert lifecycle with timed auto-dismiss."""

import logging
import threading
from typing import Callable, Dict, Optional

from sound_alert_engine.models import FIRE_ALARM, UNKNOWN, AlertState, SoundClassification
from sound_alert_engine.timers import TimerHandle, TimerSource

logger = logging.getLogger(__name__)

DEFAULT_DISMISS_DELAY = 3.0  # seconds
FIRE_ALARM_DISMISS_DELAY = 8.0  # seconds


def should_alert(
    volume: int, classification: Optional[SoundClassification], threshold: int
) -> bool:
    """Decide whether a tick qualifies for an alert.

    A tick qualifies when the classifier found a known category, or when it
    found nothing specific (None or unknown) but the volume is above threshold.
    """
    if classification is not None and classification.type != UNKNOWN:
        return True
    return volume > threshold


class AlertStateMachine:
    """Two-state (Idle/Active) alert machine.

    While Active, further qualifying ticks are ignored: the dismissal timer is
    not restarted and the detected type is not replaced. The machine returns to
    Idle when the dismissal timer fires or dismiss() is called; both paths
    release the timer handle.
    """

    def __init__(
        self,
        timers: TimerSource,
        dismiss_delay: float = DEFAULT_DISMISS_DELAY,
        fire_alarm_dismiss_delay: float = FIRE_ALARM_DISMISS_DELAY,
        on_change: Optional[Callable[[AlertState], None]] = None,
        lock: Optional[threading.RLock] = None,
    ):
        """Initialize the state machine.

        Args:
            timers: Clock and one-shot timer provider
            dismiss_delay: Auto-dismiss delay for ordinary detections (seconds)
            fire_alarm_dismiss_delay: Auto-dismiss delay for the fire_alarm category
            on_change: Called with a copy of the state after every transition
            lock: Lock shared with the owner of the state (a private one if None)
        """
        self.timers = timers
        self.dismiss_delays: Dict[Optional[str], float] = {FIRE_ALARM: fire_alarm_dismiss_delay}
        self.default_delay = dismiss_delay
        self.on_change = on_change

        self._state = AlertState()
        self._timer: Optional[TimerHandle] = None
        self._episode = 0
        # The dismissal timer may fire on another thread. Notices are sent
        # under the lock so they arrive in transition order.
        self._lock = lock or threading.RLock()

    @property
    def state(self) -> AlertState:
        """Copy of the current alert state."""
        with self._lock:
            return self._state.copy()

    @property
    def active(self) -> bool:
        return self._state.active

    def delay_for(self, sound_type: Optional[str]) -> float:
        """Auto-dismiss delay for a detected category."""
        return self.dismiss_delays.get(sound_type, self.default_delay)

    def evaluate(
        self, volume: int, classification: Optional[SoundClassification], threshold: int
    ) -> bool:
        """Feed one tick into the machine.

        Returns:
            True if this tick moved the machine from Idle to Active
        """
        if not should_alert(volume, classification, threshold):
            return False

        with self._lock:
            if self._state.active:
                return False

            detected = None
            if classification is not None and classification.type != UNKNOWN:
                detected = classification.type

            delay = self.delay_for(detected)
            self._episode += 1
            episode = self._episode
            self._timer = self.timers.call_later(delay, lambda: self._expire(episode))
            self._state = AlertState(
                active=True, detected_type=detected, dismiss_at=self._timer.due
            )

            logger.critical("=" * 60)
            logger.critical(f"🚨 SOUND ALERT: [{(detected or 'loud sound').upper()}] 🚨")
            logger.critical(f"Volume: {volume} (threshold {threshold}), dismiss in {delay:.1f}s")
            logger.critical("=" * 60)

            self._notify(self._state.copy())
        return True

    def dismiss(self) -> bool:
        """Explicitly end the current alert.

        Returns:
            True if an active alert was dismissed, False if already Idle
        """
        if self._deactivate():
            logger.info("Alert dismissed")
            return True
        return False

    def reset(self) -> None:
        """Return to Idle and drop any pending timer without notifying."""
        with self._lock:
            self._release_timer()
            self._state = AlertState()

    def _expire(self, episode: int) -> None:
        if self._deactivate(episode):
            logger.info("Auto-clearing alert state.")

    def _deactivate(self, episode: Optional[int] = None) -> bool:
        with self._lock:
            if not self._state.active:
                return False
            # A timer from an earlier episode may fire late
            if episode is not None and episode != self._episode:
                return False
            self._release_timer()
            self._state = AlertState()
            self._notify(self._state.copy())
        return True

    def _release_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _notify(self, state: AlertState) -> None:
        if not self.on_change:
            return
        try:
            self.on_change(state)
        except Exception as e:
            logger.error(f"Error in on_change callback: {e}")
