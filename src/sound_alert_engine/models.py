"""Data models for sound classification and alert state."""

from dataclasses import dataclass
from typing import Optional

# Sound categories emitted by the classifier
DOORBELL = "doorbell"
ALARM = "alarm"
KNOCKING = "knocking"
IMPACT = "impact"
UNKNOWN = "unknown"

# Reserved category with a longer dismissal delay. No classifier rule emits it yet.
FIRE_ALARM = "fire_alarm"


@dataclass(frozen=True)
class SoundClassification:
    """Result of classifying one tick.

    Attributes:
        type: One of the sound categories (doorbell, alarm, knocking, impact, unknown)
        confidence: Fixed heuristic confidence in [0, 1]
        description: Human-readable description of the category
    """

    type: str
    confidence: float
    description: str

    def __str__(self) -> str:
        return f"{self.type} ({self.confidence:.0%}): {self.description}"


@dataclass
class AlertState:
    """Snapshot of the alert lifecycle.

    Attributes:
        active: True while an alert episode is showing
        detected_type: Category that triggered the alert, if any
        dismiss_at: Monotonic timestamp (seconds) at which the alert auto-dismisses
    """

    active: bool = False
    detected_type: Optional[str] = None
    dismiss_at: Optional[float] = None

    def copy(self) -> "AlertState":
        return AlertState(self.active, self.detected_type, self.dismiss_at)


@dataclass(frozen=True)
class NoiseLevel:
    """Coarse noise bucket for display purposes."""

    level: int
    label: str
    description: str
