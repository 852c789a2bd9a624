"""Human-readable buckets for volume values."""

from sound_alert_engine.models import NoiseLevel

NOISE_LEVELS = (
    (5, NoiseLevel(1, "Silent", "Very quiet environment")),
    (25, NoiseLevel(2, "Quiet", "Low ambient noise")),
    (50, NoiseLevel(3, "Moderate", "Normal conversation level")),
    (75, NoiseLevel(4, "Loud", "Busy environment")),
)
VERY_NOISY = NoiseLevel(5, "Very Noisy", "Very loud environment")


def volume_level(volume: int) -> str:
    """Return a short slug describing a volume in [0, 100]."""
    if volume <= 10:
        return "quiet"
    if volume <= 30:
        return "low_noise"
    if volume <= 60:
        return "medium_noise"
    if volume <= 80:
        return "high_noise"
    return "very_high_noise"


def noise_level(volume: int) -> NoiseLevel:
    """Map a volume in [0, 100] onto a five-step noise scale."""
    for upper, level in NOISE_LEVELS:
        if volume <= upper:
            return level
    return VERY_NOISY
