"""Signal processing: raw audio to frequency energies to volume."""

from sound_alert_engine.processing.dsp import FrequencyAnalyzer, compute_volume

__all__ = ["FrequencyAnalyzer", "compute_volume"]
