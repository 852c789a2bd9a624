"""Digital Signal Processing (DSP) layer for audio level analysis."""

import logging
from typing import Optional, Sequence, Union

import numpy as np

from sound_alert_engine.errors import CaptureContractError

logger = logging.getLogger(__name__)

MAX_ENERGY = 255

ArrayLike = Union[Sequence[int], np.ndarray]


def compute_volume(energies: ArrayLike, expected_bins: Optional[int] = None) -> int:
    """Convert one frame of frequency-bin energies into a volume percentage.

    volume = round(mean(energies) / 255 * 100), with halves rounded up.

    Args:
        energies: Per-bin energy values, each in [0, 255]
        expected_bins: If given, the exact number of bins the frame must have

    Returns:
        Volume as an integer in [0, 100]

    Raises:
        CaptureContractError: If the frame is empty, has the wrong length,
            or contains values outside [0, 255]
    """
    data = np.asarray(energies, dtype=np.float64)

    if data.ndim != 1 or data.size == 0:
        raise CaptureContractError(f"Expected a non-empty 1-D frame, got shape {data.shape}")
    if expected_bins is not None and data.size != expected_bins:
        raise CaptureContractError(f"Expected {expected_bins} frequency bins, got {data.size}")
    if data.min() < 0 or data.max() > MAX_ENERGY:
        raise CaptureContractError(
            f"Frequency energies must be within [0, {MAX_ENERGY}], "
            f"got [{data.min():.0f}, {data.max():.0f}]"
        )

    average = float(data.mean())
    return int(np.floor(average / MAX_ENERGY * 100 + 0.5))


class FrequencyAnalyzer:
    """Turns raw PCM chunks into byte-scaled frequency energies.

    Mirrors a browser analyser node: Blackman-windowed FFT, magnitudes
    smoothed over time, converted to decibels and mapped linearly from
    [min_decibels, max_decibels] onto [0, 255].
    """

    def __init__(
        self,
        fft_size: int = 256,
        smoothing: float = 0.8,
        min_decibels: float = -100.0,
        max_decibels: float = -30.0,
    ):
        """Initialize the analyzer.

        Args:
            fft_size: FFT length in samples (power of two). Yields fft_size / 2 bins.
            smoothing: Time constant in [0, 1) blending each frame with the previous one
            min_decibels: Level mapped to energy 0
            max_decibels: Level mapped to energy 255
        """
        if fft_size < 32 or fft_size & (fft_size - 1):
            raise ValueError(f"fft_size must be a power of two >= 32, got {fft_size}")
        if not 0.0 <= smoothing < 1.0:
            raise ValueError(f"smoothing must be in [0, 1), got {smoothing}")
        if min_decibels >= max_decibels:
            raise ValueError("min_decibels must be lower than max_decibels")

        self.fft_size = fft_size
        self.smoothing = smoothing
        self.min_decibels = min_decibels
        self.max_decibels = max_decibels
        self.window = np.blackman(fft_size)

        self._smoothed = np.zeros(self.bin_count, dtype=np.float64)

    @property
    def bin_count(self) -> int:
        """Number of frequency bins produced per frame."""
        return self.fft_size // 2

    def process(self, audio_chunk: np.ndarray) -> np.ndarray:
        """Analyze the most recent fft_size samples of an audio chunk.

        Args:
            audio_chunk: Raw audio samples (int16, mono). Shorter chunks are zero-padded.

        Returns:
            uint8 array of length bin_count
        """
        samples = np.asarray(audio_chunk)[-self.fft_size :]
        float_chunk = samples.astype(np.float64) / 32768.0

        if len(float_chunk) < self.fft_size:
            float_chunk = np.concatenate(
                (np.zeros(self.fft_size - len(float_chunk)), float_chunk)
            )

        windowed = float_chunk * self.window
        magnitudes = np.abs(np.fft.rfft(windowed))[: self.bin_count] / self.fft_size

        self._smoothed = self.smoothing * self._smoothed + (1.0 - self.smoothing) * magnitudes

        # Avoid log10(0) on silence; anything this small lands below min_decibels
        decibels = 20.0 * np.log10(np.maximum(self._smoothed, 1e-12))

        scale = MAX_ENERGY / (self.max_decibels - self.min_decibels)
        energies = np.floor((decibels - self.min_decibels) * scale)
        return np.clip(energies, 0, MAX_ENERGY).astype(np.uint8)

    def reset(self) -> None:
        """Forget the smoothing state."""
        self._smoothed = np.zeros(self.bin_count, dtype=np.float64)
