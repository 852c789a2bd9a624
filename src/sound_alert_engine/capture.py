"""Audio capture sources that deliver one frequency-energy frame per tick."""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

import numpy as np

from sound_alert_engine.config import AudioSettings
from sound_alert_engine.processing.dsp import FrequencyAnalyzer

try:
    import pyaudio

    HAS_PYAUDIO = True
except ImportError:
    HAS_PYAUDIO = False

logger = logging.getLogger(__name__)


def _analyzer_for(settings: AudioSettings) -> FrequencyAnalyzer:
    return FrequencyAnalyzer(
        fft_size=settings.fft_size,
        smoothing=settings.smoothing,
        min_decibels=settings.min_decibels,
        max_decibels=settings.max_decibels,
    )


class CaptureSource:
    """Interface between the monitor and an audio capture backend."""

    bin_count: int = 128
    # True if get_frequency_energies() waits for audio on its own
    blocking: bool = False

    def request_access(self) -> bool:
        """Ask for capture access. Failures are reported as False."""
        raise NotImplementedError

    def get_frequency_energies(self) -> np.ndarray:
        """Return the next frame of bin_count energies, each in [0, 255]."""
        raise NotImplementedError

    def is_suspended(self) -> bool:
        raise NotImplementedError

    def resume(self) -> None:
        raise NotImplementedError

    @property
    def exhausted(self) -> bool:
        """True once a finite source has no more frames."""
        return False

    def close(self) -> None:
        """Release any capture resources."""


class MicrophoneCapture(CaptureSource):
    """Captures microphone input with PyAudio.

    The input stream is opened suspended by request_access() and started by
    resume(). Each call to get_frequency_energies() blocks for one chunk.
    """

    blocking = True

    def __init__(self, settings: Optional[AudioSettings] = None):
        """Initialize the microphone capture.

        Args:
            settings: Audio configuration settings (uses defaults if None)
        """
        if not HAS_PYAUDIO:
            raise ImportError(
                "PyAudio is required for audio capture. "
                "Install it with: pip install sound-alert-engine[audio]"
            )

        self.settings = settings or AudioSettings()
        self.analyzer = _analyzer_for(self.settings)
        self.bin_count = self.analyzer.bin_count
        self._pyaudio: Optional["pyaudio.PyAudio"] = None
        self._stream = None

    def request_access(self) -> bool:
        """Initialize PyAudio and open the input stream.

        Returns:
            True if the stream could be opened, False otherwise
        """
        if self._stream is not None:
            return True

        try:
            logger.info("Initializing PyAudio...")
            self._pyaudio = pyaudio.PyAudio()

            if self.settings.device_index is not None:
                logger.info(f"Using audio device index: {self.settings.device_index}")
            else:
                logger.info("Using default audio device")

            self._stream = self._pyaudio.open(
                format=pyaudio.paInt16,
                channels=self.settings.channels,
                rate=self.settings.sample_rate,
                input=True,
                input_device_index=self.settings.device_index,
                frames_per_buffer=self.settings.chunk_size,
                start=False,
            )
            logger.info("Audio stream opened")
            return True

        except Exception as e:
            logger.error(f"Failed to open audio input: {e}")
            self.close()
            return False

    def get_frequency_energies(self) -> np.ndarray:
        audio_data = self._stream.read(self.settings.chunk_size, exception_on_overflow=False)
        audio_chunk = np.frombuffer(audio_data, dtype=np.int16)

        if self.settings.channels > 1:
            # Analyze the first channel only
            audio_chunk = audio_chunk[:: self.settings.channels]

        return self.analyzer.process(audio_chunk)

    def is_suspended(self) -> bool:
        return self._stream is None or self._stream.is_stopped()

    def resume(self) -> None:
        if self._stream is not None and self._stream.is_stopped():
            logger.info("🎤 Resuming audio input")
            self._stream.start_stream()

    def close(self) -> None:
        """Release audio resources."""
        if self._stream:
            try:
                self._stream.stop_stream()
                self._stream.close()
            except OSError as e:
                logger.debug(f"Error closing stream: {e}")
            self._stream = None

        if self._pyaudio:
            self._pyaudio.terminate()
            self._pyaudio = None

        self.analyzer.reset()


class ArrayCapture(CaptureSource):
    """Replays pre-computed frames, for simulation, file replay and tests.

    Example:
        >>> capture = ArrayCapture.from_frames([[0] * 128] * 10)
        >>> capture.request_access()
        True
    """

    def __init__(
        self,
        frames: Iterable[np.ndarray],
        bin_count: int = 128,
        granted: bool = True,
        suspended: bool = True,
        chunk_duration: Optional[float] = None,
    ):
        """Initialize the replay source.

        Args:
            frames: Frequency-energy frames, consumed lazily
            bin_count: Length of each frame; used for silence once frames run out
            granted: Result returned by request_access()
            suspended: Initial suspension state
            chunk_duration: Seconds of audio each frame represents, if known
        """
        self.bin_count = bin_count
        self.granted = granted
        self.suspended = suspended
        self.chunk_duration = chunk_duration
        self.access_requests = 0
        self.frames_served = 0
        self._frames: Iterator[np.ndarray] = iter(frames)
        self._pending: Optional[np.ndarray] = None
        self._done = False

    @classmethod
    def from_frames(cls, frames: Iterable[Iterable[int]], **kwargs) -> "ArrayCapture":
        """Build a source from plain energy lists."""
        materialized: List[np.ndarray] = [np.asarray(f) for f in frames]
        if materialized and "bin_count" not in kwargs:
            kwargs["bin_count"] = len(materialized[0])
        return cls(materialized, **kwargs)

    @classmethod
    def from_audio(
        cls,
        audio: np.ndarray,
        settings: Optional[AudioSettings] = None,
        **kwargs,
    ) -> "ArrayCapture":
        """Build a source that analyzes int16 PCM audio chunk by chunk."""
        settings = settings or AudioSettings()
        analyzer = _analyzer_for(settings)
        chunk_size = settings.chunk_size

        def frames() -> Iterator[np.ndarray]:
            for start in range(0, len(audio) - chunk_size + 1, chunk_size):
                yield analyzer.process(audio[start : start + chunk_size])

        kwargs.setdefault("chunk_duration", chunk_size / settings.sample_rate)
        return cls(frames(), bin_count=analyzer.bin_count, **kwargs)

    @classmethod
    def from_wav(
        cls,
        path: Union[str, Path],
        settings: Optional[AudioSettings] = None,
        **kwargs,
    ) -> "ArrayCapture":
        """Build a source from a WAV file.

        Stereo files are reduced to their first channel and float files are
        rescaled to int16. The file's own sample rate replaces the one in
        `settings`.
        """
        from scipy.io import wavfile

        sample_rate, data = wavfile.read(str(path))
        if data.ndim > 1:
            data = data[:, 0]
        if np.issubdtype(data.dtype, np.floating):
            data = (np.clip(data, -1.0, 1.0) * 32767).astype(np.int16)
        elif data.dtype == np.uint8:
            # 8-bit WAV is unsigned with a 128 offset
            data = ((data.astype(np.int16) - 128) << 8).astype(np.int16)
        elif data.dtype == np.int32:
            data = (data >> 16).astype(np.int16)

        settings = settings or AudioSettings()
        settings = replace(settings, sample_rate=int(sample_rate))
        logger.info(
            f"Loaded {path}: {len(data) / sample_rate:.1f}s at {sample_rate} Hz"
        )
        return cls.from_audio(data, settings, **kwargs)

    def request_access(self) -> bool:
        self.access_requests += 1
        return self.granted

    def _prefetch(self) -> None:
        if self._pending is None and not self._done:
            try:
                self._pending = next(self._frames)
            except StopIteration:
                self._done = True

    def get_frequency_energies(self) -> np.ndarray:
        self._prefetch()
        if self._pending is None:
            return np.zeros(self.bin_count, dtype=np.uint8)

        frame, self._pending = self._pending, None
        self.frames_served += 1
        return frame

    def is_suspended(self) -> bool:
        return self.suspended

    def resume(self) -> None:
        self.suspended = False

    @property
    def exhausted(self) -> bool:
        self._prefetch()
        return self._pending is None
