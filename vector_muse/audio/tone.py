"""
Tone output for drag sonification.

AudioSession is the explicit context a view owns. It holds at most one live
tone and is closed when the view is cleared. Starting a tone while another is
live stops the previous one first.
"""

import io
import logging
import wave
from dataclasses import dataclass, field
from typing import Optional, Protocol

import numpy as np

from vector_muse.core.errors import AudioUnavailable
import config

logger = logging.getLogger(__name__)


@dataclass
class ToneHandle:
    """A live (or finished) oscillator."""
    tone_id: int
    frequency_hz: float
    gain: float
    active: bool = True
    # (frequency_hz, gain) after every start/update, oldest first
    history: list[tuple[float, float]] = field(default_factory=list)


class AudioOutput(Protocol):
    """Audio device collaborator."""

    def start_tone(self, frequency_hz: float, gain: float) -> ToneHandle: ...

    def update_tone(self, handle: ToneHandle, frequency_hz: float, gain: float) -> None: ...

    def stop_tone(self, handle: ToneHandle) -> None: ...


class SynthAudioOutput:
    """
    Sine-wave synthesizer that renders tones to WAV bytes.

    Nothing plays by itself; the UI hands render_wav() output to an audio
    widget.
    """

    def __init__(self, sample_rate: int = config.AUDIO_SAMPLE_RATE):
        self.sample_rate = sample_rate
        self._next_id = 0

    def start_tone(self, frequency_hz: float, gain: float) -> ToneHandle:
        if frequency_hz <= 0 or frequency_hz >= self.sample_rate / 2:
            raise AudioUnavailable(f"Frequency {frequency_hz:.1f}Hz outside device range")
        self._next_id += 1
        handle = ToneHandle(tone_id=self._next_id, frequency_hz=frequency_hz, gain=gain)
        handle.history.append((frequency_hz, gain))
        return handle

    def update_tone(self, handle: ToneHandle, frequency_hz: float, gain: float) -> None:
        if not handle.active:
            raise AudioUnavailable(f"Tone {handle.tone_id} already stopped")
        handle.frequency_hz = frequency_hz
        handle.gain = gain
        handle.history.append((frequency_hz, gain))

    def stop_tone(self, handle: ToneHandle) -> None:
        handle.active = False

    def render_wav(self, handle: ToneHandle, seconds: float = config.TONE_PREVIEW_SECONDS) -> bytes:
        """
        Render the tone's trajectory as 16-bit mono WAV.

        Each recorded (frequency, gain) step gets an equal slice of the
        duration; phase is carried across steps so pitch glides without clicks.
        """
        steps = handle.history or [(handle.frequency_hz, handle.gain)]
        total = max(int(seconds * self.sample_rate), len(steps))
        per_step = total // len(steps)

        chunks = []
        phase = 0.0
        for frequency, gain in steps:
            t = np.arange(per_step)
            increment = 2 * np.pi * frequency / self.sample_rate
            chunks.append(gain * np.sin(phase + increment * t))
            phase += increment * per_step

        samples = np.concatenate(chunks)
        pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)

        buffer = io.BytesIO()
        with wave.open(buffer, "wb") as wav:
            wav.setnchannels(1)
            wav.setsampwidth(2)
            wav.setframerate(self.sample_rate)
            wav.writeframes(pcm.tobytes())
        return buffer.getvalue()


class AudioSession:
    """
    Owns the audio device for one view and the single live tone.

    Device errors are logged and swallowed: the visual interaction continues
    without sound.
    """

    def __init__(self, output: Optional[AudioOutput] = None):
        self.output = output
        self._live: Optional[ToneHandle] = None
        self._owner: Optional[int] = None
        self.last_tone: Optional[ToneHandle] = None

    @property
    def live_tone(self) -> Optional[ToneHandle]:
        return self._live

    @property
    def owner(self) -> Optional[int]:
        """Node id holding the live tone."""
        return self._owner

    def start(self, owner: int, frequency_hz: float, gain: float) -> Optional[ToneHandle]:
        """Start a tone for owner, stopping any live tone first."""
        if self.output is None:
            return None
        if self._live is not None:
            self.stop()

        try:
            handle = self.output.start_tone(frequency_hz, gain)
        except AudioUnavailable as e:
            logger.warning(f"Audio start failed, continuing without sound: {e}")
            return None

        self._live = handle
        self._owner = owner
        self.last_tone = handle
        return handle

    def update(self, owner: int, frequency_hz: float, gain: float) -> None:
        """Retune the live tone if owner holds it."""
        if self._live is None or self._owner != owner:
            return
        try:
            self.output.update_tone(self._live, frequency_hz, gain)
        except AudioUnavailable as e:
            logger.warning(f"Audio update failed: {e}")

    def stop(self, owner: Optional[int] = None) -> None:
        """Stop the live tone (only if owner holds it, when owner is given)."""
        if self._live is None:
            return
        if owner is not None and owner != self._owner:
            return
        try:
            self.output.stop_tone(self._live)
        except AudioUnavailable as e:
            logger.warning(f"Audio stop failed: {e}")
        finally:
            self._live = None
            self._owner = None

    def close(self) -> None:
        """Release the device; the session can be reopened by the next start."""
        self.stop()
