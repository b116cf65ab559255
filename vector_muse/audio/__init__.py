"""
Audio output for Vector-Muse.
"""

from .tone import AudioOutput, AudioSession, SynthAudioOutput, ToneHandle

__all__ = ["AudioOutput", "AudioSession", "SynthAudioOutput", "ToneHandle"]
