"""
Core package for the voice-to-text service.

This package contains the components used by the Flask entrypoint to turn a
chat message carrying a voice attachment into plain text: resolving the
audio per chat platform, probing its duration with ffmpeg, and running it
through Tencent Cloud ASR with either the short-form or the long-form API.
"""

from .tasks import NO_AUDIO_FOUND, audio2text

__all__ = ["NO_AUDIO_FOUND", "audio2text"]
