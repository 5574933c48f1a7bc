"""
Orchestration layer for voice recognition.

:func:`audio2text` is the single entrypoint used by the Flask app.  It
coordinates the steps of a request:

* find the first ``audio``/``record`` element of the message;
* resolve it into raw audio for the message's platform;
* probe the duration with ffmpeg;
* recognise it with the short-form or the long-form ASR API.

A message without audio yields :data:`NO_AUDIO_FOUND`.  When the audio
cannot be obtained, the localized failure message is returned as the text.
ffmpeg and ASR errors propagate to the caller.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional, Union

from . import audio_processor, audio_resolver, messages
from .config import Settings, load_settings
from .models import AudioPayload, FailureReason, Message
from .onebot import OneBotClient
from .stt_service import TencentRecognizer

logger = logging.getLogger(__name__)

# Returned for messages that carry no audio at all.
NO_AUDIO_FOUND = "e04659269e105f3984e7a09ae6e0fa98da8aec5a"


class Transcriber:
    """Holds the collaborators needed to turn messages into text.

    All collaborators are optional; missing ones are built from
    ``settings`` on first use.  The ASR client is created lazily so the
    service can start without credentials and fail per request instead.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        recognizer: Optional[TencentRecognizer] = None,
        resolvers: Optional[Dict] = None,
        prober: Optional[Callable[[AudioPayload], float]] = None,
    ):
        self.settings = settings or load_settings()
        self._recognizer = recognizer
        self._lock = threading.Lock()
        if resolvers is None:
            records = None
            if self.settings.onebot_api_url:
                records = OneBotClient(
                    self.settings.onebot_api_url,
                    access_token=self.settings.onebot_access_token,
                    timeout=self.settings.http_timeout,
                )
            resolvers = audio_resolver.build_resolvers(
                records=records,
                timeout=self.settings.http_timeout,
            )
        self.resolvers = resolvers
        self.prober = prober or self._probe

    def _probe(self, payload: AudioPayload) -> float:
        return audio_processor.probe_duration(
            payload,
            executable=self.settings.ffmpeg_executable,
            timeout=self.settings.ffmpeg_timeout,
        )

    @property
    def recognizer(self) -> TencentRecognizer:
        if self._recognizer is None:
            with self._lock:
                if self._recognizer is None:
                    self._recognizer = TencentRecognizer.from_settings(self.settings)
        return self._recognizer

    def audio2text(self, message: Union[Message, Dict[str, Any]]) -> str:
        """Recognise the first voice attachment of ``message``.

        Returns:
            The transcript, :data:`NO_AUDIO_FOUND` when the message has no
            audio element, or a localized explanation when the audio cannot
            be obtained.  An empty string means nothing was recognised.

        Raises:
            ProbeError: If ffmpeg fails.
            ProviderError: If the ASR provider rejects the audio or a
                long-form task fails or stalls.
        """
        if isinstance(message, dict):
            message = Message.from_dict(message)
        element = message.first_audio()
        if element is None:
            logger.debug("No audio element in %s message", message.platform)
            return NO_AUDIO_FOUND

        outcome = audio_resolver.resolve(message.platform, element, self.resolvers)
        if isinstance(outcome, FailureReason):
            logger.info("Cannot resolve audio on %s: %s", message.platform, outcome.value)
            return messages.text(outcome, self.settings.locale)

        duration = self.prober(outcome)
        return self.recognizer.recognize(outcome, duration)


_default_transcriber: Optional[Transcriber] = None
_default_lock = threading.Lock()


def get_transcriber() -> Transcriber:
    """Get or create the process-wide transcriber built from the environment."""
    global _default_transcriber
    if _default_transcriber is None:
        with _default_lock:
            if _default_transcriber is None:
                _default_transcriber = Transcriber()
    return _default_transcriber


def audio2text(message: Union[Message, Dict[str, Any]], *, transcriber: Optional[Transcriber] = None) -> str:
    """Turn the voice attachment of ``message`` into text.

    See :meth:`Transcriber.audio2text`.
    """
    return (transcriber or get_transcriber()).audio2text(message)
