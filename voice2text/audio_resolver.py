"""
Per-platform resolution of voice attachments.

Every chat platform hands over voice messages differently: OneBot needs an
API call to convert the file, Telegram adapters embed the audio as a data
URI, and Discord adapters give a CDN URL.  Each platform gets a resolver
with a single ``resolve(element)`` method and is registered in
:func:`build_resolvers`; :func:`resolve` dispatches on the message platform.

Resolvers return a :class:`~voice2text.models.FailureReason` instead of
raising when the audio is simply not available, so callers can show a
readable message.  Transport errors are not caught here.
"""

import base64
import binascii
import logging
from typing import Dict, Optional, Protocol

import requests

from .models import AudioFormat, AudioPayload, Element, FailureReason, Platform, RecognitionOutcome

logger = logging.getLogger(__name__)


class RecordSource(Protocol):
    """Anything that can fetch a OneBot voice record, e.g. :class:`~voice2text.onebot.OneBotClient`."""

    def get_record(self, file: str, out_format: str = "wav") -> Dict: ...


class AudioResolver(Protocol):
    def resolve(self, element: Element) -> RecognitionOutcome: ...


class OneBotResolver:
    def __init__(self, records: Optional[RecordSource]):
        self.records = records

    def resolve(self, element: Element) -> RecognitionOutcome:
        file = element.attrs.get("file")
        if not file:
            return FailureReason.PAYLOAD_UNAVAILABLE
        if self.records is None:
            logger.warning("No OneBot API configured; cannot fetch record %s", file)
            return FailureReason.CAPABILITY_DISABLED
        record = self.records.get_record(file, out_format=AudioFormat.WAV.value)
        encoded = record.get("base64")
        if not encoded:
            # Only returned when the implementation exposes local files.
            return FailureReason.CAPABILITY_DISABLED
        try:
            data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError):
            logger.warning("OneBot returned undecodable base64 for record %s", file)
            return FailureReason.PAYLOAD_UNAVAILABLE
        return AudioPayload(data, AudioFormat.WAV)


class TelegramResolver:
    def resolve(self, element: Element) -> RecognitionOutcome:
        src = element.attrs.get("src")
        if not src or "," not in src:
            return FailureReason.PAYLOAD_UNAVAILABLE
        try:
            data = base64.b64decode(src.split(",", 1)[1], validate=True)
        except (binascii.Error, ValueError):
            logger.warning("Telegram voice element carries an undecodable data URI")
            return FailureReason.PAYLOAD_UNAVAILABLE
        return AudioPayload(data, AudioFormat.OGG_OPUS)


class DiscordResolver:
    def __init__(self, session: Optional[requests.Session] = None, *, timeout: float = 30.0):
        # Without an injected session each download uses its own connection.
        self.session = session or requests
        self.timeout = timeout

    def resolve(self, element: Element) -> RecognitionOutcome:
        url = element.attrs.get("src")
        if not url:
            return FailureReason.PAYLOAD_UNAVAILABLE
        logger.info("Downloading Discord voice attachment %s", url)
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        return AudioPayload(response.content, AudioFormat.OGG_OPUS)


def build_resolvers(
    *,
    records: Optional[RecordSource] = None,
    session: Optional[requests.Session] = None,
    timeout: float = 30.0,
) -> Dict[Platform, AudioResolver]:
    """Create one resolver per supported platform."""
    return {
        Platform.ONEBOT: OneBotResolver(records),
        Platform.TELEGRAM: TelegramResolver(),
        Platform.DISCORD: DiscordResolver(session, timeout=timeout),
    }


def resolve(platform: str, element: Element, resolvers: Dict[Platform, AudioResolver]) -> RecognitionOutcome:
    """Obtain the audio behind ``element`` for a message from ``platform``.

    Args:
        platform: Platform name as reported by the chat adapter.
        element: The ``audio``/``record`` element of the message.
        resolvers: Registry built by :func:`build_resolvers`.

    Returns:
        An :class:`AudioPayload`, or a :class:`FailureReason` when the audio
        cannot be obtained.
    """
    try:
        key = Platform(platform)
    except ValueError:
        return FailureReason.PLATFORM_UNSUPPORTED
    resolver = resolvers.get(key)
    if resolver is None:
        return FailureReason.PLATFORM_UNSUPPORTED
    return resolver.resolve(element)
