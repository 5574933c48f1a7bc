"""
Data types shared by the recognition pipeline.

Messages arrive as plain dictionaries from the HTTP layer and are turned
into :class:`Message` values by :meth:`Message.from_dict`.  Everything else
here is created per request and discarded once the text has been produced.
"""

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

AUDIO_ELEMENT_TYPES = {"audio", "record"}


class Platform(str, Enum):
    """Chat platforms whose voice attachments can be resolved."""

    ONEBOT = "onebot"
    TELEGRAM = "telegram"
    DISCORD = "discord"


class AudioFormat(str, Enum):
    WAV = "wav"
    OGG_OPUS = "ogg-opus"


class FailureReason(str, Enum):
    """Why no audio could be obtained from a message element.

    These are expected outcomes that only a user or an administrator can
    fix, so they are returned as values and rendered as text rather than
    raised.
    """

    CAPABILITY_DISABLED = "platform capability not enabled"
    PAYLOAD_UNAVAILABLE = "payload unavailable"
    PLATFORM_UNSUPPORTED = "platform unsupported"


@dataclass
class Element:
    type: str
    attrs: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_audio(self) -> bool:
        return self.type in AUDIO_ELEMENT_TYPES


@dataclass
class Message:
    """An inbound chat message reduced to what recognition needs."""

    platform: str
    elements: List[Element] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        """Build a message from ``{"platform": ..., "elements": [...]}``.

        Raises:
            ValueError: If ``platform`` is missing or ``elements`` is not a
                list of objects with a ``type``.
        """
        platform = data.get("platform")
        if not platform or not isinstance(platform, str):
            raise ValueError("Message is missing 'platform'")
        raw_elements = data.get("elements") or []
        if not isinstance(raw_elements, list):
            raise ValueError("'elements' must be a list")
        elements = []
        for raw in raw_elements:
            if not isinstance(raw, dict) or "type" not in raw:
                raise ValueError("Each element needs a 'type'")
            elements.append(Element(type=raw["type"], attrs=dict(raw.get("attrs") or {})))
        return cls(platform=platform, elements=elements)

    def first_audio(self) -> Optional[Element]:
        for element in self.elements:
            if element.is_audio:
                return element
        return None


@dataclass(frozen=True)
class AudioPayload:
    """Raw audio bytes plus the format tag expected by the ASR provider."""

    data: bytes
    format: AudioFormat

    @property
    def base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def __len__(self) -> int:
        return len(self.data)


RecognitionOutcome = Union[AudioPayload, FailureReason]


class TaskStatus(str, Enum):
    WAITING = "waiting"
    DOING = "doing"
    SUCCESS = "success"
    FAILED = "failed"


PENDING_STATUSES = {TaskStatus.WAITING.value, TaskStatus.DOING.value}


@dataclass
class Task:
    """Snapshot of a long-form recognition task as reported by the provider."""

    task_id: int
    status: str
    result: str = ""
    error_msg: Optional[str] = None
    audio_duration: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self.status in PENDING_STATUSES

    @property
    def failed(self) -> bool:
        return self.status == TaskStatus.FAILED.value
