"""Caller-visible strings."""

from typing import Union

from .models import FailureReason

LOUDER = "louder"

MESSAGES = {
    "zh": {
        FailureReason.CAPABILITY_DISABLED: "onebot 平台未开启 enableLocalFile2Url",
        FailureReason.PAYLOAD_UNAVAILABLE: "获取语音数据失败",
        FailureReason.PLATFORM_UNSUPPORTED: "暂未支持该平台，请拷打开发者",
        LOUDER: "大声点，我听不见",
    },
    "en": {
        FailureReason.CAPABILITY_DISABLED: "The OneBot implementation does not expose voice files (enable enableLocalFile2Url)",
        FailureReason.PAYLOAD_UNAVAILABLE: "Could not get the voice data from this message",
        FailureReason.PLATFORM_UNSUPPORTED: "Voice recognition is not supported on this platform yet",
        LOUDER: "Speak louder, I couldn't hear you",
    },
}


def text(key: Union[FailureReason, str], locale: str = "zh") -> str:
    """Look up ``key`` for ``locale``, falling back to Chinese."""
    table = MESSAGES.get(locale, MESSAGES["zh"])
    return table.get(key) or MESSAGES["zh"][key]
