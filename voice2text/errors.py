"""Exceptions raised while turning audio into text."""

from typing import Optional


class Voice2TextError(Exception):
    """Base class for recognition failures that terminate a request."""


class ProbeError(Voice2TextError):
    """ffmpeg could not be started or did not finish in time."""


class ProviderError(Voice2TextError):
    """The ASR provider rejected a call.

    Attributes:
        code: Provider error code, when the SDK reported one.
        request_id: Provider request id, useful when contacting support.
    """

    def __init__(self, message: str, *, code: Optional[str] = None, request_id: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.request_id = request_id


class TaskStalledError(ProviderError):
    """A recognition task did not finish within the polling budget."""

    def __init__(self, task_id, waited: float):
        super().__init__(f"Recognition task {task_id} still pending after {waited:.0f}s")
        self.task_id = task_id
        self.waited = waited


class TaskFailedError(ProviderError):
    """A recognition task finished with status ``failed``."""

    def __init__(self, task_id, error_msg: Optional[str]):
        super().__init__(f"Recognition task {task_id} failed: {error_msg or 'unknown error'}")
        self.task_id = task_id
        self.error_msg = error_msg
