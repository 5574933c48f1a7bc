"""
Tencent Cloud ASR service wrapper.

This module encapsulates interaction with the Tencent Cloud speech
recognition API (version 2019-06-14).  Short clips go through the
one-shot ``SentenceRecognition`` call; anything of :data:`SHORT_AUDIO_LIMIT`
seconds or longer is submitted as a recording-file task with
``CreateRecTask`` and polled with ``DescribeTaskStatus`` until it finishes.

Usage::

    from voice2text.stt_service import TencentRecognizer

    recognizer = TencentRecognizer.from_settings(load_settings())
    text = recognizer.recognize(payload, duration=12.3)
"""

import json
import logging
import time
from enum import Enum
from typing import Any, Callable, Dict, Optional

from tenacity import RetryError, Retrying, retry_if_result, stop_after_attempt, stop_after_delay, wait_fixed
from tencentcloud.asr.v20190614 import asr_client
from tencentcloud.asr.v20190614 import models as asr_models
from tencentcloud.common import credential
from tencentcloud.common.exception.tencent_cloud_sdk_exception import TencentCloudSDKException
from tencentcloud.common.profile.client_profile import ClientProfile
from tencentcloud.common.profile.http_profile import HttpProfile

from .config import DEFAULT_ENGINE, DEFAULT_MAX_WAIT, DEFAULT_POLL_INTERVAL, Settings
from .errors import ProviderError, TaskFailedError, TaskStalledError
from .models import AudioPayload, Task
from .transcript_formatter import join_segments

logger = logging.getLogger(__name__)

# The sentence API only accepts clips shorter than one minute.
SHORT_AUDIO_LIMIT = 60.0

SOURCE_TYPE_DATA = 1
CONVERT_NUM_MODE = 1


class Strategy(str, Enum):
    SYNC = "sync"
    ASYNC = "async"


def select_strategy(duration: float) -> Strategy:
    """Pick the recognition API for a clip of ``duration`` seconds."""
    return Strategy.SYNC if duration < SHORT_AUDIO_LIMIT else Strategy.ASYNC


def create_client(settings: Settings) -> asr_client.AsrClient:
    """Build an ``AsrClient`` from credentials, region and endpoint.

    Raises:
        ValueError: If the credentials are not configured.
    """
    if not settings.secret_id or not settings.secret_key:
        raise ValueError("TENCENTCLOUD_SECRET_ID and TENCENTCLOUD_SECRET_KEY must be set")
    cred = credential.Credential(settings.secret_id, settings.secret_key)
    http_profile = HttpProfile()
    http_profile.endpoint = settings.endpoint
    client_profile = ClientProfile()
    client_profile.httpProfile = http_profile
    return asr_client.AsrClient(cred, settings.region, client_profile)


def _build_request(model_cls, params: Dict[str, Any]):
    request = model_cls()
    request.from_json_string(json.dumps(params))
    return request


class TencentRecognizer:
    """Speech recognition through Tencent Cloud ASR.

    Args:
        client: An ``AsrClient`` (or anything exposing the same three
            actions).
        engine: Engine model type, e.g. ``16k_zh``.
        poll_interval: Fixed delay between task status queries.
        max_wait: Seconds after which a pending task is abandoned.
        max_polls: Optional cap on the number of status queries.
        sleep: Sleep function used between polls.
    """

    def __init__(
        self,
        client,
        *,
        engine: str = DEFAULT_ENGINE,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_wait: float = DEFAULT_MAX_WAIT,
        max_polls: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.engine = engine
        self.poll_interval = poll_interval
        self.max_wait = max_wait
        self.max_polls = max_polls
        self.sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings) -> "TencentRecognizer":
        return cls(
            create_client(settings),
            engine=settings.engine,
            poll_interval=settings.poll_interval,
            max_wait=settings.max_wait,
        )

    def _invoke(self, action: str, request):
        try:
            return getattr(self.client, action)(request)
        except TencentCloudSDKException as exc:
            logger.error("%s rejected: [%s] %s", action, exc.get_code(), exc.get_message())
            raise ProviderError(
                f"{action} failed: {exc.get_message()}",
                code=exc.get_code(),
                request_id=exc.get_request_id(),
            ) from exc

    def recognize(self, payload: AudioPayload, duration: float) -> str:
        """Recognise ``payload`` with the API suited to its duration."""
        strategy = select_strategy(duration)
        logger.info("Recognising %.2fs of %s audio via %s path", duration, payload.format.value, strategy.value)
        if strategy is Strategy.SYNC:
            return self.recognize_sentence(payload)
        return self.recognize_long(payload)

    def recognize_sentence(self, payload: AudioPayload) -> str:
        """Transcribe a clip shorter than a minute in a single call."""
        request = _build_request(
            asr_models.SentenceRecognitionRequest,
            {
                "EngSerViceType": self.engine,
                "SourceType": SOURCE_TYPE_DATA,
                "VoiceFormat": payload.format.value,
                "Data": payload.base64,
                "DataLen": len(payload),
                "ConvertNumMode": CONVERT_NUM_MODE,
            },
        )
        response = self._invoke("SentenceRecognition", request)
        logger.debug("SentenceRecognition done, request id %s", getattr(response, "RequestId", None))
        return response.Result or ""

    def create_task(self, payload: AudioPayload) -> int:
        """Submit a recording-file recognition task and return its id."""
        request = _build_request(
            asr_models.CreateRecTaskRequest,
            {
                "EngineModelType": self.engine,
                "ChannelNum": 1,
                "ResTextFormat": 0,
                "SourceType": SOURCE_TYPE_DATA,
                "Data": payload.base64,
                "DataLen": len(payload),
                "ConvertNumMode": CONVERT_NUM_MODE,
            },
        )
        response = self._invoke("CreateRecTask", request)
        task_id = response.Data.TaskId
        logger.info("Created recognition task %s", task_id)
        return task_id

    def describe_task(self, task_id: int) -> Task:
        request = _build_request(asr_models.DescribeTaskStatusRequest, {"TaskId": task_id})
        data = self._invoke("DescribeTaskStatus", request).Data
        return Task(
            task_id=task_id,
            status=data.StatusStr,
            result=data.Result or "",
            error_msg=data.ErrorMsg,
            audio_duration=data.AudioDuration,
        )

    def wait_for_task(self, task_id: int) -> Task:
        """Poll ``task_id`` at a fixed interval until it leaves waiting/doing.

        Raises:
            TaskStalledError: If the task is still pending when the wait
                budget (or the poll cap) is exhausted.
            ProviderError: If a status query is rejected.
        """
        stop = stop_after_delay(self.max_wait)
        if self.max_polls is not None:
            stop = stop | stop_after_attempt(self.max_polls)
        retrying = Retrying(
            retry=retry_if_result(lambda task: task.pending),
            wait=wait_fixed(self.poll_interval),
            stop=stop,
            sleep=self.sleep,
            before_sleep=lambda state: logger.debug(
                "Task %s still %s (poll %d)", task_id, state.outcome.result().status, state.attempt_number
            ),
        )
        started = time.monotonic()
        try:
            return retrying(self.describe_task, task_id)
        except RetryError as exc:
            raise TaskStalledError(task_id, time.monotonic() - started) from exc

    def recognize_long(self, payload: AudioPayload) -> str:
        """Transcribe a clip of a minute or more through a recognition task."""
        task_id = self.create_task(payload)
        task = self.wait_for_task(task_id)
        if task.failed:
            raise TaskFailedError(task_id, task.error_msg)
        logger.info("Task %s finished with status %s", task_id, task.status)
        return join_segments(task.result)
