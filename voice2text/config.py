"""
Runtime configuration.

All settings come from environment variables so the service can be
configured the same way locally and when deployed.  ``load_settings`` reads
them once per call into an immutable :class:`Settings` instance.
"""

import os
from dataclasses import dataclass
from typing import Optional


# Engine model types accepted by Tencent Cloud ASR for both the sentence and
# the recording-file APIs.
SUPPORTED_ENGINES = {
    "8k_zh",
    "8k_en",
    "16k_zh",
    "16k_zh-PY",
    "16k_zh_medical",
    "16k_en",
    "16k_yue",
    "16k_ja",
    "16k_ko",
    "16k_vi",
    "16k_ms",
    "16k_id",
    "16k_fil",
    "16k_th",
    "16k_pt",
    "16k_tr",
    "16k_ar",
    "16k_es",
    "16k_hi",
    "16k_fr",
    "16k_de",
    "16k_zh_dialect",
}

DEFAULT_ENDPOINT = "asr.tencentcloudapi.com"
DEFAULT_REGION = "ap-guangzhou"
DEFAULT_ENGINE = "16k_zh"
DEFAULT_POLL_INTERVAL = 0.618
DEFAULT_MAX_WAIT = 1800.0


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Service settings.

    Attributes:
        secret_id: Tencent Cloud SecretId.
        secret_key: Tencent Cloud SecretKey.
        endpoint: ASR API host.
        region: Tencent Cloud region.
        engine: Engine model type used for both recognition paths.
        poll_interval: Seconds to sleep between task status queries.
        max_wait: Upper bound in seconds on how long a recognition task is
            polled before giving up.
        auto_recognize: Whether the ``/webhook`` auto-recognition route is
            registered.
        ffmpeg_executable: Path to ffmpeg; ``None`` uses pydub's converter.
        ffmpeg_timeout: Seconds before a duration probe is aborted.
        onebot_api_url: Base URL of the OneBot HTTP API.
        onebot_access_token: Optional OneBot access token.
        http_timeout: Timeout for outbound HTTP requests.
        locale: Language of caller-visible messages.
    """

    secret_id: Optional[str] = None
    secret_key: Optional[str] = None
    endpoint: str = DEFAULT_ENDPOINT
    region: str = DEFAULT_REGION
    engine: str = DEFAULT_ENGINE
    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_wait: float = DEFAULT_MAX_WAIT
    auto_recognize: bool = False
    ffmpeg_executable: Optional[str] = None
    ffmpeg_timeout: float = 120.0
    onebot_api_url: Optional[str] = None
    onebot_access_token: Optional[str] = None
    http_timeout: float = 30.0
    locale: str = "zh"

    def __post_init__(self) -> None:
        if self.engine not in SUPPORTED_ENGINES:
            raise ValueError(f"Unsupported ASR engine: {self.engine}")
        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if self.max_wait <= 0:
            raise ValueError("max_wait must be positive")


def load_settings() -> Settings:
    """Build :class:`Settings` from the current environment."""
    return Settings(
        secret_id=os.environ.get("TENCENTCLOUD_SECRET_ID"),
        secret_key=os.environ.get("TENCENTCLOUD_SECRET_KEY"),
        endpoint=os.environ.get("ASR_ENDPOINT", DEFAULT_ENDPOINT),
        region=os.environ.get("ASR_REGION", DEFAULT_REGION),
        engine=os.environ.get("ASR_ENGINE", DEFAULT_ENGINE),
        poll_interval=float(os.environ.get("ASR_POLL_INTERVAL", DEFAULT_POLL_INTERVAL)),
        max_wait=float(os.environ.get("ASR_MAX_WAIT", DEFAULT_MAX_WAIT)),
        auto_recognize=_env_bool("AUTO_RECOGNIZE"),
        ffmpeg_executable=os.environ.get("FFMPEG_EXECUTABLE") or None,
        ffmpeg_timeout=float(os.environ.get("FFMPEG_TIMEOUT", 120)),
        onebot_api_url=os.environ.get("ONEBOT_API_URL") or None,
        onebot_access_token=os.environ.get("ONEBOT_ACCESS_TOKEN") or None,
        http_timeout=float(os.environ.get("HTTP_TIMEOUT", 30)),
        locale=os.environ.get("MESSAGE_LOCALE", "zh"),
    )
