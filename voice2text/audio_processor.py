"""
Audio duration probing.

The recogniser has to know how long a clip is before choosing between the
short-form and the long-form API.  Chat platforms rarely report a reliable
duration, so the clip is run through ``ffmpeg`` with a null muxer: nothing
is written to disk, and the final ``time=`` progress marker on stderr gives
the decoded length.  The executable defaults to the converter `pydub` has
located, which is ``ffmpeg`` on the ``PATH`` unless configured otherwise.
"""

import logging
import re
import subprocess
from typing import Optional

from pydub import AudioSegment

from .errors import ProbeError
from .models import AudioPayload

logger = logging.getLogger(__name__)

TIME_MARKER = re.compile(r"time=(\d{2}):(\d{2}):(\d{2})\.(\d{2})")


def parse_duration(stderr_text: str) -> float:
    """Extract the decoded duration from ffmpeg diagnostic output.

    ffmpeg reports progress as ``time=HH:MM:SS.CC``; the last marker is the
    total.  Returns ``0.0`` when no marker is present.
    """
    matches = TIME_MARKER.findall(stderr_text)
    if not matches:
        return 0.0
    hours, minutes, seconds, centis = (int(part) for part in matches[-1])
    return hours * 3600 + minutes * 60 + seconds + centis / 100


def ffmpeg_executable(configured: Optional[str] = None) -> str:
    return configured or AudioSegment.converter or "ffmpeg"


def probe_duration(
    payload: AudioPayload,
    *,
    executable: Optional[str] = None,
    timeout: Optional[float] = 120.0,
) -> float:
    """Measure the duration of ``payload`` in seconds.

    Args:
        payload: Audio to measure.  The bytes are piped to ffmpeg's stdin.
        executable: ffmpeg binary; defaults to pydub's converter.
        timeout: Seconds to wait for ffmpeg before giving up.

    Returns:
        The duration in seconds, or ``0.0`` if ffmpeg printed no progress
        marker.

    Raises:
        ProbeError: If ffmpeg cannot be started or times out.
    """
    cmd = [ffmpeg_executable(executable), "-hide_banner", "-i", "-", "-f", "null", "-"]
    try:
        completed = subprocess.run(
            cmd,
            input=payload.data,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise ProbeError(f"ffmpeg did not finish within {timeout}s") from exc
    except OSError as exc:
        raise ProbeError(f"Could not run ffmpeg ({cmd[0]}): {exc}") from exc

    stderr_text = completed.stderr.decode("utf-8", errors="replace")
    duration = parse_duration(stderr_text)
    if not duration:
        # Unknown length is treated as short audio.
        logger.warning("No duration marker in ffmpeg output (exit %s)", completed.returncode)
    else:
        logger.debug("Probed %d bytes of %s: %.2fs", len(payload), payload.format.value, duration)
    return duration
