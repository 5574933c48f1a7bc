import subprocess
from unittest.mock import Mock

import pytest

from voice2text import audio_processor
from voice2text.errors import ProbeError
from voice2text.models import AudioFormat, AudioPayload

PAYLOAD = AudioPayload(b"OggS-fake", AudioFormat.OGG_OPUS)


def test_parse_duration():
    text = "size=N/A time=00:01:05.50 bitrate=N/A speed= 612x"
    assert audio_processor.parse_duration(text) == 65.5


def test_parse_duration_uses_last_marker():
    text = "time=00:00:10.00 bitrate=N/A\rtime=01:02:03.04 bitrate=N/A"
    assert audio_processor.parse_duration(text) == 3723.04


def test_parse_duration_without_marker():
    assert audio_processor.parse_duration("pipe:: Invalid data found") == 0.0


def test_probe_duration_pipes_bytes_to_ffmpeg(monkeypatch):
    calls = {}

    def fake_run(cmd, **kwargs):
        calls["cmd"] = cmd
        calls["input"] = kwargs["input"]
        return Mock(returncode=0, stderr=b"size=N/A time=00:00:12.34 bitrate=N/A")

    monkeypatch.setattr(audio_processor.subprocess, "run", fake_run)
    duration = audio_processor.probe_duration(PAYLOAD, executable="/opt/ffmpeg")
    assert duration == 12.34
    assert calls["cmd"][0] == "/opt/ffmpeg"
    assert calls["cmd"][1:] == ["-hide_banner", "-i", "-", "-f", "null", "-"]
    assert calls["input"] == b"OggS-fake"


def test_probe_duration_defaults_to_zero(monkeypatch):
    monkeypatch.setattr(
        audio_processor.subprocess,
        "run",
        lambda cmd, **kwargs: Mock(returncode=1, stderr=b"pipe:: Invalid data found when processing input"),
    )
    assert audio_processor.probe_duration(PAYLOAD) == 0.0


def test_probe_duration_missing_ffmpeg(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError(2, "No such file or directory")

    monkeypatch.setattr(audio_processor.subprocess, "run", fake_run)
    with pytest.raises(ProbeError):
        audio_processor.probe_duration(PAYLOAD, executable="missing-ffmpeg")


def test_probe_duration_timeout(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr(audio_processor.subprocess, "run", fake_run)
    with pytest.raises(ProbeError):
        audio_processor.probe_duration(PAYLOAD, timeout=1)
