from unittest.mock import Mock

import pytest

from voice2text.onebot import OneBotClient, OneBotError


def fake_session(body):
    session = Mock()
    session.post.return_value = Mock(json=lambda: body)
    return session


def test_get_record_posts_action():
    session = fake_session({"status": "ok", "retcode": 0, "data": {"file": "/tmp/v.wav", "base64": "UklGRg=="}})
    client = OneBotClient("http://127.0.0.1:5700/", access_token="tok", session=session)
    data = client.get_record("v.amr", out_format="wav")
    assert data["base64"] == "UklGRg=="
    args, kwargs = session.post.call_args
    assert args[0] == "http://127.0.0.1:5700/get_record"
    assert kwargs["json"] == {"file": "v.amr", "out_format": "wav"}
    assert kwargs["headers"]["Authorization"] == "Bearer tok"


def test_get_record_failed_status():
    session = fake_session({"status": "failed", "retcode": 100, "wording": "file not found"})
    client = OneBotClient("http://127.0.0.1:5700", session=session)
    with pytest.raises(OneBotError, match="file not found"):
        client.get_record("missing.amr")


def test_get_record_without_session_uses_requests(monkeypatch):
    import voice2text.onebot as onebot

    post = Mock(return_value=Mock(json=lambda: {"status": "ok", "data": {"base64": "UklGRg=="}}))
    monkeypatch.setattr(onebot.requests, "post", post)
    client = OneBotClient("http://127.0.0.1:5700")
    assert client.get_record("v.amr")["base64"] == "UklGRg=="
    assert post.call_args[0][0] == "http://127.0.0.1:5700/get_record"
