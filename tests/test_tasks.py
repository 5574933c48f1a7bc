import base64
from unittest.mock import Mock

from voice2text import audio_resolver, tasks
from voice2text.config import Settings
from voice2text.models import Element, Message
from voice2text.stt_service import TencentRecognizer


class FakeRecords:
    def __init__(self, data):
        self.data = data

    def get_record(self, file, out_format="wav"):
        return self.data


class FakeSession:
    def get(self, url, timeout=None):
        return Mock(content=b"OggS-long-voice")


def make_transcriber(client, duration, *, records=None, locale="zh"):
    recognizer = TencentRecognizer(client, engine="16k_zh", sleep=lambda seconds: None)
    resolvers = audio_resolver.build_resolvers(records=records, session=FakeSession())
    return tasks.Transcriber(
        Settings(locale=locale),
        recognizer=recognizer,
        resolvers=resolvers,
        prober=lambda payload: duration,
    )


def test_message_without_audio_returns_sentinel():
    client = Mock()
    transcriber = make_transcriber(client, 10.0)
    message = Message("onebot", [Element("text", {"content": "hi"}), Element("image", {"src": "x"})])
    assert tasks.audio2text(message, transcriber=transcriber) == tasks.NO_AUDIO_FOUND
    assert not client.method_calls


def test_onebot_short_audio_uses_sentence_recognition():
    client = Mock()
    client.SentenceRecognition.return_value = Mock(Result="今天吃什么")
    records = FakeRecords({"base64": base64.b64encode(b"RIFF-wav").decode()})
    transcriber = make_transcriber(client, 10.0, records=records)
    message = {"platform": "onebot", "elements": [{"type": "record", "attrs": {"file": "v.amr"}}]}
    assert transcriber.audio2text(message) == "今天吃什么"
    assert client.SentenceRecognition.call_count == 1
    assert not client.CreateRecTask.called
    assert client.SentenceRecognition.call_args[0][0].VoiceFormat == "wav"


def test_discord_long_audio_uses_recognition_task():
    client = Mock()
    client.CreateRecTask.return_value = Mock(Data=Mock(TaskId=7))
    client.DescribeTaskStatus.side_effect = [
        Mock(Data=Mock(StatusStr="waiting", Result="", ErrorMsg="")),
        Mock(Data=Mock(StatusStr="doing", Result="", ErrorMsg="")),
        Mock(Data=Mock(StatusStr="success", Result="0:00:01 hello\n0:00:03 world\n", ErrorMsg="")),
    ]
    transcriber = make_transcriber(client, 120.0)
    message = Message("discord", [Element("audio", {"src": "https://cdn.example/v.ogg"})])
    assert transcriber.audio2text(message) == " hello world"
    assert client.CreateRecTask.call_count == 1
    assert client.DescribeTaskStatus.call_count == 3
    assert not client.SentenceRecognition.called


def test_resolver_failure_is_localized_text():
    client = Mock()
    records = FakeRecords({"file": "/data/v.wav"})
    message = Message("onebot", [Element("record", {"file": "v.amr"})])
    assert make_transcriber(client, 10.0, records=records).audio2text(message) == "onebot 平台未开启 enableLocalFile2Url"
    english = make_transcriber(client, 10.0, records=records, locale="en")
    assert "enableLocalFile2Url" in english.audio2text(message)
    assert not client.method_calls


def test_unsupported_platform_is_localized_text():
    transcriber = make_transcriber(Mock(), 10.0, locale="en")
    message = Message("kook", [Element("audio", {"src": "x"})])
    assert transcriber.audio2text(message) == "Voice recognition is not supported on this platform yet"
