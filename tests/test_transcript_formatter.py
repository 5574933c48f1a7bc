from voice2text import transcript_formatter as tf


def test_join_segments_strips_timestamps():
    assert tf.join_segments("0:00:01 hello\n0:00:03 world\n") == " hello world"


def test_join_segments_keeps_text_after_first_space():
    raw = "[0:0.020,0:2.380]  今天天气不错。\n[0:2.380,0:4.100]  我们出去走走吧。"
    assert tf.join_segments(raw) == "  今天天气不错。  我们出去走走吧。"


def test_join_segments_skips_lines_without_space():
    assert tf.join_segments("garbage\n0:01 ok") == " ok"


def test_join_segments_empty():
    assert tf.join_segments("") == ""
    assert tf.join_segments(None) == ""
