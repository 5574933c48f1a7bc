"""
Transcript formatting utilities.

The recording-file API returns its result as one line per sentence, each
line starting with a timestamp range followed by the recognised text, e.g.::

    [0:0.020,0:2.380]  今天天气不错。
    [0:2.380,0:4.100]  我们出去走走吧。

:func:`join_segments` drops the timestamp token of every line and joins the
remaining text into a single string.
"""

from typing import List, Optional


def split_segments(raw: Optional[str]) -> List[str]:
    """Split a raw task result into its lines, keeping empty ones."""
    return ((raw or "") + "\n").split("\n")


def join_segments(raw: Optional[str]) -> str:
    """Strip the leading timestamp of each line and concatenate the text.

    Everything from the first space of a line onward is kept, including the
    space itself, so ``"0:00:01 hello\\n0:00:03 world\\n"`` becomes
    ``" hello world"``.  Lines without a space contribute nothing.
    """
    text = ""
    for segment in split_segments(raw):
        index = segment.find(" ")
        if index > -1:
            text += segment[index:]
    return text
