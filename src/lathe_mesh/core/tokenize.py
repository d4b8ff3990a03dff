import io
import re
from collections.abc import Iterator
from typing import BinaryIO

import numpy as np

from lathe_mesh.config import LINE_BUFFER_SIZE
from lathe_mesh.models import BinaryItem, EmptyItem, FloatItem, IntItem, LineItem, TagItem

_CR = 0x0D
_LF = 0x0A
_ASCII_MAX = 0x7F

_INT_PATTERN = re.compile(r"[+-]?\d+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?|inf|infinity|nan)",
    re.IGNORECASE,
)

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


def _to_f32(text: str) -> float:
    with np.errstate(over="ignore"):
        return float(np.float32(float(text)))


def classify_line(text: str) -> LineItem:
    """Classify one line as empty, integer, float or tag."""
    text = text.strip()
    if not text:
        return EmptyItem()
    if _INT_PATTERN.fullmatch(text):
        value = int(text)
        if _I32_MIN <= value <= _I32_MAX:
            return IntItem(value=value)
    if _FLOAT_PATTERN.fullmatch(text):
        return FloatItem(value=_to_f32(text))
    return TagItem(value=text)


def _is_binary_byte(byte: int) -> bool:
    return byte > _ASCII_MAX or byte == 0


def iter_line_items(stream: BinaryIO, buffer_size: int = LINE_BUFFER_SIZE) -> Iterator[LineItem]:
    """Lazily split a seekable byte stream into classified line items.

    Once a line overflows ``buffer_size`` or a non-ASCII byte shows up, the rest
    of the stream (from the start of that line) is yielded as a single
    :class:`BinaryItem` and iteration stops.
    """
    buffer = bytearray()
    record_start = stream.tell()

    while True:
        chunk = stream.read(1)
        if not chunk:
            break
        byte = chunk[0]

        if len(buffer) >= buffer_size or _is_binary_byte(byte):
            stream.seek(record_start)
            yield BinaryItem(value=stream.read())
            return

        if byte == _CR or byte == _LF:
            if byte == _CR:
                peeked = stream.read(1)
                if peeked and peeked[0] != _LF:
                    stream.seek(-1, io.SEEK_CUR)

            yield classify_line(buffer.decode("ascii"))
            buffer.clear()
            record_start = stream.tell()
        else:
            buffer.append(byte)

    if buffer:
        yield classify_line(buffer.decode("ascii"))
