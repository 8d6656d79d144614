"""
Binary content detection.

Only a bounded prefix is inspected. The byte classes follow the text
heuristic used by file(1): BEL, BS, TAB, LF, FF, CR, ESC and everything
from 0x20 up (except DEL) are text; other C0 controls mean binary.
"""

from __future__ import annotations

import io
from typing import BinaryIO

HEAD_SIZE = 300


def _is_binary_byte(b: int) -> bool:
    return b < 7 or b == 11 or 13 < b < 27 or 27 < b < 0x20 or b == 0x7F


def is_binary(content: BinaryIO, file_size: int) -> bool:
    """Return True if the first bytes of ``content`` look like binary data.

    The stream is rewound to offset 0 before returning. Read and seek
    failures raise ``OSError``.
    """
    head_size = min(file_size, HEAD_SIZE)
    # A stream shorter than file_size gives a short head, classified as text
    head = content.read(head_size) if head_size > 0 else b""
    content.seek(0, io.SEEK_SET)

    return any(_is_binary_byte(b) for b in head)
