"""
Tests for Binary Detection
"""

import io

import pytest

from secretsift.analyzer.binary import HEAD_SIZE, is_binary


class TestIsBinary:
    """Tests for is_binary."""

    def test_plain_text(self):
        """Printable text with common whitespace is not binary."""
        data = b"password: hunter2\r\n\tuser: admin\n\x0c\x07\x08\x1b[0m"
        stream = io.BytesIO(data)

        assert not is_binary(stream, len(data))
        assert stream.tell() == 0

    def test_nul_byte(self):
        """A NUL byte in the head means binary."""
        data = b"abc\x00def"
        assert is_binary(io.BytesIO(data), len(data))

    @pytest.mark.parametrize("b", [0, 1, 6, 11, 14, 26, 28, 31, 0x7F])
    def test_flagged_bytes(self, b):
        data = b"hello " + bytes([b]) + b" world"
        assert is_binary(io.BytesIO(data), len(data))

    @pytest.mark.parametrize("b", [7, 8, 9, 10, 12, 13, 27, 0x20, 0x7E, 0x80, 0xFF])
    def test_allowed_bytes(self, b):
        data = b"hello " + bytes([b]) + b" world"
        assert not is_binary(io.BytesIO(data), len(data))

    def test_only_head_is_inspected(self):
        """Control bytes past the first 300 bytes are ignored."""
        data = b"a" * HEAD_SIZE + b"\x00"
        stream = io.BytesIO(data)

        assert not is_binary(stream, len(data))
        assert stream.tell() == 0

    def test_declared_size_limits_head(self):
        """Only min(size, 300) bytes are read."""
        data = b"abcd\x00"
        assert not is_binary(io.BytesIO(data), 4)

    def test_zero_size(self):
        """An empty file is not binary and does not error."""
        stream = io.BytesIO(b"")
        assert not is_binary(stream, 0)
        assert stream.tell() == 0

    def test_empty_stream_with_declared_size(self):
        """A stream that ends before the declared size is treated as text."""
        stream = io.BytesIO(b"")
        assert not is_binary(stream, 50)
        assert stream.tell() == 0

    def test_stream_rewound_after_binary(self):
        data = b"\x00\x01\x02"
        stream = io.BytesIO(data)

        assert is_binary(stream, len(data))
        assert stream.read() == data

    def test_read_error_propagates(self, failing_stream):
        with pytest.raises(OSError):
            is_binary(failing_stream, 4)
