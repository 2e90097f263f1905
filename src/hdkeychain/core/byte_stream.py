"""
Bounded readers for deserializing untrusted payloads
"""
from io import BytesIO
from typing import Optional

from .exceptions import ReadError

__all__ = ["get_stream", "read_stream", "read_big_int", "assert_exhausted"]


def get_stream(data: bytes | bytearray | BytesIO) -> BytesIO:
    """Wrap raw bytes in a BytesIO; an existing stream is returned as is"""
    if isinstance(data, BytesIO):
        return data
    if isinstance(data, (bytes, bytearray)):
        return BytesIO(bytes(data))
    raise TypeError(f"Expected bytes or BytesIO but received: {type(data)}")


def read_stream(stream: BytesIO, length: int, data_type: Optional[str] = None) -> bytes:
    """
    Read exactly length bytes. Raises ReadError if the stream ends first.
    """
    chunk = stream.read(length)
    if len(chunk) < length:
        field = f" for {data_type}" if data_type else ""
        raise ReadError(f"Expected {length} bytes{field}, stream held {len(chunk)}")
    return chunk


def read_big_int(stream: BytesIO, length: int, data_type: Optional[str] = None) -> int:
    return int.from_bytes(read_stream(stream, length, data_type), "big")


def assert_exhausted(stream: BytesIO, data_type: Optional[str] = None):
    """Raise ReadError if any bytes remain unread"""
    if stream.read(1):
        raise ReadError(f"Trailing data after {data_type}" if data_type else "Trailing data in stream")
