# Assumptions:
# - Formats are recognised by their magic signature, not by Content-Type
# - Dimensions are read from the header only, pixels are left encoded
# - Oversized payloads are rejected rather than truncated

import struct
from typing import BinaryIO

import structlog

from .port import DecodedImage, ImageDecoder

logger = structlog.get_logger(__name__)

DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
READ_CHUNK_SIZE = 64 * 1024

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"
GIF_SIGNATURES = (b"GIF87a", b"GIF89a")
BMP_SIGNATURE = b"BM"

# JPEG start-of-frame markers carrying the frame dimensions
JPEG_SOF_MARKERS = frozenset({0xC0, 0xC1, 0xC2, 0xC3, 0xC5, 0xC6, 0xC7, 0xC9, 0xCA, 0xCB, 0xCD, 0xCE, 0xCF})


def _png_size(data: bytes) -> tuple[int, int] | None:
    if len(data) < 24 or data[12:16] != b"IHDR":
        return None
    return struct.unpack(">II", data[16:24])


def _gif_size(data: bytes) -> tuple[int, int] | None:
    if len(data) < 10:
        return None
    return struct.unpack("<HH", data[6:10])


def _bmp_size(data: bytes) -> tuple[int, int] | None:
    if len(data) < 26:
        return None
    width, height = struct.unpack("<ii", data[18:26])
    # Negative height means a top-down bitmap
    return width, abs(height)


def _jpeg_size(data: bytes) -> tuple[int, int] | None:
    offset = 2
    while offset + 4 <= len(data):
        if data[offset] != 0xFF:
            return None
        marker = data[offset + 1]
        if marker == 0xFF:
            # Fill byte
            offset += 1
            continue
        if marker in (0xD8, 0x01) or 0xD0 <= marker <= 0xD7:
            offset += 2
            continue
        (length,) = struct.unpack(">H", data[offset + 2 : offset + 4])
        if marker in JPEG_SOF_MARKERS:
            if offset + 9 > len(data):
                return None
            height, width = struct.unpack(">HH", data[offset + 5 : offset + 9])
            return width, height
        offset += 2 + length
    return None


def _webp_size(data: bytes) -> tuple[int, int] | None:
    if len(data) < 30:
        return None
    chunk = data[12:16]
    if chunk == b"VP8X":
        width = int.from_bytes(data[24:27], "little") + 1
        height = int.from_bytes(data[27:30], "little") + 1
        return width, height
    if chunk == b"VP8 ":
        width, height = struct.unpack("<HH", data[26:30])
        return width & 0x3FFF, height & 0x3FFF
    if chunk == b"VP8L":
        bits = int.from_bytes(data[21:25], "little")
        return (bits & 0x3FFF) + 1, ((bits >> 14) & 0x3FFF) + 1
    return None


def sniff_format(head: bytes) -> tuple[str, str] | None:
    """Return (format, mime type) for a recognised image signature"""
    if head.startswith(PNG_SIGNATURE):
        return "PNG", "image/png"
    if head.startswith(JPEG_SIGNATURE):
        return "JPEG", "image/jpeg"
    if head.startswith(GIF_SIGNATURES):
        return "GIF", "image/gif"
    if len(head) >= 12 and head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return "WEBP", "image/webp"
    if head.startswith(BMP_SIGNATURE) and len(head) >= 26:
        return "BMP", "image/bmp"
    return None


_SIZE_READERS = {
    "PNG": _png_size,
    "JPEG": _jpeg_size,
    "GIF": _gif_size,
    "WEBP": _webp_size,
    "BMP": _bmp_size,
}


class SignatureImageDecoder(ImageDecoder):
    """Image decoder recognising PNG, JPEG, GIF, WebP and BMP payloads"""

    def __init__(self, max_bytes: int = DEFAULT_MAX_BYTES):
        self.max_bytes = max_bytes

    def decode(self, stream: BinaryIO) -> DecodedImage | None:
        data = bytearray()
        while True:
            chunk = stream.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            data.extend(chunk)
            if len(data) > self.max_bytes:
                logger.warning("Image too large, not decoding", max_bytes=self.max_bytes)
                return None

        payload = bytes(data)
        detected = sniff_format(payload[:32])
        if detected is None:
            logger.debug("Content is not a recognised image", size=len(payload))
            return None

        image_format, mime_type = detected
        try:
            size = _SIZE_READERS[image_format](payload)
        except struct.error:
            size = None
        width, height = size if size else (None, None)

        return DecodedImage(
            format=image_format,
            mime_type=mime_type,
            data=payload,
            width=width,
            height=height,
        )
