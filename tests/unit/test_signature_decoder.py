# Assumptions:
# - Using pytest for testing framework
# - Testing format detection and header dimension parsing on synthetic images

import io
import struct

import pytest

from httpbuilder.imaging.signature_decoder import SignatureImageDecoder, sniff_format


def png_bytes(width: int, height: int) -> bytes:
    return b"\x89PNG\r\n\x1a\n" + struct.pack(">I", 13) + b"IHDR" + struct.pack(">II", width, height) + b"\x08\x06\x00\x00\x00"


def gif_bytes(width: int, height: int) -> bytes:
    return b"GIF89a" + struct.pack("<HH", width, height) + b"\x00\x00\x00;"


def bmp_bytes(width: int, height: int) -> bytes:
    header = b"BM" + b"\x00" * 12 + struct.pack("<I", 40) + struct.pack("<ii", width, height)
    return header + b"\x00" * 28


def jpeg_bytes(width: int, height: int) -> bytes:
    app0 = b"\xff\xe0" + struct.pack(">H", 16) + b"JFIF\x00" + b"\x01\x01\x00\x00\x01\x00\x01\x00\x00"
    sof0 = b"\xff\xc0" + struct.pack(">H", 17) + b"\x08" + struct.pack(">HH", height, width) + b"\x03" + b"\x00" * 9
    return b"\xff\xd8" + app0 + sof0 + b"\xff\xd9"


def webp_vp8x_bytes(width: int, height: int) -> bytes:
    payload = b"\x00\x00\x00\x00" + (width - 1).to_bytes(3, "little") + (height - 1).to_bytes(3, "little")
    return b"RIFF" + struct.pack("<I", 4 + 8 + len(payload)) + b"WEBP" + b"VP8X" + struct.pack("<I", len(payload)) + payload


class TestSignatureImageDecoder:
    """Test cases for the signature-based image decoder"""

    @pytest.fixture
    def decoder(self):
        return SignatureImageDecoder()

    @pytest.mark.parametrize(
        "data, image_format, mime_type, size",
        [
            (png_bytes(640, 480), "PNG", "image/png", (640, 480)),
            (gif_bytes(16, 32), "GIF", "image/gif", (16, 32)),
            (bmp_bytes(100, -50), "BMP", "image/bmp", (100, 50)),
            (jpeg_bytes(1024, 768), "JPEG", "image/jpeg", (1024, 768)),
            (webp_vp8x_bytes(300, 200), "WEBP", "image/webp", (300, 200)),
        ],
    )
    def test_decodes_supported_formats(self, decoder, data, image_format, mime_type, size):
        image = decoder.decode(io.BytesIO(data))

        assert image.format == image_format
        assert image.mime_type == mime_type
        assert (image.width, image.height) == size
        assert image.data == data
        assert image.size == len(data)

    def test_non_image_returns_none(self, decoder):
        """Test text content is not an image"""
        assert decoder.decode(io.BytesIO(b"<html><body>not an image</body></html>")) is None

    def test_empty_stream_returns_none(self, decoder):
        assert decoder.decode(io.BytesIO(b"")) is None

    def test_truncated_header_keeps_format_without_size(self, decoder):
        """Test a recognised signature with a short header"""
        image = decoder.decode(io.BytesIO(b"\x89PNG\r\n\x1a\n\x00\x00"))

        assert image.format == "PNG"
        assert image.width is None
        assert image.height is None

    def test_oversized_payload_rejected(self):
        decoder = SignatureImageDecoder(max_bytes=16)

        assert decoder.decode(io.BytesIO(png_bytes(1, 1) + b"\x00" * 64)) is None

    def test_sniff_format_unknown(self):
        assert sniff_format(b"RIFF\x00\x00\x00\x00WAVE") is None
