"""Image decoding port and the signature-based decoder."""

from .port import DecodedImage, ImageDecoder
from .signature_decoder import SignatureImageDecoder

__all__ = [
    "DecodedImage",
    "ImageDecoder",
    "SignatureImageDecoder",
]
