# Assumptions:
# - Image decoding is a pluggable capability: bytes in, image or None out
# - Non-image content is reported as None, not as an error

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO


@dataclass(frozen=True)
class DecodedImage:
    """Image payload with the metadata read from its header"""

    format: str
    mime_type: str
    data: bytes
    width: int | None = None
    height: int | None = None

    @property
    def size(self) -> int:
        return len(self.data)


class ImageDecoder(ABC):
    """Abstract image codec port"""

    @abstractmethod
    def decode(self, stream: BinaryIO) -> DecodedImage | None:
        """
        Decode an image from a binary stream

        Args:
            stream: Readable binary stream positioned at the image start

        Returns:
            Decoded image, or None if the content is not a supported image
        """
        pass
