from abc import ABC, abstractmethod


class BaseOcrEngine(ABC):
    """Contract for image-to-text OCR adapters."""

    @abstractmethod
    def recognize(self, image_bytes: bytes) -> str:
        """Run OCR over a single image.

        Raises:
            OcrError: if the image cannot be decoded or recognized.
        """
