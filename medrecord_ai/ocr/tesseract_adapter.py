import io

import pytesseract
from PIL import Image, ImageSequence, UnidentifiedImageError

from medrecord_ai.ocr.base import BaseOcrEngine
from medrecord_ai.ocr.exceptions import OcrError


class TesseractAdapter(BaseOcrEngine):
    """OCR through the Tesseract binary via pytesseract."""

    def __init__(self, language: str = "eng", tesseract_cmd: str | None = None) -> None:
        self._language = language
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize(self, image_bytes: bytes) -> str:
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                # GIFs may carry several frames; only the first one is a page.
                frame = next(ImageSequence.Iterator(image)).convert("RGB")
                return pytesseract.image_to_string(frame, lang=self._language).strip()
        except UnidentifiedImageError as exc:
            raise OcrError(f"Unreadable image: {exc}") from exc
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as exc:
            raise OcrError(f"tesseract failed: {exc}") from exc
        except OSError as exc:
            raise OcrError(f"Corrupt image data: {exc}") from exc
        except Exception as exc:
            raise OcrError(f"Image could not be processed: {exc}") from exc
