import io

import pdfplumber

from medrecord_ai.pdf.base import BasePdfExtractor
from medrecord_ai.pdf.exceptions import PdfExtractionError


class PdfPlumberAdapter(BasePdfExtractor):
    engine = "pdfplumber"

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise PdfExtractionError(f"Cannot read PDF text layer ({self.engine}): {exc}") from exc
        return self.join_pages(pages)
