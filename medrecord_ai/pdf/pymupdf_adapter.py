import pymupdf

from medrecord_ai.pdf.base import BasePdfExtractor
from medrecord_ai.pdf.exceptions import PdfExtractionError


class PyMuPdfAdapter(BasePdfExtractor):
    """Faster than pdfplumber on long reports; reading order may differ on multi-column pages."""

    engine = "pymupdf"

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.needs_pass:
                    raise PdfExtractionError("PDF is password protected")
                pages = [page.get_text("text", sort=True) for page in doc]
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise PdfExtractionError(f"Cannot read PDF text layer ({self.engine}): {exc}") from exc
        return self.join_pages(pages)
