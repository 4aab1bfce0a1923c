from abc import ABC, abstractmethod

from medrecord_ai.logging.logger import Log


class BasePdfExtractor(ABC):
    """Reads the embedded text layer of a PDF; scanned pages have none."""

    engine: str = ""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Return the text of every page, in document order, one page per line block.

        Pages without a text layer are skipped, so a fully scanned PDF yields "".

        Raises:
            PdfExtractionError: if the file cannot be opened or parsed.
        """

    def join_pages(self, pages: list[str]) -> str:
        texts = [page.strip() for page in pages if page and page.strip()]
        Log.debug(
            f"{len(texts)} of {len(pages)} pages have a text layer",
            engine=self.engine,
        )
        return "\n".join(texts)
