from dataclasses import dataclass
from pathlib import Path

PDF_MIME_TYPE = "application/pdf"
IMAGE_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/gif"})
SUPPORTED_MIME_TYPES = frozenset({PDF_MIME_TYPE, *IMAGE_MIME_TYPES})


@dataclass(frozen=True)
class UploadedFile:
    """A document handed over by the upload collaborator.

    Either ``path`` (file already stored on disk) or ``content`` (bytes kept
    in memory) must be set. ``content`` wins when both are present.
    """

    mime_type: str
    original_name: str
    path: Path | None = None
    content: bytes | None = None

    def __post_init__(self) -> None:
        if self.path is None and self.content is None:
            raise ValueError("UploadedFile requires either 'path' or 'content'")

    @property
    def is_pdf(self) -> bool:
        return self.mime_type.lower() == PDF_MIME_TYPE

    @property
    def is_image(self) -> bool:
        return self.mime_type.lower().startswith("image/")

    @property
    def storage_reference(self) -> str:
        """Reference recorded into StructuredRecord.file_path."""
        return str(self.path) if self.path is not None else self.original_name
