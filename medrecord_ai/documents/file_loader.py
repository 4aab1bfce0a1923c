from medrecord_ai.documents.exceptions import FileReadError
from medrecord_ai.documents.models import UploadedFile


class FileLoader:
    """Returns the raw bytes of an uploaded file, reading from disk when needed."""

    def load(self, file: UploadedFile) -> bytes:
        """Read document bytes.

        Raises:
            FileReadError: if the file does not exist or cannot be read.
        """
        if file.content is not None:
            return file.content
        path = file.path
        if path is None or not path.exists():
            raise FileReadError(f"File not found: {path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise FileReadError(f"Failed to read {path}: {exc}") from exc
