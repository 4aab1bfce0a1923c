from pathlib import Path

from medrecord_ai.extraction.exceptions import StructuredExtractionError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(path: Path | None = None) -> str:
    """Read the field-extraction prompt, by default the one shipped with the package.

    The template is a ``str.format`` string. ``{document_text}`` receives the
    extracted document text and ``{record_types}`` the quoted DocumentType
    labels. Literal braces in the JSON example are doubled.

    Raises:
        StructuredExtractionError: if the template file is missing or unreadable.
    """
    template_path = path or _DEFAULT_PROMPT_DIR / "extraction_prompt.txt"
    try:
        return template_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise StructuredExtractionError(
            f"Failed to load prompt template {template_path.name}: {exc}"
        ) from exc
