from medrecord_ai.extraction.extractor import StructuredExtractor
from medrecord_ai.extraction.models import Medication, StructuredRecord
from medrecord_ai.extraction.validator import normalize_prescription, validate_and_build

__all__ = [
    "Medication",
    "StructuredExtractor",
    "StructuredRecord",
    "normalize_prescription",
    "validate_and_build",
]
