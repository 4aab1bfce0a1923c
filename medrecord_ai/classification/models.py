from enum import Enum


class DocumentType(str, Enum):
    """Coarse document categories a record can be filed under."""

    PRESCRIPTION = "prescription"
    LAB_RESULT = "lab_result"
    XRAY = "xray"
    MRI = "mri"
    OTHER = "other"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]

    @classmethod
    def is_valid(cls, label: str) -> bool:
        return label in cls.values()
