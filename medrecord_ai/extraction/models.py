from dataclasses import dataclass, field

from medrecord_ai.classification.models import DocumentType


@dataclass(frozen=True)
class Medication:
    """A single prescribed medicine, copied verbatim from the document."""

    medicine_name: str = ""
    dosage: str = ""
    duration: str = ""
    tablets: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.medicine_name or self.dosage or self.duration or self.tablets)

    def to_dict(self) -> dict[str, str]:
        return {
            "medicineName": self.medicine_name,
            "dosage": self.dosage,
            "duration": self.duration,
            "tablets": self.tablets,
        }


@dataclass(frozen=True)
class StructuredRecord:
    """Output of the extraction pipeline. Every field is always present."""

    patient_name: str = ""
    date: str = ""
    doctor_name: str = ""
    diagnosis: str = ""
    prescription: tuple[Medication, ...] = field(default_factory=tuple)
    notes: str = ""
    record_type: str = DocumentType.PRESCRIPTION.value
    document_type: str = DocumentType.PRESCRIPTION.value
    summary: str = ""
    original_text: str = ""
    file_path: str = ""

    @property
    def has_meaningful_data(self) -> bool:
        """True when a summary is worth a model call."""
        return bool(self.patient_name or self.diagnosis or self.prescription)

    def to_dict(self) -> dict[str, object]:
        """Shape stored by the record store."""
        return {
            "patientName": self.patient_name,
            "date": self.date,
            "doctorName": self.doctor_name,
            "diagnosis": self.diagnosis,
            "prescription": [med.to_dict() for med in self.prescription],
            "notes": self.notes,
            "recordType": self.record_type,
            "documentType": self.document_type,
            "summary": self.summary,
            "originalText": self.original_text,
            "filePath": self.file_path,
        }
