"""Validates the model's parsed JSON and builds a fully-defaulted StructuredRecord."""

from collections.abc import Iterable
from datetime import date
from typing import Any

from medrecord_ai.classification.models import DocumentType
from medrecord_ai.extraction.exceptions import MalformedExtractionError
from medrecord_ai.extraction.models import Medication, StructuredRecord
from medrecord_ai.logging.logger import Log

_TEXT_FIELDS = ("patientName", "date", "doctorName", "diagnosis", "notes")
_MEDICATION_FIELDS = {
    "medicineName": "medicine_name",
    "dosage": "dosage",
    "duration": "duration",
    "tablets": "tablets",
}


def validate_and_build(data: dict[str, Any]) -> StructuredRecord:
    """Build a StructuredRecord from the model's JSON object.

    Missing or null fields fall back to their defaults. ``record_type`` is
    lower-cased but not checked against DocumentType; resolving unknown
    labels is left to the caller.

    Raises:
        MalformedExtractionError: if a field holds an object or array where
            text is expected.
    """
    if not isinstance(data, dict):
        raise MalformedExtractionError("JSON response must be an object")
    text = {name: _coerce_text(data.get(name), name) for name in _TEXT_FIELDS}
    _warn_on_non_iso_date(text["date"])
    record_type = _coerce_text(data.get("recordType"), "recordType").lower()
    record_type = record_type or DocumentType.PRESCRIPTION.value
    return StructuredRecord(
        patient_name=text["patientName"],
        date=text["date"],
        doctor_name=text["doctorName"],
        diagnosis=text["diagnosis"],
        prescription=normalize_prescription(data.get("prescription")),
        notes=text["notes"],
        record_type=record_type,
        document_type=record_type,
    )


def normalize_prescription(raw: Any) -> tuple[Medication, ...]:
    """Keep the four canonical medication fields and drop all-empty entries.

    Accepts the model's list of objects or an already-normalized sequence
    of Medication; anything that is not a list/tuple yields an empty result.
    """
    if not isinstance(raw, (list, tuple)):
        if raw is not None:
            Log.warning(f"Prescription is {type(raw).__name__}, not a list; using []")
        return ()
    medications = (_build_medication(item, i) for i, item in enumerate(raw))
    return tuple(_non_empty(medications))


def _non_empty(medications: Iterable[Medication | None]) -> Iterable[Medication]:
    for medication in medications:
        if medication is not None and not medication.is_empty:
            yield medication


def _build_medication(raw: Any, index: int) -> Medication | None:
    if isinstance(raw, Medication):
        return raw
    if not isinstance(raw, dict):
        Log.debug(f"Dropping prescription item {index}: not an object")
        return None
    values = {
        attr: _coerce_text(raw.get(key), f"prescription[{index}].{key}")
        for key, attr in _MEDICATION_FIELDS.items()
    }
    return Medication(**values)


def _coerce_text(value: Any, field_name: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return str(value)
    raise MalformedExtractionError(
        f"'{field_name}' must be a string, got {type(value).__name__}"
    )


def _warn_on_non_iso_date(value: str) -> None:
    if not value:
        return
    try:
        date.fromisoformat(value)
    except ValueError:
        Log.warning(f"Extracted date '{value}' is not ISO YYYY-MM-DD; kept verbatim")
