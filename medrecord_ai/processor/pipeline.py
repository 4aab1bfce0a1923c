from abc import ABC, abstractmethod
from dataclasses import dataclass

from medrecord_ai.documents.models import UploadedFile
from medrecord_ai.extraction.models import StructuredRecord


@dataclass(slots=True)
class PipelineContext:
    file: UploadedFile
    extracted_text: str = ""
    record: StructuredRecord | None = None


class PipelineStep(ABC):
    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
