import argparse
import asyncio
import json
import mimetypes
import sys
from pathlib import Path

from medrecord_ai.config.settings import Settings
from medrecord_ai.documents.models import SUPPORTED_MIME_TYPES, UploadedFile
from medrecord_ai.errors import PipelineError
from medrecord_ai.logging.logger import Log
from medrecord_ai.processor.processor import DocumentProcessor, build_processor


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="medrecord-ai",
        description="Extract structured medical records from PDFs and scanned images.",
    )
    parser.add_argument("files", nargs="+", type=Path, help="PDF or image files to process")
    parser.add_argument("--mime", help="MIME type for every file (guessed from extension otherwise)")
    parser.add_argument("--query", help="Search the processed documents after indexing them")
    parser.add_argument("--limit", type=int, default=None, help="Maximum search results")
    return parser.parse_args(argv)


def to_uploaded_file(path: Path, mime_type: str | None) -> UploadedFile:
    resolved = mime_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    if resolved not in SUPPORTED_MIME_TYPES:
        Log.warning(f"{path.name} has MIME type {resolved}, which may be rejected")
    return UploadedFile(mime_type=resolved, original_name=path.name, path=path)


async def run(processor: DocumentProcessor, args: argparse.Namespace) -> int:
    """Process every file, index the successes, then run the optional query."""
    await processor.initialize()
    exit_code = 0
    for path in args.files:
        try:
            record = await processor.process_document(to_uploaded_file(path, args.mime))
        except PipelineError as exc:
            Log.error(f"Could not process {path}: {exc}; enter this record manually")
            exit_code = 1
            continue
        print(json.dumps(record.to_dict(), indent=2))
        await processor.index_document(record.original_text, record)

    if args.query:
        matches = await processor.search_similar_documents(args.query, args.limit)
        print(json.dumps([match.to_dict() for match in matches], indent=2))
    return exit_code


def main(argv: list[str] | None = None) -> int:
    """Entry point: settings -> logging -> processor -> run."""
    args = parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    try:
        processor = build_processor(settings)
        return asyncio.run(run(processor, args))
    except (PipelineError, ValueError) as exc:
        Log.error(str(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())
