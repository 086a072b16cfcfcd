"""Services package."""

from gator.services.ingest_service import IngestResult, IngestService

__all__ = [
    "IngestResult",
    "IngestService",
]
