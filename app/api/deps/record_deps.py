"""
Service dependencies for FastAPI routes.
The record service is built once at startup and kept on ``app.state``.
"""

from fastapi import Depends, Request

from app.api.services.ledger_service import LedgerService
from app.api.services.record_service import RecordService
from app.core.exceptions import StorageUnavailableError


def get_record_service(request: Request) -> RecordService:
    """Return the process-wide record service."""
    service = getattr(request.app.state, "record_service", None)
    if service is None:
        raise StorageUnavailableError("record service not initialized")
    return service


def get_ledger_service(
    records: RecordService = Depends(get_record_service),
) -> LedgerService:
    return LedgerService(records)
