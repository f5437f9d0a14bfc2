"""
Processing router.
Triggers AI processing on notes, retries failed runs and reports status.

Requests block until the run reaches ``complete`` or ``failed``. Other
clients observe progress by polling the status endpoint.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from ainotes.dependencies import get_processing_service, to_http_exception
from ainotes.exceptions import NoteTreeError
from ainotes.models.item import Item, ItemStatusResponse, ProcessInfo, ProcessRequest, ProcessResult
from ainotes.services.processor import ProcessingService
from ainotes.services.prompts import PROCESS_CATALOG

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/processes", response_model=List[ProcessInfo])
async def list_processes() -> List[ProcessInfo]:
    """Available process kinds."""
    return PROCESS_CATALOG


@router.post("/items/{item_id}/process", response_model=ProcessResult)
async def process_item(
    item_id: str,
    data: ProcessRequest,
    service: ProcessingService = Depends(get_processing_service),
) -> ProcessResult:
    """Run a process kind on a note and attach the generated ai-note."""
    try:
        return await service.run(item_id, data.process_kind)
    except NoteTreeError as e:
        raise to_http_exception(e) from e


@router.post("/items/{item_id}/retry", response_model=ProcessResult)
async def retry_item(
    item_id: str,
    service: ProcessingService = Depends(get_processing_service),
) -> ProcessResult:
    """Retry the last process kind of a failed note."""
    try:
        return await service.retry(item_id)
    except NoteTreeError as e:
        raise to_http_exception(e) from e


@router.post("/items/{item_id}/reset", response_model=Item)
async def reset_item(
    item_id: str,
    service: ProcessingService = Depends(get_processing_service),
) -> Item:
    """Mark a stuck ``processing`` note as failed so it can be retried."""
    try:
        return await service.reset_processing(item_id)
    except NoteTreeError as e:
        raise to_http_exception(e) from e


@router.get("/items/{item_id}/status", response_model=ItemStatusResponse)
async def get_item_status(
    item_id: str,
    service: ProcessingService = Depends(get_processing_service),
) -> ItemStatusResponse:
    """Processing status of an item, for polling."""
    try:
        return await service.get_status(item_id)
    except NoteTreeError as e:
        raise to_http_exception(e) from e
