"""
FastAPI dependencies wiring services to the shared store and settings.
"""

from typing import Dict, Optional

from fastapi import HTTPException

from ainotes.config import get_settings
from ainotes.database import get_item_store
from ainotes.exceptions import (
    CircularReferenceError,
    ConflictError,
    GenerationFailure,
    InvalidVariantError,
    NoteTreeError,
    NotFoundError,
    PersistenceFailure,
    ValidationError,
)
from ainotes.llm.factory import create_provider_from_settings
from ainotes.services.hierarchy import HierarchyService
from ainotes.services.processor import ProcessingService

# Checked in order, so subclasses inherit their base's status
_STATUS_CODES = [
    (NotFoundError, 404),
    (InvalidVariantError, 400),
    (CircularReferenceError, 409),
    (ValidationError, 400),
    (ConflictError, 409),
    (GenerationFailure, 500),
    (PersistenceFailure, 500),
]


def to_http_exception(exc: NoteTreeError, overrides: Optional[Dict[type, int]] = None) -> HTTPException:
    """Map a domain error to an HTTPException with a machine-readable code.

    ``overrides`` replaces the status of specific error classes for one route.
    """
    status_code = 500
    for error_class, code in list((overrides or {}).items()) + _STATUS_CODES:
        if isinstance(exc, error_class):
            status_code = code
            break
    return HTTPException(
        status_code=status_code,
        detail={"error": exc.code, "message": str(exc)},
    )


def get_hierarchy_service() -> HierarchyService:
    """Hierarchy service bound to the shared store."""
    settings = get_settings()
    return HierarchyService(
        get_item_store(),
        max_folder_depth=settings.max_folder_depth,
        max_tree_depth=settings.max_tree_depth,
    )


def get_processing_service() -> ProcessingService:
    """Processing service bound to the shared store and configured provider."""
    settings = get_settings()
    return ProcessingService(
        get_item_store(),
        create_provider_from_settings(settings),
        model=settings.llm_model,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        timeout_seconds=settings.llm_timeout_seconds,
    )
