"""
Failure taxonomy for hierarchy and processing operations.

Every error carries a stable ``code`` so callers can tell "not found"
from "bad state" from "try again" without parsing messages.
"""


class NoteTreeError(Exception):
    """Base class for all domain errors."""

    code = "error"


class NotFoundError(NoteTreeError):
    """An item id or parent id did not resolve."""

    code = "not_found"


class InvalidVariantError(NoteTreeError):
    """Operation target or parent has the wrong variant."""

    code = "invalid_variant"


class CircularReferenceError(NoteTreeError):
    """A reparent would create a cycle, or the ancestor walk hit its bound."""

    code = "circular_reference"


class ValidationError(NoteTreeError):
    """Bad input shape, length, or enum value."""

    code = "validation_error"


class InvalidStatusError(ValidationError):
    """The item is not in the status the operation requires."""

    code = "invalid_status"


class ConflictError(NoteTreeError):
    """A processing run is already in flight for the note."""

    code = "conflict"


class GenerationFailure(NoteTreeError):
    """Text extraction, the collaborator call, or conversion failed."""

    code = "generation_failed"


class EmptyContentError(GenerationFailure):
    """The note has no text to process."""

    code = "empty_content"


class PersistenceFailure(NoteTreeError):
    """The store is unreachable or rejected a write."""

    code = "persistence_failure"
