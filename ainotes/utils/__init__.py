"""
Utility modules package.
"""

from ainotes.utils.validators import (
    validate_folder_name,
    validate_note_variant,
    validate_process_kind,
)

__all__ = [
    "validate_folder_name",
    "validate_note_variant",
    "validate_process_kind",
]
