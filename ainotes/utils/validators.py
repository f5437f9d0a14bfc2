"""
Input validation utilities.

One function per rule, called from every entry point that touches the
field. Each returns (is_valid, error_message) so callers decide how to
surface the failure.
"""

from typing import Optional, Tuple

from ainotes.models.item import ItemVariant, ProcessKind

MAX_FOLDER_NAME_LENGTH = 255


def validate_folder_name(name: Optional[str]) -> Tuple[bool, str]:
    """
    Validate a folder name after trimming.

    Args:
        name: Raw name from the request

    Returns:
        Tuple of (is_valid, error_message)
    """
    if name is None or not name.strip():
        return False, "Folder name is required"

    if len(name.strip()) > MAX_FOLDER_NAME_LENGTH:
        return False, f"Folder name too long (max {MAX_FOLDER_NAME_LENGTH} characters)"

    return True, ""


def validate_process_kind(process_kind: Optional[str]) -> Tuple[bool, str]:
    """
    Validate a process kind against the fixed enumeration.

    Args:
        process_kind: Raw value from the request

    Returns:
        Tuple of (is_valid, error_message)
    """
    valid = [kind.value for kind in ProcessKind]
    if not process_kind or process_kind not in valid:
        return False, f"Invalid process kind '{process_kind}'. Valid kinds: {', '.join(valid)}"

    return True, ""


def validate_note_variant(variant: Optional[str]) -> Tuple[bool, str]:
    """Only note and ai-note may be created through the note entry point."""
    if variant is None:
        return True, ""

    if variant not in (ItemVariant.NOTE.value, ItemVariant.AI_NOTE.value):
        return False, "Variant must be 'note' or 'ai-note'"

    return True, ""
