"""
Pydantic models package.
"""

from ainotes.models.item import (
    FolderCreate,
    FolderUpdate,
    Item,
    ItemStatus,
    ItemStatusResponse,
    ItemVariant,
    MoveRequest,
    NoteCreate,
    NoteUpdate,
    ProcessInfo,
    ProcessKind,
    ProcessRequest,
    ProcessResult,
    TreeNode,
)

__all__ = [
    "Item", "ItemVariant", "ItemStatus", "ProcessKind",
    "NoteCreate", "NoteUpdate", "FolderCreate", "FolderUpdate", "MoveRequest",
    "ProcessRequest", "ProcessResult", "ItemStatusResponse", "ProcessInfo",
    "TreeNode",
]
