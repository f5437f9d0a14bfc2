"""
Item model definitions.

One entity covers the three node kinds of the hierarchy:
- folder: named container, never carries content or status
- note: user-authored rich-text document (opaque JSON)
- ai-note: generated child of a processed note
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class ItemVariant(str, Enum):
    """Discriminant of an item. Immutable after creation."""
    FOLDER = "folder"
    NOTE = "note"
    AI_NOTE = "ai-note"


class ItemStatus(str, Enum):
    """Processing state of a note or ai-note."""
    DRAFT = "draft"
    PROCESSING = "processing"
    COMPLETE = "complete"
    FAILED = "failed"


class ProcessKind(str, Enum):
    """AI operations that can be applied to a note."""
    RESEARCH = "research"
    SUMMARIZE = "summarize"
    EXPAND = "expand"
    ACTIONPLAN = "actionplan"


class Item(BaseModel):
    """Full item as stored and returned over the wire."""
    id: str
    parent_id: Optional[str] = None
    variant: ItemVariant
    name: Optional[str] = None
    content: Optional[Dict[str, Any]] = None
    process_kind: Optional[ProcessKind] = None
    status: Optional[ItemStatus] = None
    error_detail: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @property
    def is_folder(self) -> bool:
        return self.variant == ItemVariant.FOLDER


class NoteCreate(BaseModel):
    """Schema for creating a note.

    Fields are optional at the schema level so that missing content is
    reported by the service as a 400 rather than a 422.
    """
    content: Optional[Dict[str, Any]] = None
    parent_id: Optional[str] = None
    variant: Optional[str] = None
    process_kind: Optional[str] = None


class NoteUpdate(BaseModel):
    """Schema for replacing a note's content."""
    content: Optional[Dict[str, Any]] = None


class FolderCreate(BaseModel):
    """Schema for creating a folder."""
    name: Optional[str] = None
    parent_id: Optional[str] = None


class FolderUpdate(BaseModel):
    """Schema for renaming and/or moving a folder.

    An explicit ``parent_id: null`` moves the folder to the root, which is
    distinct from leaving ``parent_id`` out.
    """
    name: Optional[str] = None
    parent_id: Optional[str] = None


class MoveRequest(BaseModel):
    """Schema for moving any item. ``null`` means root level."""
    parent_id: Optional[str] = None


class ProcessRequest(BaseModel):
    """Schema for triggering AI processing."""
    process_kind: Optional[str] = None


class ProcessResult(BaseModel):
    """Outcome of a successful processing run."""
    child_id: str
    process_kind: ProcessKind


class ItemStatusResponse(BaseModel):
    """Status snapshot used for polling."""
    id: str
    status: Optional[ItemStatus] = None
    process_kind: Optional[ProcessKind] = None
    error_detail: Optional[str] = None
    updated_at: datetime


class ProcessInfo(BaseModel):
    """Describes one available process kind."""
    process_kind: ProcessKind
    name: str
    description: str


class TreeNode(BaseModel):
    """An item with its fully materialized descendant subtree."""
    item: Item
    children: List["TreeNode"] = []


TreeNode.model_rebuild()
