"""
Hierarchy service.

Validates and executes create / rename / move / delete against the item
store while keeping the parent/child relation a forest:
- a parent, when set, exists (and is a folder for folder placement and moves)
- no item is its own ancestor
- deleting an item removes its whole subtree
"""

import logging
from typing import Any, Dict, List, Optional

from ainotes.exceptions import (
    CircularReferenceError,
    InvalidVariantError,
    NotFoundError,
    ValidationError,
)
from ainotes.item_store import SQLiteItemStore
from ainotes.models.item import Item, ItemStatus, ItemVariant, ProcessKind
from ainotes.utils.validators import (
    validate_folder_name,
    validate_note_variant,
    validate_process_kind,
)

logger = logging.getLogger(__name__)

# Sentinel for "field not supplied", distinct from an explicit None
UNSET: Any = object()


class HierarchyService:
    """Tree-preserving operations over the item store."""

    def __init__(self, store: SQLiteItemStore, max_folder_depth: int = 100, max_tree_depth: int = 1000):
        self.store = store
        self.max_folder_depth = max_folder_depth
        self.max_tree_depth = max_tree_depth

    # ============================================================
    # Lookups
    # ============================================================

    async def get_item(self, item_id: str) -> Item:
        """Resolve an item or raise NotFoundError."""
        item = await self.store.get_item(item_id)
        if item is None:
            raise NotFoundError(f"Item not found: {item_id}")
        return item

    async def get_folder(self, folder_id: str) -> Item:
        """Resolve an item that must be a folder."""
        item = await self.store.get_item(folder_id)
        if item is None:
            raise NotFoundError(f"Folder not found: {folder_id}")
        if not item.is_folder:
            raise InvalidVariantError(f"Item is not a folder: {folder_id}")
        return item

    async def list_items(self) -> List[Item]:
        return await self.store.list_items()

    async def list_roots(self) -> List[Item]:
        return await self.store.list_roots()

    async def list_children(self, item_id: str) -> List[Item]:
        """Direct children of any existing item."""
        await self.get_item(item_id)
        return await self.store.list_children(item_id)

    async def list_folder_contents(self, folder_id: str) -> List[Item]:
        """Direct children of a folder, folders first then oldest first."""
        await self.get_folder(folder_id)
        return await self.store.list_children(folder_id)

    async def get_subtree(self, item_id: str) -> List[Item]:
        """The item plus all of its descendants, ordered by depth."""
        await self.get_item(item_id)
        return await self.store.get_subtree(item_id, max_depth=self.max_tree_depth)

    # ============================================================
    # Creation
    # ============================================================

    async def create_folder(self, name: Optional[str], parent_id: Optional[str] = None) -> Item:
        """Create a folder at the root or inside another folder."""
        is_valid, error = validate_folder_name(name)
        if not is_valid:
            raise ValidationError(error)

        if parent_id:
            await self._require_folder_parent(parent_id)

        folder = await self.store.insert_item(
            ItemVariant.FOLDER,
            parent_id=parent_id or None,
            name=name.strip(),
        )
        logger.info(f"Created folder {folder.id} ({folder.name!r}) under {folder.parent_id or 'root'}")
        return folder

    async def create_note(
        self,
        content: Optional[Dict[str, Any]],
        parent_id: Optional[str] = None,
        variant: Optional[str] = None,
        process_kind: Optional[str] = None,
    ) -> Item:
        """Create a note (or a manually authored ai-note) in draft status.

        Any existing item may hold a note, so notes can nest under notes.
        """
        if not content:
            raise ValidationError("Content is required")

        is_valid, error = validate_note_variant(variant)
        if not is_valid:
            raise ValidationError(error)
        note_variant = ItemVariant(variant) if variant else ItemVariant.NOTE

        kind: Optional[ProcessKind] = None
        if process_kind is not None:
            is_valid, error = validate_process_kind(process_kind)
            if not is_valid:
                raise ValidationError(error)
            kind = ProcessKind(process_kind)

        if parent_id:
            parent = await self.store.get_item(parent_id)
            if parent is None:
                raise NotFoundError(f"Parent item not found: {parent_id}")

        note = await self.store.insert_item(
            note_variant,
            parent_id=parent_id or None,
            content=content,
            process_kind=kind,
            status=ItemStatus.DRAFT,
        )
        logger.info(f"Created {note.variant.value} {note.id} under {note.parent_id or 'root'}")
        return note

    # ============================================================
    # Mutation
    # ============================================================

    async def update_note_content(self, item_id: str, content: Optional[Dict[str, Any]]) -> Item:
        """Replace the document of a note or ai-note."""
        if not content:
            raise ValidationError("Content is required")

        item = await self.get_item(item_id)
        if item.is_folder:
            raise InvalidVariantError("Folders do not have content")

        updated = await self.store.update_item(item_id, content=content)
        if updated is None:
            raise NotFoundError(f"Item not found: {item_id}")
        logger.info(f"Updated content of {item_id}")
        return updated

    async def update_folder(self, folder_id: str, name: Any = UNSET, parent_id: Any = UNSET) -> Item:
        """Rename and/or move a folder.

        ``parent_id=None`` moves the folder to the root; leaving it UNSET
        keeps the current parent. At least one field must be supplied.
        """
        await self.get_folder(folder_id)

        if name is UNSET and parent_id is UNSET:
            raise ValidationError("No updates provided")

        fields: Dict[str, Any] = {}

        if name is not UNSET:
            is_valid, error = validate_folder_name(name)
            if not is_valid:
                raise ValidationError(error)
            fields["name"] = name.strip()

        if parent_id is not UNSET:
            if parent_id:
                await self._check_reparent(folder_id, parent_id, moving_folder=True)
            fields["parent_id"] = parent_id or None

        updated = await self.store.update_item(folder_id, **fields)
        if updated is None:
            raise NotFoundError(f"Folder not found: {folder_id}")
        logger.info(f"Updated folder {folder_id}: {sorted(fields)}")
        return updated

    async def move_item(self, item_id: str, new_parent_id: Optional[str]) -> Item:
        """Reparent any item under a folder, or to the root with None."""
        item = await self.get_item(item_id)

        if new_parent_id:
            await self._check_reparent(item_id, new_parent_id, moving_folder=item.is_folder)

        updated = await self.store.update_item(item_id, parent_id=new_parent_id or None)
        if updated is None:
            raise NotFoundError(f"Item not found: {item_id}")
        logger.info(f"Moved {item.variant.value} {item_id} to {new_parent_id or 'root'}")
        return updated

    # ============================================================
    # Deletion
    # ============================================================

    async def delete_item(self, item_id: str) -> int:
        """Delete an item and every descendant. Returns rows removed."""
        await self.get_item(item_id)
        removed = await self.store.delete_item(item_id)
        logger.info(f"Deleted {item_id} and {max(removed - 1, 0)} descendant(s)")
        return removed

    async def delete_folder(self, folder_id: str) -> int:
        """Like delete_item, but the target must be a folder."""
        await self.get_folder(folder_id)
        removed = await self.store.delete_item(folder_id)
        logger.info(f"Deleted folder {folder_id} and {max(removed - 1, 0)} descendant(s)")
        return removed

    # ============================================================
    # Invariant checks
    # ============================================================

    async def _require_folder_parent(self, parent_id: str) -> Item:
        parent = await self.store.get_item(parent_id)
        if parent is None:
            raise NotFoundError(f"Parent folder not found: {parent_id}")
        if not parent.is_folder:
            raise InvalidVariantError("Parent must be a folder")
        return parent

    async def _check_reparent(self, item_id: str, parent_id: str, moving_folder: bool) -> None:
        """Validate placing ``item_id`` under ``parent_id``."""
        if parent_id == item_id:
            raise CircularReferenceError("Item cannot be its own parent")

        await self._require_folder_parent(parent_id)

        # Notes are never ancestors of folders, so only folders can close a loop
        if moving_folder and await self.is_circular(item_id, parent_id):
            raise CircularReferenceError("Cannot create circular folder structure")

    async def is_circular(self, folder_id: str, target_parent_id: str) -> bool:
        """Walk up from the proposed parent looking for ``folder_id``.

        Exhausting ``max_folder_depth`` hops counts as circular.
        """
        current_id: Optional[str] = target_parent_id
        depth = 0

        while current_id and depth < self.max_folder_depth:
            if current_id == folder_id:
                return True
            current_id = await self.store.get_parent_id(current_id)
            depth += 1

        if current_id and depth >= self.max_folder_depth:
            logger.error(
                f"Circular reference check exceeded max depth "
                f"({self.max_folder_depth}) for folder {folder_id}"
            )
            return True

        return False
