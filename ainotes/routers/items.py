"""
Items router.
Reads over the whole hierarchy plus note create / update / delete.

Clients fetch the flat list (or the pre-built forest) after every
mutation and re-derive the tree from it.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response

from ainotes.dependencies import get_hierarchy_service, to_http_exception
from ainotes.exceptions import NoteTreeError
from ainotes.models.item import Item, NoteCreate, NoteUpdate, TreeNode
from ainotes.services.hierarchy import HierarchyService
from ainotes.services.tree import build_tree

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[Item])
async def list_items(service: HierarchyService = Depends(get_hierarchy_service)) -> List[Item]:
    """All items as a flat list, newest first."""
    try:
        return await service.list_items()
    except NoteTreeError as e:
        raise to_http_exception(e) from e


@router.get("/roots", response_model=List[Item])
async def list_root_items(service: HierarchyService = Depends(get_hierarchy_service)) -> List[Item]:
    """Items with no parent."""
    try:
        return await service.list_roots()
    except NoteTreeError as e:
        raise to_http_exception(e) from e


@router.get("/forest", response_model=List[TreeNode])
async def get_forest(service: HierarchyService = Depends(get_hierarchy_service)) -> List[TreeNode]:
    """The whole hierarchy as nested nodes, derived from the flat list."""
    try:
        return build_tree(await service.list_items())
    except NoteTreeError as e:
        raise to_http_exception(e) from e


@router.get("/{item_id}", response_model=Item)
async def get_item(item_id: str, service: HierarchyService = Depends(get_hierarchy_service)) -> Item:
    """Get a single item by id."""
    try:
        return await service.get_item(item_id)
    except NoteTreeError as e:
        raise to_http_exception(e) from e


@router.get("/{item_id}/children", response_model=List[Item])
async def list_children(item_id: str, service: HierarchyService = Depends(get_hierarchy_service)) -> List[Item]:
    """Direct children of an item."""
    try:
        return await service.list_children(item_id)
    except NoteTreeError as e:
        raise to_http_exception(e) from e


@router.get("/{item_id}/tree", response_model=List[Item])
async def get_subtree(item_id: str, service: HierarchyService = Depends(get_hierarchy_service)) -> List[Item]:
    """The item and all of its descendants, ordered by depth."""
    try:
        return await service.get_subtree(item_id)
    except NoteTreeError as e:
        raise to_http_exception(e) from e


@router.post("", response_model=Item, status_code=201)
async def create_note(data: NoteCreate, service: HierarchyService = Depends(get_hierarchy_service)) -> Item:
    """Create a note in draft status."""
    try:
        return await service.create_note(
            data.content,
            parent_id=data.parent_id,
            variant=data.variant,
            process_kind=data.process_kind,
        )
    except NoteTreeError as e:
        raise to_http_exception(e) from e


@router.patch("/{item_id}", response_model=Item)
async def update_note(
    item_id: str,
    data: NoteUpdate,
    service: HierarchyService = Depends(get_hierarchy_service),
) -> Item:
    """Replace a note's content."""
    try:
        return await service.update_note_content(item_id, data.content)
    except NoteTreeError as e:
        raise to_http_exception(e) from e


@router.delete("/{item_id}", status_code=204, response_class=Response)
async def delete_item(item_id: str, service: HierarchyService = Depends(get_hierarchy_service)) -> Response:
    """Delete an item and everything beneath it."""
    try:
        await service.delete_item(item_id)
    except NoteTreeError as e:
        raise to_http_exception(e) from e
    return Response(status_code=204)
