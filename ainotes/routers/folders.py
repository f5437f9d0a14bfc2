"""
Folders router.
Create, rename, move and delete folders, and move any item between folders.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response

from ainotes.dependencies import get_hierarchy_service, to_http_exception
from ainotes.exceptions import CircularReferenceError, NoteTreeError
from ainotes.models.item import FolderCreate, FolderUpdate, Item, MoveRequest
from ainotes.services.hierarchy import UNSET, HierarchyService

logger = logging.getLogger(__name__)
router = APIRouter()

# Rejected moves are bad requests on the generic move route
MOVE_STATUS_OVERRIDES = {CircularReferenceError: 400}


@router.post("", response_model=Item, status_code=201)
async def create_folder(data: FolderCreate, service: HierarchyService = Depends(get_hierarchy_service)) -> Item:
    """Create a folder at the root or inside another folder."""
    try:
        return await service.create_folder(data.name, parent_id=data.parent_id)
    except NoteTreeError as e:
        raise to_http_exception(e) from e


@router.get("/{folder_id}/contents", response_model=List[Item])
async def get_folder_contents(
    folder_id: str,
    service: HierarchyService = Depends(get_hierarchy_service),
) -> List[Item]:
    """Direct children of a folder, folders first."""
    try:
        return await service.list_folder_contents(folder_id)
    except NoteTreeError as e:
        raise to_http_exception(e) from e


@router.patch("/{folder_id}", response_model=Item)
async def update_folder(
    folder_id: str,
    data: FolderUpdate,
    service: HierarchyService = Depends(get_hierarchy_service),
) -> Item:
    """Rename and/or move a folder.

    Only fields present in the body are applied; ``"parent_id": null``
    moves the folder to the root.
    """
    supplied = data.model_fields_set
    try:
        return await service.update_folder(
            folder_id,
            name=data.name if "name" in supplied else UNSET,
            parent_id=data.parent_id if "parent_id" in supplied else UNSET,
        )
    except NoteTreeError as e:
        raise to_http_exception(e) from e


@router.delete("/{folder_id}", status_code=204, response_class=Response)
async def delete_folder(folder_id: str, service: HierarchyService = Depends(get_hierarchy_service)) -> Response:
    """Delete a folder and all of its contents."""
    try:
        await service.delete_folder(folder_id)
    except NoteTreeError as e:
        raise to_http_exception(e) from e
    return Response(status_code=204)


@router.post("/{item_id}/move", response_model=Item)
async def move_item(
    item_id: str,
    data: MoveRequest,
    service: HierarchyService = Depends(get_hierarchy_service),
) -> Item:
    """Move any item (folder, note or ai-note) into a folder or to the root."""
    try:
        return await service.move_item(item_id, data.parent_id)
    except NoteTreeError as e:
        raise to_http_exception(e, MOVE_STATUS_OVERRIDES) from e
