"""
Seed a welcome note on startup.

Only runs against an empty store, so user data is never touched.
Called once during app startup in main.py lifespan.
"""

import logging

from ainotes.item_store import SQLiteItemStore
from ainotes.models.item import ItemStatus, ItemVariant

logger = logging.getLogger(__name__)


def _text(text: str) -> list:
    return [{"type": "text", "text": text}]


def _bullet(text: str) -> dict:
    return {"type": "listItem", "content": [{"type": "paragraph", "content": _text(text)}]}


WELCOME_NOTE = {
    "type": "doc",
    "content": [
        {"type": "heading", "attrs": {"level": 1}, "content": _text("Welcome to AI Notes!")},
        {"type": "paragraph", "content": _text("This is your first note. Try these steps:")},
        {
            "type": "bulletList",
            "content": [
                _bullet("Edit this note or create a new one"),
                _bullet("Organize notes into folders"),
                _bullet("Run an AI process (Research, Summarize, Expand, Action Plan)"),
                _bullet("Find the generated AI note nested under this one"),
            ],
        },
        {"type": "paragraph", "content": _text("Have fun exploring!")},
    ],
}


async def seed_welcome_note(store: SQLiteItemStore) -> bool:
    """
    Insert the welcome note if the store holds no items.

    Args:
        store: Connected item store.

    Returns:
        True if the note was created.
    """
    if await store.count_items() > 0:
        return False

    note = await store.insert_item(
        ItemVariant.NOTE,
        content=WELCOME_NOTE,
        status=ItemStatus.DRAFT,
    )
    logger.info(f"Seeded welcome note {note.id}")
    return True
