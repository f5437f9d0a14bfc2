"""Tests for the SQLite item store."""

import asyncio

import pytest

from ainotes.exceptions import PersistenceFailure
from ainotes.item_store import SQLiteItemStore
from ainotes.models.item import ItemStatus, ItemVariant, ProcessKind
from ainotes.seed_notes import seed_welcome_note

from conftest import paragraph_doc


class TestInsertAndRead:
    """Tests for inserting and fetching items."""

    def test_insert_folder_round_trips(self, with_store):
        """Test that a folder is stored without content or status."""
        async def scenario(store):
            folder = await store.insert_item(ItemVariant.FOLDER, name="Projects")
            fetched = await store.get_item(folder.id)
            assert fetched == folder
            assert fetched.variant == ItemVariant.FOLDER
            assert fetched.content is None
            assert fetched.status is None
            assert fetched.parent_id is None

        with_store(scenario)

    def test_insert_note_decodes_content(self, with_store):
        """Test that JSON content comes back as a dict."""
        async def scenario(store):
            doc = paragraph_doc("Hello")
            note = await store.insert_item(ItemVariant.NOTE, content=doc, status=ItemStatus.DRAFT)
            fetched = await store.get_item(note.id)
            assert fetched.content == doc
            assert fetched.status == ItemStatus.DRAFT

        with_store(scenario)

    def test_get_missing_item_returns_none(self, with_store):
        """Test that unknown ids resolve to None."""
        async def scenario(store):
            assert await store.get_item("missing") is None
            assert await store.get_parent_id("missing") is None

        with_store(scenario)

    def test_folder_with_content_violates_schema(self, with_store):
        """Test that the schema rejects a folder carrying content."""
        async def scenario(store):
            with pytest.raises(PersistenceFailure):
                await store.insert_item(
                    ItemVariant.FOLDER, name="Bad", content=paragraph_doc("x")
                )

        with_store(scenario)

    def test_unknown_parent_violates_foreign_key(self, with_store):
        """Test that a dangling parent pointer is rejected."""
        async def scenario(store):
            with pytest.raises(PersistenceFailure):
                await store.insert_item(ItemVariant.FOLDER, name="Orphan", parent_id="nope")

        with_store(scenario)

    def test_unconnected_store_raises_persistence_failure(self, temp_db_path):
        """Test that using a store before connect() is a PersistenceFailure."""
        store = SQLiteItemStore(temp_db_path)
        with pytest.raises(PersistenceFailure):
            asyncio.run(store.get_item("x"))


class TestOrdering:
    """Tests for list ordering."""

    def test_list_children_puts_folders_first(self, with_store):
        """Test folders-first then creation order for children."""
        async def scenario(store):
            root = await store.insert_item(ItemVariant.FOLDER, name="Root")
            note_a = await store.insert_item(
                ItemVariant.NOTE, parent_id=root.id, content=paragraph_doc("a"), status=ItemStatus.DRAFT
            )
            folder_b = await store.insert_item(ItemVariant.FOLDER, parent_id=root.id, name="B")
            note_c = await store.insert_item(
                ItemVariant.NOTE, parent_id=root.id, content=paragraph_doc("c"), status=ItemStatus.DRAFT
            )
            folder_d = await store.insert_item(ItemVariant.FOLDER, parent_id=root.id, name="D")

            children = await store.list_children(root.id)
            assert [c.id for c in children] == [folder_b.id, folder_d.id, note_a.id, note_c.id]

        with_store(scenario)

    def test_list_items_and_roots_newest_first(self, with_store):
        """Test that flat listings are newest first."""
        async def scenario(store):
            first = await store.insert_item(ItemVariant.FOLDER, name="First")
            second = await store.insert_item(ItemVariant.FOLDER, name="Second")
            child = await store.insert_item(ItemVariant.FOLDER, name="Child", parent_id=first.id)

            assert [i.id for i in await store.list_items()] == [child.id, second.id, first.id]
            assert [i.id for i in await store.list_roots()] == [second.id, first.id]

        with_store(scenario)

    def test_subtree_is_depth_ordered(self, with_store):
        """Test that the subtree lists the root, then each depth level."""
        async def scenario(store):
            root = await store.insert_item(ItemVariant.FOLDER, name="Root")
            child = await store.insert_item(ItemVariant.FOLDER, name="Child", parent_id=root.id)
            grandchild = await store.insert_item(
                ItemVariant.NOTE, parent_id=child.id, content=paragraph_doc("g"), status=ItemStatus.DRAFT
            )
            sibling = await store.insert_item(
                ItemVariant.NOTE, parent_id=root.id, content=paragraph_doc("s"), status=ItemStatus.DRAFT
            )
            await store.insert_item(ItemVariant.FOLDER, name="Elsewhere")

            subtree = await store.get_subtree(root.id)
            assert [i.id for i in subtree] == [root.id, child.id, sibling.id, grandchild.id]

        with_store(scenario)

    def test_subtree_of_missing_root_is_empty(self, with_store):
        """Test that an unknown root yields an empty subtree."""
        async def scenario(store):
            assert await store.get_subtree("missing") == []

        with_store(scenario)


class TestWrites:
    """Tests for updates and deletes."""

    def test_update_refreshes_updated_at(self, with_store):
        """Test that every update moves updated_at forward."""
        async def scenario(store):
            folder = await store.insert_item(ItemVariant.FOLDER, name="Old")
            updated = await store.update_item(folder.id, name="New")
            assert updated.name == "New"
            assert updated.updated_at >= folder.updated_at
            assert updated.created_at == folder.created_at

        with_store(scenario)

    def test_update_missing_item_returns_none(self, with_store):
        """Test that updating an unknown id reports nothing changed."""
        async def scenario(store):
            assert await store.update_item("missing", name="x") is None

        with_store(scenario)

    def test_update_rejects_unknown_columns(self, with_store):
        """Test that immutable columns cannot be updated."""
        async def scenario(store):
            folder = await store.insert_item(ItemVariant.FOLDER, name="F")
            with pytest.raises(ValueError):
                await store.update_item(folder.id, variant="note")

        with_store(scenario)

    def test_delete_cascades_through_subtree(self, with_store):
        """Test that deleting a folder removes every descendant."""
        async def scenario(store):
            root = await store.insert_item(ItemVariant.FOLDER, name="Root")
            child = await store.insert_item(ItemVariant.FOLDER, name="Child", parent_id=root.id)
            note = await store.insert_item(
                ItemVariant.NOTE, parent_id=child.id, content=paragraph_doc("n"), status=ItemStatus.DRAFT
            )
            await store.insert_item(
                ItemVariant.AI_NOTE, parent_id=note.id, content=paragraph_doc("ai"),
                process_kind=ProcessKind.SUMMARIZE, status=ItemStatus.COMPLETE,
            )
            keep = await store.insert_item(ItemVariant.FOLDER, name="Keep")

            removed = await store.delete_item(root.id)

            assert removed == 4
            remaining = await store.list_items()
            assert [i.id for i in remaining] == [keep.id]

        with_store(scenario)

    def test_delete_missing_item_removes_nothing(self, with_store):
        """Test that deleting an unknown id is a no-op."""
        async def scenario(store):
            assert await store.delete_item("missing") == 0

        with_store(scenario)


class TestBeginProcessing:
    """Tests for the atomic processing transition."""

    def test_begin_processing_from_draft(self, with_store):
        """Test that a draft note enters processing and records the kind."""
        async def scenario(store):
            note = await store.insert_item(
                ItemVariant.NOTE, content=paragraph_doc("x"), status=ItemStatus.DRAFT
            )
            assert await store.begin_processing(note.id, ProcessKind.RESEARCH) is True

            fetched = await store.get_item(note.id)
            assert fetched.status == ItemStatus.PROCESSING
            assert fetched.process_kind == ProcessKind.RESEARCH

        with_store(scenario)

    def test_begin_processing_twice_only_first_wins(self, with_store):
        """Test that a second transition is refused while processing."""
        async def scenario(store):
            note = await store.insert_item(
                ItemVariant.NOTE, content=paragraph_doc("x"), status=ItemStatus.DRAFT
            )
            assert await store.begin_processing(note.id, ProcessKind.EXPAND) is True
            assert await store.begin_processing(note.id, ProcessKind.EXPAND) is False

        with_store(scenario)

    def test_begin_processing_requires_expected_status(self, with_store):
        """Test that from_status restricts the transition."""
        async def scenario(store):
            note = await store.insert_item(
                ItemVariant.NOTE, content=paragraph_doc("x"), status=ItemStatus.COMPLETE
            )
            assert await store.begin_processing(
                note.id, ProcessKind.EXPAND, from_status=ItemStatus.FAILED
            ) is False

            await store.set_status(note.id, ItemStatus.FAILED, "boom")
            assert await store.begin_processing(
                note.id, ProcessKind.EXPAND, from_status=ItemStatus.FAILED
            ) is True
            fetched = await store.get_item(note.id)
            assert fetched.error_detail is None

        with_store(scenario)

    def test_begin_processing_never_touches_folders(self, with_store):
        """Test that folders cannot enter processing."""
        async def scenario(store):
            folder = await store.insert_item(ItemVariant.FOLDER, name="F")
            assert await store.begin_processing(folder.id, ProcessKind.RESEARCH) is False

        with_store(scenario)


class TestSeed:
    """Tests for the welcome note seed."""

    def test_seed_only_into_empty_store(self, with_store):
        """Test that seeding runs once and never touches existing data."""
        async def scenario(store):
            assert await seed_welcome_note(store) is True
            assert await seed_welcome_note(store) is False

            (note,) = await store.list_items()
            assert note.variant == ItemVariant.NOTE
            assert note.status == ItemStatus.DRAFT

        with_store(scenario)
