"""Tests for the hierarchy service."""

import random

import pytest

from ainotes.exceptions import (
    CircularReferenceError,
    InvalidVariantError,
    NotFoundError,
    ValidationError,
)
from ainotes.models.item import ItemStatus, ItemVariant
from ainotes.services.hierarchy import HierarchyService

from conftest import paragraph_doc


def assert_forest(items):
    """No parent chain revisits an item and every parent exists."""
    by_id = {item.id: item for item in items}
    for item in items:
        seen = set()
        current = item
        while current is not None:
            assert current.id not in seen, f"cycle through {current.id}"
            seen.add(current.id)
            if current.parent_id is None:
                break
            assert current.parent_id in by_id, f"dangling parent {current.parent_id}"
            current = by_id[current.parent_id]


class TestCreateFolder:
    """Tests for folder creation."""

    def test_create_root_folder_trims_name(self, with_store):
        """Test that names are trimmed and status stays unset."""
        async def scenario(store):
            service = HierarchyService(store)
            folder = await service.create_folder("  Projects  ")
            assert folder.name == "Projects"
            assert folder.variant == ItemVariant.FOLDER
            assert folder.status is None
            assert folder.content is None

        with_store(scenario)

    @pytest.mark.parametrize("name", [None, "", "   ", "x" * 256])
    def test_create_folder_rejects_bad_names(self, with_store, name):
        """Test that empty and over-long names are rejected."""
        async def scenario(store):
            with pytest.raises(ValidationError):
                await HierarchyService(store).create_folder(name)
            assert await store.count_items() == 0

        with_store(scenario)

    def test_create_folder_accepts_max_length_name(self, with_store):
        """Test the 255 character boundary."""
        async def scenario(store):
            folder = await HierarchyService(store).create_folder("x" * 255)
            assert len(folder.name) == 255

        with_store(scenario)

    def test_create_folder_under_missing_parent(self, with_store):
        """Test that an unknown parent is NotFound."""
        async def scenario(store):
            with pytest.raises(NotFoundError):
                await HierarchyService(store).create_folder("Child", parent_id="missing")

        with_store(scenario)

    def test_create_folder_under_note_is_invalid(self, with_store):
        """Test that folders can only live inside folders."""
        async def scenario(store):
            service = HierarchyService(store)
            note = await service.create_note(paragraph_doc("n"))
            with pytest.raises(InvalidVariantError):
                await service.create_folder("Child", parent_id=note.id)

        with_store(scenario)


class TestCreateNote:
    """Tests for note creation."""

    def test_create_note_starts_as_draft(self, with_store):
        """Test default variant and status."""
        async def scenario(store):
            note = await HierarchyService(store).create_note(paragraph_doc("Explain X"))
            assert note.variant == ItemVariant.NOTE
            assert note.status == ItemStatus.DRAFT
            assert note.process_kind is None

        with_store(scenario)

    def test_create_note_requires_content(self, with_store):
        """Test that missing content is a validation error."""
        async def scenario(store):
            with pytest.raises(ValidationError):
                await HierarchyService(store).create_note(None)

        with_store(scenario)

    def test_note_may_nest_under_note(self, with_store):
        """Test that any existing item can hold a note."""
        async def scenario(store):
            service = HierarchyService(store)
            parent = await service.create_note(paragraph_doc("parent"))
            child = await service.create_note(paragraph_doc("child"), parent_id=parent.id)
            assert child.parent_id == parent.id

        with_store(scenario)

    def test_create_note_under_missing_parent(self, with_store):
        """Test that an unknown parent is NotFound."""
        async def scenario(store):
            with pytest.raises(NotFoundError):
                await HierarchyService(store).create_note(paragraph_doc("x"), parent_id="missing")

        with_store(scenario)

    def test_create_ai_note_manually(self, with_store):
        """Test the optional ai-note variant with a process kind."""
        async def scenario(store):
            note = await HierarchyService(store).create_note(
                paragraph_doc("x"), variant="ai-note", process_kind="expand"
            )
            assert note.variant == ItemVariant.AI_NOTE
            assert note.process_kind.value == "expand"

        with_store(scenario)

    @pytest.mark.parametrize("variant,kind", [("folder", None), ("note", "dance")])
    def test_create_note_rejects_bad_variant_or_kind(self, with_store, variant, kind):
        """Test that folders and unknown kinds are rejected."""
        async def scenario(store):
            with pytest.raises(ValidationError):
                await HierarchyService(store).create_note(
                    paragraph_doc("x"), variant=variant, process_kind=kind
                )

        with_store(scenario)


class TestUpdateFolder:
    """Tests for renaming and moving folders."""

    def test_rename_folder(self, with_store):
        """Test a plain rename."""
        async def scenario(store):
            service = HierarchyService(store)
            folder = await service.create_folder("Old")
            renamed = await service.update_folder(folder.id, name=" New ")
            assert renamed.name == "New"
            assert renamed.parent_id is None

        with_store(scenario)

    def test_update_without_fields_is_rejected(self, with_store):
        """Test that a no-op update fails."""
        async def scenario(store):
            service = HierarchyService(store)
            folder = await service.create_folder("F")
            with pytest.raises(ValidationError):
                await service.update_folder(folder.id)

        with_store(scenario)

    def test_rename_to_blank_is_rejected(self, with_store):
        """Test that an explicitly blank name fails validation."""
        async def scenario(store):
            service = HierarchyService(store)
            folder = await service.create_folder("F")
            with pytest.raises(ValidationError):
                await service.update_folder(folder.id, name="  ")

        with_store(scenario)

    def test_update_note_as_folder_is_invalid(self, with_store):
        """Test that the target must be a folder."""
        async def scenario(store):
            service = HierarchyService(store)
            note = await service.create_note(paragraph_doc("x"))
            with pytest.raises(InvalidVariantError):
                await service.update_folder(note.id, name="Nope")

        with_store(scenario)

    def test_move_folder_under_itself(self, with_store):
        """Test that self-parenting is circular."""
        async def scenario(store):
            service = HierarchyService(store)
            folder = await service.create_folder("F")
            with pytest.raises(CircularReferenceError):
                await service.update_folder(folder.id, parent_id=folder.id)

        with_store(scenario)

    def test_move_projects_under_its_child(self, with_store):
        """Test Projects -> AI, then moving Projects under AI."""
        async def scenario(store):
            service = HierarchyService(store)
            projects = await service.create_folder("Projects")
            ai = await service.create_folder("AI", parent_id=projects.id)

            with pytest.raises(CircularReferenceError):
                await service.update_folder(projects.id, parent_id=ai.id)

            assert (await store.get_item(projects.id)).parent_id is None
            assert (await store.get_item(ai.id)).parent_id == projects.id

        with_store(scenario)

    def test_move_folder_to_root_with_none(self, with_store):
        """Test that parent_id=None moves the folder to the root."""
        async def scenario(store):
            service = HierarchyService(store)
            parent = await service.create_folder("Parent")
            child = await service.create_folder("Child", parent_id=parent.id)
            moved = await service.update_folder(child.id, parent_id=None)
            assert moved.parent_id is None
            assert moved.name == "Child"

        with_store(scenario)

    def test_depth_bound_fails_closed(self, with_store):
        """Test that exhausting the ancestor walk counts as circular."""
        async def scenario(store):
            service = HierarchyService(store, max_folder_depth=3)
            chain = [await service.create_folder("f0")]
            for i in range(1, 5):
                chain.append(await service.create_folder(f"f{i}", parent_id=chain[-1].id))
            lone = await service.create_folder("lone")

            with pytest.raises(CircularReferenceError):
                await service.update_folder(lone.id, parent_id=chain[-1].id)
            moved = await service.update_folder(lone.id, parent_id=chain[1].id)
            assert moved.parent_id == chain[1].id

        with_store(scenario)


class TestMoveItem:
    """Tests for the generic move operation."""

    def test_move_note_into_folder_and_back_to_root(self, with_store):
        """Test reparenting a note."""
        async def scenario(store):
            service = HierarchyService(store)
            folder = await service.create_folder("F")
            note = await service.create_note(paragraph_doc("x"))

            moved = await service.move_item(note.id, folder.id)
            assert moved.parent_id == folder.id
            assert moved.updated_at >= note.updated_at

            back = await service.move_item(note.id, None)
            assert back.parent_id is None

        with_store(scenario)

    def test_move_into_note_is_invalid(self, with_store):
        """Test that move targets must be folders."""
        async def scenario(store):
            service = HierarchyService(store)
            target = await service.create_note(paragraph_doc("target"))
            note = await service.create_note(paragraph_doc("x"))
            with pytest.raises(InvalidVariantError):
                await service.move_item(note.id, target.id)

        with_store(scenario)

    def test_move_to_missing_target(self, with_store):
        """Test that an unknown target is NotFound."""
        async def scenario(store):
            service = HierarchyService(store)
            note = await service.create_note(paragraph_doc("x"))
            with pytest.raises(NotFoundError):
                await service.move_item(note.id, "missing")

        with_store(scenario)

    def test_move_missing_item(self, with_store):
        """Test that an unknown item is NotFound."""
        async def scenario(store):
            with pytest.raises(NotFoundError):
                await HierarchyService(store).move_item("missing", None)

        with_store(scenario)

    def test_move_item_onto_itself(self, with_store):
        """Test that an item cannot become its own parent."""
        async def scenario(store):
            service = HierarchyService(store)
            folder = await service.create_folder("F")
            with pytest.raises(CircularReferenceError):
                await service.move_item(folder.id, folder.id)

        with_store(scenario)

    def test_move_folder_under_grandchild_leaves_tree_unchanged(self, with_store):
        """Test descendant cycles through the generic move."""
        async def scenario(store):
            service = HierarchyService(store)
            a = await service.create_folder("A")
            b = await service.create_folder("B", parent_id=a.id)
            c = await service.create_folder("C", parent_id=b.id)
            before = await store.list_items()

            with pytest.raises(CircularReferenceError):
                await service.move_item(a.id, c.id)

            assert await store.list_items() == before

        with_store(scenario)

    def test_random_moves_keep_a_forest(self, with_store):
        """Test the forest invariant after many creates and moves."""
        async def scenario(store):
            rng = random.Random(1234)
            service = HierarchyService(store)
            folders = [await service.create_folder(f"root{i}") for i in range(3)]
            notes = []

            for step in range(60):
                action = rng.choice(["folder", "note", "move"])
                if action == "folder":
                    folders.append(await service.create_folder(f"f{step}", parent_id=rng.choice(folders).id))
                elif action == "note":
                    notes.append(await service.create_note(paragraph_doc(f"n{step}"), parent_id=rng.choice(folders).id))
                else:
                    item = rng.choice(folders + notes)
                    target = rng.choice(folders + [None])
                    try:
                        await service.move_item(item.id, target.id if target else None)
                    except (CircularReferenceError, InvalidVariantError):
                        pass
                assert_forest(await store.list_items())

        with_store(scenario)


class TestDeleteAndList:
    """Tests for cascade delete and folder listings."""

    def test_delete_folder_removes_whole_subtree(self, with_store):
        """Test cascade completeness with no orphans left behind."""
        async def scenario(store):
            service = HierarchyService(store)
            top = await service.create_folder("Top")
            mid = await service.create_folder("Mid", parent_id=top.id)
            note = await service.create_note(paragraph_doc("n"), parent_id=mid.id)
            await service.create_note(paragraph_doc("nested"), parent_id=note.id)
            other = await service.create_folder("Other")

            removed = await service.delete_folder(top.id)

            assert removed == 4
            remaining = await store.list_items()
            assert [i.id for i in remaining] == [other.id]
            assert_forest(remaining)

        with_store(scenario)

    def test_delete_folder_rejects_notes(self, with_store):
        """Test that folder delete refuses other variants."""
        async def scenario(store):
            service = HierarchyService(store)
            note = await service.create_note(paragraph_doc("n"))
            with pytest.raises(InvalidVariantError):
                await service.delete_folder(note.id)
            assert await store.get_item(note.id) is not None

        with_store(scenario)

    def test_delete_missing_item(self, with_store):
        """Test that deleting an unknown id is NotFound."""
        async def scenario(store):
            with pytest.raises(NotFoundError):
                await HierarchyService(store).delete_item("missing")

        with_store(scenario)

    def test_folder_contents_are_folders_first(self, with_store):
        """Test ordering of direct folder contents."""
        async def scenario(store):
            service = HierarchyService(store)
            root = await service.create_folder("Root")
            note = await service.create_note(paragraph_doc("n"), parent_id=root.id)
            sub = await service.create_folder("Sub", parent_id=root.id)
            await service.create_note(paragraph_doc("deep"), parent_id=sub.id)

            contents = await service.list_folder_contents(root.id)
            assert [i.id for i in contents] == [sub.id, note.id]

        with_store(scenario)

    def test_folder_contents_of_note_is_invalid(self, with_store):
        """Test that only folders have contents."""
        async def scenario(store):
            service = HierarchyService(store)
            note = await service.create_note(paragraph_doc("n"))
            with pytest.raises(InvalidVariantError):
                await service.list_folder_contents(note.id)

        with_store(scenario)

    def test_update_note_content(self, with_store):
        """Test content replacement on notes and rejection on folders."""
        async def scenario(store):
            service = HierarchyService(store)
            note = await service.create_note(paragraph_doc("old"))
            updated = await service.update_note_content(note.id, paragraph_doc("new"))
            assert updated.content == paragraph_doc("new")

            folder = await service.create_folder("F")
            with pytest.raises(InvalidVariantError):
                await service.update_note_content(folder.id, paragraph_doc("x"))
            with pytest.raises(NotFoundError):
                await service.update_note_content("missing", paragraph_doc("x"))

        with_store(scenario)
