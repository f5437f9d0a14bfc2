"""
AI processing service.

Runs a note through the text-generation collaborator and attaches the
result as a new ai-note child of that note.

Status machine of the processed note:
    draft / complete / failed --run--> processing
    failed --retry--> processing
    processing --> complete   (child created, error cleared)
    processing --> failed     (error_detail set)

Entering ``processing`` is a single conditional UPDATE, so at most one run
per note is in flight. The steps after it are not one transaction: if the
process dies mid-run the note stays ``processing`` until reset_processing()
is called explicitly.
"""

import asyncio
import logging
from typing import Optional

from ainotes.exceptions import (
    ConflictError,
    EmptyContentError,
    GenerationFailure,
    InvalidStatusError,
    InvalidVariantError,
    NotFoundError,
    PersistenceFailure,
    ValidationError,
)
from ainotes.item_store import SQLiteItemStore
from ainotes.llm.base import LLMProvider
from ainotes.models.item import (
    Item,
    ItemStatus,
    ItemStatusResponse,
    ItemVariant,
    ProcessKind,
    ProcessResult,
)
from ainotes.services.document import extract_text, markdown_to_document
from ainotes.services.prompts import build_prompt
from ainotes.utils.validators import validate_process_kind

logger = logging.getLogger(__name__)

INTERRUPTED_DETAIL = "Processing was interrupted before completion"


class ProcessingService:
    """Drives the processing pipeline for one note at a time."""

    def __init__(
        self,
        store: SQLiteItemStore,
        provider: Optional[LLMProvider],
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        timeout_seconds: Optional[float] = None,
    ):
        self.store = store
        self.provider = provider
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout_seconds = timeout_seconds

    # ============================================================
    # Entry points
    # ============================================================

    async def run(self, note_id: str, process_kind: Optional[str]) -> ProcessResult:
        """Process a note and create its ai-note child.

        Raises:
            ValidationError: unknown process kind (no state change)
            NotFoundError: note does not exist
            InvalidVariantError: target is a folder
            ConflictError: note is already processing
            GenerationFailure: pipeline failed, note left ``failed``
            PersistenceFailure: store failed while writing the result
        """
        is_valid, error = validate_process_kind(process_kind)
        if not is_valid:
            raise ValidationError(error)
        kind = ProcessKind(process_kind)

        note = await self._get_processable(note_id)

        if not await self.store.begin_processing(note_id, kind):
            await self._raise_not_started(note_id, "Note is already being processed")

        logger.info(f"Starting {kind.value} process for note {note_id}")
        return await self._execute(note, kind)

    async def retry(self, note_id: str) -> ProcessResult:
        """Re-run the last process kind of a failed note."""
        note = await self._get_processable(note_id)

        if note.status != ItemStatus.FAILED:
            status = note.status.value if note.status else None
            raise InvalidStatusError(f"Can only retry failed notes (current status: {status})")
        if note.process_kind is None:
            raise ValidationError("No process kind recorded for this note")

        kind = note.process_kind
        if not await self.store.begin_processing(note_id, kind, from_status=ItemStatus.FAILED):
            await self._raise_not_started(note_id, "Note is already being retried")

        logger.info(f"Retrying {kind.value} process for note {note_id}")
        return await self._execute(note, kind)

    async def get_status(self, note_id: str) -> ItemStatusResponse:
        """Status snapshot for polling."""
        item = await self.store.get_item(note_id)
        if item is None:
            raise NotFoundError(f"Item not found: {note_id}")
        return ItemStatusResponse(
            id=item.id,
            status=item.status,
            process_kind=item.process_kind,
            error_detail=item.error_detail,
            updated_at=item.updated_at,
        )

    async def reset_processing(self, note_id: str) -> Item:
        """Mark a note stuck in ``processing`` as ``failed`` so it can be retried.

        Explicit, out-of-band recovery for runs that died mid-pipeline.
        """
        note = await self._get_processable(note_id)
        if note.status != ItemStatus.PROCESSING:
            status = note.status.value if note.status else None
            raise InvalidStatusError(f"Only processing notes can be reset (current status: {status})")

        await self.store.set_status(note_id, ItemStatus.FAILED, INTERRUPTED_DETAIL)
        logger.warning(f"Reset stuck processing run on note {note_id}")
        return await self._get_processable(note_id)

    # ============================================================
    # Pipeline
    # ============================================================

    async def _execute(self, note: Item, kind: ProcessKind) -> ProcessResult:
        """Steps 2-6 of a run. The note is already ``processing``."""
        try:
            text = extract_text(note.content)
            if not text.strip():
                raise EmptyContentError("Note has no content to process")
            logger.info(f"Extracted {len(text)} characters from note {note.id}")

            generated = await self._generate(build_prompt(kind, text))
            document = markdown_to_document(generated)
            if not document["content"]:
                raise GenerationFailure("Generated response was empty")

            child = await self.store.insert_item(
                ItemVariant.AI_NOTE,
                parent_id=note.id,
                content=document,
                process_kind=kind,
                status=ItemStatus.COMPLETE,
            )
        except (GenerationFailure, PersistenceFailure) as e:
            logger.error(f"Processing failed for note {note.id}: {e}")
            await self.store.set_status(note.id, ItemStatus.FAILED, str(e))
            raise

        await self.store.set_status(note.id, ItemStatus.COMPLETE, None)
        logger.info(f"Created {kind.value} ai-note {child.id} under note {note.id}")
        return ProcessResult(child_id=child.id, process_kind=kind)

    async def _generate(self, prompt: str) -> str:
        """Call the collaborator. Any failure becomes GenerationFailure."""
        if self.provider is None:
            raise GenerationFailure("No LLM provider is configured")

        try:
            call = self.provider.complete(
                prompt,
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            if self.timeout_seconds:
                response = await asyncio.wait_for(call, timeout=self.timeout_seconds)
            else:
                response = await call
        except asyncio.TimeoutError as e:
            raise GenerationFailure(f"LLM call timed out after {self.timeout_seconds}s") from e
        except Exception as e:
            raise GenerationFailure(f"{self.provider.provider_name} error: {e}") from e

        input_tokens = response.input_tokens or self.provider._estimate_tokens(prompt)
        output_tokens = response.output_tokens or self.provider._estimate_tokens(response.content)
        cost = self.provider.estimate_cost(input_tokens, output_tokens)
        logger.info(
            f"AI generated {len(response.content)} characters "
            f"(tokens in={input_tokens} out={output_tokens}, est. cost ${cost:.4f})"
        )

        if not response.content.strip():
            raise GenerationFailure("LLM returned an empty response")
        return response.content

    # ============================================================
    # Helpers
    # ============================================================

    async def _get_processable(self, note_id: str) -> Item:
        note = await self.store.get_item(note_id)
        if note is None:
            raise NotFoundError(f"Note not found: {note_id}")
        if note.is_folder:
            raise InvalidVariantError("Folders cannot be processed")
        return note

    async def _raise_not_started(self, note_id: str, message: str) -> None:
        """The conditional update matched nothing: gone or already running."""
        if await self.store.get_item(note_id) is None:
            raise NotFoundError(f"Note not found: {note_id}")
        raise ConflictError(message)
