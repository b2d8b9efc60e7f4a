# Workflow - Cascade

from enum import Enum
from typing import List, Optional, Tuple, Type
from beanie import Document, PydanticObjectId
from carelink.features.workflow.models import WorkflowIntent, IntentStatus, IntentStep, StepAction
from carelink.shared.ids import generate_id
from carelink.core.logging import logger


class WorkflowCascade:
    """
    Async context manager grouping the writes of one clinical action.

    The intent record is written first and each step is logged before its
    write lands. If the block raises, every step taken so far is reverted in
    reverse order (inserts deleted, updates restored) and the original error
    propagates.

        async with WorkflowCascade("admission", hospital_id) as cascade:
            await cascade.insert(admission)
            await cascade.update(patient, is_admitted=True, current_bed_number=bed)
    """

    def __init__(self, kind: str, hospital_id: Optional[str] = None):
        self.kind = kind
        self.hospital_id = hospital_id
        self.intent: Optional[WorkflowIntent] = None
        self._done: List[Tuple[Document, IntentStep]] = []

    async def __aenter__(self) -> "WorkflowCascade":
        self.intent = WorkflowIntent(
            intent_id=generate_id("WF", 3),
            kind=self.kind,
            hospital_id=self.hospital_id,
        )
        await self.intent.insert()
        return self

    async def _log(self, step: IntentStep) -> None:
        self.intent.steps.append(step)
        self.intent.update_timestamp()
        await self.intent.save()

    async def insert(self, document: Document) -> Document:
        """Log the step on the intent, then insert the document."""
        if document.id is None:
            document.id = PydanticObjectId()

        step = IntentStep(
            collection=document.get_settings().name,
            document_id=str(document.id),
        )
        await self._log(step)

        await document.insert()
        self._done.append((document, step))
        return document

    async def update(self, document: Document, **changes) -> Document:
        """Log the fields' current values on the intent, then apply ``changes`` and save."""
        step = IntentStep(
            collection=document.get_settings().name,
            document_id=str(document.id),
            action=StepAction.UPDATE,
            previous={
                field: value.value if isinstance(value, Enum) else value
                for field, value in document.model_dump(include=set(changes) | {"updated_at"}).items()
            },
        )
        await self._log(step)

        for field, value in changes.items():
            setattr(document, field, value)
        document.update_timestamp()
        await document.save()

        self._done.append((document, step))
        return document

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc is None:
            self.intent.status = IntentStatus.COMPLETED
            self.intent.update_timestamp()
            await self.intent.save()
            return False

        logger.error(
            f"Workflow {self.kind} ({self.intent.intent_id}) failed after "
            f"{len(self._done)} write(s): {type(exc).__name__}: {exc}"
        )
        await self._compensate(exc)
        return False

    async def _compensate(self, exc: BaseException) -> None:
        undone = 0
        for document, step in reversed(self._done):
            try:
                await revert_step(type(document), step)
                undone += 1
            except Exception as e:
                # Leave the intent pending so reconcile_stale_intents retries it
                logger.error(
                    f"Could not undo {step.action.value} of {step.collection}/{step.document_id} "
                    f"for workflow {self.intent.intent_id}: {e}"
                )

        self.intent.error = f"{type(exc).__name__}: {exc}"
        if undone == len(self._done):
            self.intent.status = IntentStatus.ROLLED_BACK
        self.intent.update_timestamp()
        await self.intent.save()

        logger.info(f"Workflow {self.intent.intent_id} rolled back {undone} write(s)")


async def revert_step(model: Type[Document], step: IntentStep) -> bool:
    """Undo one logged step; returns False if the document is already gone."""
    document_id = PydanticObjectId(step.document_id)
    document = await model.get(document_id)
    if document is None:
        return False

    if step.action == StepAction.UPDATE:
        await model.find_one({"_id": document_id}).update({"$set": step.previous})
    else:
        await document.delete()
    return True


async def undo_intent(intent: WorkflowIntent, models: List[Type[Document]]) -> int:
    """Revert every step an intent recorded; returns how many still applied."""
    by_collection = {model.get_settings().name: model for model in models}
    reverted = 0

    for step in reversed(intent.steps):
        model = by_collection.get(step.collection)
        if model is None:
            logger.warning(f"Unknown collection {step.collection} in intent {intent.intent_id}")
            continue

        if await revert_step(model, step):
            reverted += 1

    intent.status = IntentStatus.ROLLED_BACK
    intent.update_timestamp()
    await intent.save()
    return reverted
