# Workflow - Intent Log

from enum import Enum
from typing import Any, Dict, List, Optional
from beanie import Document, Indexed
from pydantic import BaseModel, Field
from carelink.shared.models import TimestampMixin


class IntentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    ROLLED_BACK = "rolled_back"


class StepAction(str, Enum):
    INSERT = "insert"
    UPDATE = "update"


class IntentStep(BaseModel):
    """
    A document touched on behalf of the cascade.

    Inserts are undone by deleting the document; updates by restoring the
    ``previous`` field values captured before the write.
    """
    collection: str
    document_id: str
    action: StepAction = StepAction.INSERT
    previous: Dict[str, Any] = Field(default_factory=dict)


class WorkflowIntent(Document, TimestampMixin):
    """
    Written before the first document of a multi-document cascade.

    ``steps`` grows before each write lands, so an interrupted cascade can
    be undone by reverting exactly what it touched.
    """
    
    intent_id: Indexed(str, unique=True)
    kind: str
    hospital_id: Optional[str] = None
    status: IntentStatus = IntentStatus.PENDING
    steps: List[IntentStep] = Field(default_factory=list)
    error: Optional[str] = None
    
    class Settings:
        name = "workflow_intents"
        use_state_management = True
