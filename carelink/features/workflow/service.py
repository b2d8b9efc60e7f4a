# Workflow - Service

from datetime import datetime, timedelta
from typing import Optional
from carelink.config import settings
from carelink.features.workflow.models import WorkflowIntent, IntentStatus
from carelink.features.workflow.cascade import undo_intent
from carelink.core.logging import logger


class WorkflowService:
    """Recovery for cascades interrupted by a crash."""
    
    @staticmethod
    async def reconcile_stale_intents(now: Optional[datetime] = None) -> int:
        """
        Roll back intents still pending after the stale window.
        
        Returns:
            int: Number of intents rolled back
        """
        from carelink.database import DOCUMENT_MODELS
        
        now = now or datetime.utcnow()
        cutoff = now - timedelta(minutes=settings.WORKFLOW_INTENT_STALE_MINUTES)
        
        stale = await WorkflowIntent.find(
            WorkflowIntent.status == IntentStatus.PENDING,
            WorkflowIntent.created_at < cutoff,
        ).to_list()
        
        for intent in stale:
            removed = await undo_intent(intent, DOCUMENT_MODELS)
            logger.info(
                f"Reconciled stale workflow {intent.intent_id} ({intent.kind}): "
                f"removed {removed} document(s)"
            )
        
        return len(stale)
