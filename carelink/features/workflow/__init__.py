# Workflow - multi-document cascades with compensation

from carelink.features.workflow.cascade import WorkflowCascade

__all__ = ["WorkflowCascade"]
