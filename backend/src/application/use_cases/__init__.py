"""Use cases - entry points of the application layer."""

from .application_workflow_service import ApplicationWorkflowService, apply_sections

__all__ = ["ApplicationWorkflowService", "apply_sections"]
