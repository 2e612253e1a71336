"""Requisition scan workflow."""

from hirescan.workflow.orchestrator import RequisitionOrchestrator

__all__ = ["RequisitionOrchestrator"]
