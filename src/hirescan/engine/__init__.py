"""Requisition lifecycle engine: scan gateway state machine."""

from hirescan.engine.state_machine import RequisitionStateMachine

__all__ = ["RequisitionStateMachine"]
