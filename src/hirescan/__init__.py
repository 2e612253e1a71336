"""HireScan: requisition scan orchestration and skill coverage matching."""

__version__ = "0.1.0"
