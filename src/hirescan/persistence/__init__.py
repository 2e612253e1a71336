"""Persistence: data-access contracts, stores, and the audit event log."""
