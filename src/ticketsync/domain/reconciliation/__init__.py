"""Reconciliation of local ticketing rows against an external ticket source."""

from __future__ import annotations

from .changeset import ChangeSet, Update, compute_change_set
from .projection import normalize_email, project_order, project_orders
from .reconciler import EventReconciler, EventSyncResult, SyncPhase

__all__ = [
    "ChangeSet",
    "EventReconciler",
    "EventSyncResult",
    "SyncPhase",
    "Update",
    "compute_change_set",
    "normalize_email",
    "project_order",
    "project_orders",
]
