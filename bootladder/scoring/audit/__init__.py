"""Audit trail for ladder decisions."""

from __future__ import annotations

from .logging import LadderAuditLogger, get_audit_logger

__all__ = ["LadderAuditLogger", "get_audit_logger"]
