"""Audit logging package."""

from split_wizard.audit.logger import AuditLogger, configure_logging, create_session_id

__all__ = ["AuditLogger", "configure_logging", "create_session_id"]
