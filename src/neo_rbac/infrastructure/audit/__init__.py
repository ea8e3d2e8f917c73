"""Audit sink implementations."""

from .logging_audit_sink import AuthorizationEvent, LoggingAuditSink

__all__ = ["AuthorizationEvent", "LoggingAuditSink"]
