"""Prototype-scoped audit trail for the demo."""

from datetime import datetime

from ...decorators import component, scope


@component
@scope("prototype")
class AuditTrail:
    """A fresh trail is handed out on every lookup."""

    def __init__(self):
        self.created_at = datetime.now()
        self.entries = []

    def record(self, message: str) -> None:
        self.entries.append(message)
