"""backends — outbound HTTP collaborators (hosted database, webhook)."""

from backends.database import DatabaseClient, PersistenceError
from backends.webhook import WebhookNotifier

__all__ = [
    "DatabaseClient",
    "PersistenceError",
    "WebhookNotifier",
]
