"""Messaging collaborators for FileStream.

The pipelines only talk to the abstract ``MessagingClient``.  Two adapters
implement it:
- TelegramMessagingClient: Telethon bot client used in production
- InMemoryMessagingClient: dict-backed conversations for local runs and tests
"""
from .base import InboundMessage, MediaPayload, MessageHandler, MessagingClient, StoredMessage
from .memory import InMemoryMessagingClient

__all__ = [
    "InMemoryMessagingClient",
    "InboundMessage",
    "MediaPayload",
    "MessageHandler",
    "MessagingClient",
    "StoredMessage",
]
