"""Abstract MessagingClient interface.

Every messaging back-end must implement this interface so the ingestion and
retrieval pipelines stay independent of any particular client library or
event loop mechanics.  Connection, authentication and session persistence are
the adapter's own business.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Union

ChatId = Union[int, str]


@dataclass
class MediaPayload:
    """The single attachment carried by a message.

    ``type`` is the upstream attachment type as reported by the adapter
    (``document``, ``video``, ``audio``, ``photo``, or anything else the
    upstream supports, e.g. ``geo`` or ``poll``).
    """

    type: str
    file_id: str
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    size: Optional[int] = None


@dataclass
class InboundMessage:
    """A message delivered to the bot."""

    chat_id: ChatId
    message_id: int
    text: str = ""
    media: Optional[MediaPayload] = None


@dataclass
class StoredMessage:
    """A message fetched back from a conversation.

    ``raw`` holds the adapter's native message object, if any, so that
    ``download()`` can hand it back to the client library.
    """

    chat_id: ChatId
    message_id: int
    media: Optional[MediaPayload] = None
    raw: Any = None


MessageHandler = Callable[[InboundMessage], Awaitable[Any]]


class MessagingClient(ABC):
    """Abstract base class for messaging back-ends."""

    @abstractmethod
    async def start(self) -> None:
        """Connect and authenticate.  Raises if the connection cannot be made."""

    @abstractmethod
    async def stop(self) -> None:
        """Disconnect.  Safe to call when not connected."""

    @abstractmethod
    def subscribe(self, handler: MessageHandler) -> None:
        """Register ``handler`` to be awaited for every inbound message."""

    @abstractmethod
    async def relay(self, to_chat: ChatId, from_chat: ChatId, message_id: int) -> int:
        """Forward a message into ``to_chat`` and return the new message ID."""

    @abstractmethod
    async def fetch(self, chat: ChatId, message_id: int) -> Optional[StoredMessage]:
        """Fetch a message by ID, or None if the conversation no longer has it."""

    @abstractmethod
    async def download(self, message: StoredMessage) -> bytes:
        """Download the full binary payload referenced by ``message``."""

    @abstractmethod
    async def send_text(
        self,
        chat: ChatId,
        text: str,
        reply_to: Optional[int] = None,
    ) -> int:
        """Send an HTML-formatted text message and return its ID."""

    @abstractmethod
    async def edit_text(self, chat: ChatId, message_id: int, text: str) -> None:
        """Replace the text of a message previously sent by the bot."""
