"""In-memory messaging back-end.

Conversations are plain dicts of message ID -> message.  Useful for running
the service without Telegram credentials (``messaging.provider: memory``) and
as the collaborator in the test-suite.

Thread Safety:
    Designed for a single event loop; not safe for concurrent mutation from
    several threads.
"""
import itertools
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from .base import ChatId, InboundMessage, MediaPayload, MessageHandler, MessagingClient, StoredMessage

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    message_id: int
    text: str = ""
    media: Optional[MediaPayload] = None
    content: bytes = b""
    reply_to: Optional[int] = None


@dataclass
class _Conversation:
    entries: Dict[int, _Entry] = field(default_factory=dict)
    ids: Iterator[int] = field(default_factory=lambda: itertools.count(1))

    def append(self, **kwargs) -> _Entry:
        entry = _Entry(message_id=next(self.ids), **kwargs)
        self.entries[entry.message_id] = entry
        return entry


class InMemoryMessagingClient(MessagingClient):
    """A MessagingClient whose conversations live in process memory."""

    def __init__(self) -> None:
        self._conversations: Dict[ChatId, _Conversation] = {}
        self._handlers: List[MessageHandler] = []
        self.started = False

    def _conversation(self, chat: ChatId) -> _Conversation:
        return self._conversations.setdefault(chat, _Conversation())

    # -----------------------------------------------------------------------
    # MessagingClient
    # -----------------------------------------------------------------------

    async def start(self) -> None:
        self.started = True
        logger.info("In-memory messaging client started")

    async def stop(self) -> None:
        self.started = False

    def subscribe(self, handler: MessageHandler) -> None:
        self._handlers.append(handler)

    async def relay(self, to_chat: ChatId, from_chat: ChatId, message_id: int) -> int:
        source = self._conversation(from_chat).entries.get(message_id)
        if source is None:
            raise LookupError(f"Message {message_id} not found in chat {from_chat}")
        copy = self._conversation(to_chat).append(
            text=source.text,
            media=source.media,
            content=source.content,
        )
        return copy.message_id

    async def fetch(self, chat: ChatId, message_id: int) -> Optional[StoredMessage]:
        entry = self._conversation(chat).entries.get(message_id)
        if entry is None:
            return None
        return StoredMessage(chat_id=chat, message_id=entry.message_id, media=entry.media, raw=entry)

    async def download(self, message: StoredMessage) -> bytes:
        entry = self._conversation(message.chat_id).entries.get(message.message_id)
        if entry is None or entry.media is None:
            raise LookupError(f"No media for message {message.message_id}")
        return entry.content

    async def send_text(self, chat: ChatId, text: str, reply_to: Optional[int] = None) -> int:
        return self._conversation(chat).append(text=text, reply_to=reply_to).message_id

    async def edit_text(self, chat: ChatId, message_id: int, text: str) -> None:
        entry = self._conversation(chat).entries.get(message_id)
        if entry is None:
            raise LookupError(f"Message {message_id} not found in chat {chat}")
        entry.text = text

    # -----------------------------------------------------------------------
    # Simulation helpers
    # -----------------------------------------------------------------------

    def post(
        self,
        chat: ChatId,
        text: str = "",
        media: Optional[MediaPayload] = None,
        content: bytes = b"",
    ) -> InboundMessage:
        """Place a message in ``chat`` as if a user had sent it."""
        entry = self._conversation(chat).append(text=text, media=media, content=content)
        return InboundMessage(chat_id=chat, message_id=entry.message_id, text=text, media=media)

    async def deliver(
        self,
        chat: ChatId,
        text: str = "",
        media: Optional[MediaPayload] = None,
        content: bytes = b"",
    ) -> InboundMessage:
        """Post a message and dispatch it to every subscribed handler."""
        message = self.post(chat, text=text, media=media, content=content)
        for handler in self._handlers:
            await handler(message)
        return message

    def remove(self, chat: ChatId, message_id: int) -> None:
        """Delete a message, e.g. to simulate an upstream deletion."""
        self._conversation(chat).entries.pop(message_id, None)

    def texts(self, chat: ChatId) -> List[str]:
        """Texts of every message in ``chat``, oldest first."""
        return [e.text for e in self._conversation(chat).entries.values()]

    def message_count(self, chat: ChatId) -> int:
        return len(self._conversation(chat).entries)
