"""Telegram messaging back-end built on Telethon.

Logs in as a bot over MTProto, which (unlike the HTTP Bot API) can forward
messages into a channel, fetch them back by ID and download media of any size.

The session string is persisted to ``session_file`` after a successful login
so restarts reuse the existing authorisation.
"""
import logging
from pathlib import Path
from typing import List, Optional

from telethon import TelegramClient, events
from telethon.sessions import StringSession
from telethon.tl.types import MessageMediaWebPage

from .base import ChatId, InboundMessage, MediaPayload, MessageHandler, MessagingClient, StoredMessage

logger = logging.getLogger(__name__)

# Checked in this order: Telethon also exposes videos and audio as ``document``.
_MEDIA_ATTRIBUTES = ("video", "audio", "photo", "document")


def describe_media(message) -> Optional[MediaPayload]:
    """Describe the attachment of a Telethon message.

    Returns None for messages without an attachment (plain text, or text
    with a link preview).  Attachments that are not a video, audio, photo or
    document are reported with their upstream type name, e.g. ``geo``.
    """
    media = message.media
    if media is None or isinstance(media, MessageMediaWebPage):
        return None

    for attribute in _MEDIA_ATTRIBUTES:
        obj = getattr(message, attribute, None)
        if obj is None:
            continue
        file = message.file
        return MediaPayload(
            type=attribute,
            file_id=str(obj.id),
            file_name=file.name if file else None,
            mime_type=file.mime_type if file else None,
            size=file.size if file else None,
        )

    type_name = type(media).__name__.removeprefix("MessageMedia").lower()
    return MediaPayload(type=type_name or "unknown", file_id="")


class TelegramMessagingClient(MessagingClient):
    """MessagingClient backed by a Telethon bot session.

    Args:
        api_id:             Telegram application ID.
        api_hash:           Telegram application hash.
        bot_token:          Token issued by @BotFather.
        session_file:       Where the session string is stored between runs.
        connection_retries: Reconnection attempts before giving up.
        retry_delay:        Seconds between reconnection attempts.
        ignored_chats:      Chats whose posts are never dispatched, e.g. the
                            storage channel the bot relays into.
    """

    def __init__(
        self,
        api_id: int,
        api_hash: str,
        bot_token: str,
        session_file: str = "session.txt",
        connection_retries: int = 5,
        retry_delay: int = 1,
        ignored_chats: Optional[List[ChatId]] = None,
    ) -> None:
        self._api_id = api_id
        self._api_hash = api_hash
        self._bot_token = bot_token
        self._session_file = Path(session_file)
        self._connection_retries = connection_retries
        self._retry_delay = retry_delay
        self._ignored_chats = list(ignored_chats or [])
        self._client: Optional[TelegramClient] = None
        self._handlers: List[MessageHandler] = []

    # -----------------------------------------------------------------------
    # Session persistence
    # -----------------------------------------------------------------------

    def _load_session(self) -> StringSession:
        if self._session_file.exists():
            session_string = self._session_file.read_text(encoding="utf-8").strip()
            if session_string:
                logger.info("Found existing session in %s", self._session_file)
                return StringSession(session_string)
        logger.info("Creating new session")
        return StringSession()

    def _save_session(self) -> None:
        session_string = self._client.session.save()
        self._session_file.parent.mkdir(parents=True, exist_ok=True)
        self._session_file.write_text(session_string, encoding="utf-8")
        logger.info("Session saved to %s", self._session_file)

    @property
    def client(self) -> TelegramClient:
        if self._client is None:
            raise RuntimeError("Telegram client is not started")
        return self._client

    # -----------------------------------------------------------------------
    # MessagingClient
    # -----------------------------------------------------------------------

    async def start(self) -> None:
        self._client = TelegramClient(
            self._load_session(),
            self._api_id,
            self._api_hash,
            connection_retries=self._connection_retries,
            retry_delay=self._retry_delay,
            auto_reconnect=True,
        )
        new_messages = events.NewMessage(
            incoming=True,
            chats=self._ignored_chats or None,
            blacklist_chats=True,
        )
        self._client.add_event_handler(self._dispatch, new_messages)

        logger.info("Connecting to Telegram...")
        await self._client.start(bot_token=self._bot_token)
        self._save_session()

        me = await self._client.get_me()
        logger.info("Bot connected as @%s", me.username)

    async def stop(self) -> None:
        if self._client is None:
            return
        await self._client.disconnect()
        self._client = None
        logger.info("Telegram client disconnected")

    def subscribe(self, handler: MessageHandler) -> None:
        self._handlers.append(handler)

    async def _dispatch(self, event) -> None:
        message = event.message
        inbound = InboundMessage(
            chat_id=event.chat_id,
            message_id=message.id,
            text=message.raw_text or "",
            media=describe_media(message),
        )
        for handler in self._handlers:
            await handler(inbound)

    async def relay(self, to_chat: ChatId, from_chat: ChatId, message_id: int) -> int:
        forwarded = await self.client.forward_messages(to_chat, [message_id], from_peer=from_chat)
        if not forwarded or forwarded[0] is None:
            raise RuntimeError(f"Forwarding message {message_id} returned nothing")
        return forwarded[0].id

    async def fetch(self, chat: ChatId, message_id: int) -> Optional[StoredMessage]:
        message = await self.client.get_messages(chat, ids=message_id)
        if message is None:
            return None
        return StoredMessage(
            chat_id=chat,
            message_id=message.id,
            media=describe_media(message),
            raw=message,
        )

    async def download(self, message: StoredMessage) -> bytes:
        content = await self.client.download_media(message.raw, file=bytes)
        if content is None:
            raise RuntimeError(f"Message {message.message_id} has nothing to download")
        return content

    async def send_text(self, chat: ChatId, text: str, reply_to: Optional[int] = None) -> int:
        sent = await self.client.send_message(
            chat,
            text,
            reply_to=reply_to,
            parse_mode="html",
            link_preview=False,
        )
        return sent.id

    async def edit_text(self, chat: ChatId, message_id: int, text: str) -> None:
        await self.client.edit_message(
            chat,
            message_id,
            text,
            parse_mode="html",
            link_preview=False,
        )
