"""Ingestion pipeline: inbound attachment -> storage conversation -> registry.

Steps for every file-bearing message, in order:
    1. Classify the attachment into a MediaKind (unsupported kinds are rejected)
    2. Extract name, MIME type and size, with per-kind fallbacks
    3. Reply with a "processing" status message
    4. Generate the key from the attachment's remote file ID
    5. Reuse the record if the key is already registered, otherwise relay
       the message into the storage conversation and register a FileRecord
    6. Edit the status message into a summary with the links

Failures after classification are logged and reported in chat; they never
propagate to the messaging client's dispatch loop.  A relay that succeeded
before a later step failed is left in the storage conversation.
"""
import logging
import time
from dataclasses import dataclass
from typing import Optional

from filestream.errors import DuplicateKeyError, RelayFailureError, UnsupportedMediaKindError
from filestream.links.presentation import LinkBuilder
from filestream.messaging.base import ChatId, InboundMessage, MediaPayload, MessagingClient
from filestream.registry.codec import generate_key
from filestream.registry.schemas import DEFAULT_MIME_TYPE, FileRecord, MediaKind
from filestream.registry.service import FileRegistry

from .replies import PROCESSING_TEXT, UNSUPPORTED_TEXT, error_text, summary_text, welcome_text

logger = logging.getLogger(__name__)

START_COMMAND = "/start"

# Fallback name pattern and MIME type per kind.
_KIND_DEFAULTS = {
    MediaKind.DOCUMENT: ("file_{ts}", DEFAULT_MIME_TYPE),
    MediaKind.VIDEO: ("video_{ts}.mp4", "video/mp4"),
    MediaKind.AUDIO: ("audio_{ts}.mp3", "audio/mpeg"),
    MediaKind.PHOTO: ("photo_{ts}.jpg", "image/jpeg"),
}


@dataclass
class FileDetails:
    file_name: str
    mime_type: str
    file_size: int


def classify(media: MediaPayload) -> MediaKind:
    """Map an attachment to its MediaKind.

    Raises:
        UnsupportedMediaKindError: For anything but document, video, audio or photo.
    """
    try:
        return MediaKind(media.type)
    except ValueError:
        raise UnsupportedMediaKindError(media.type) from None


def extract_details(kind: MediaKind, media: MediaPayload, now: Optional[float] = None) -> FileDetails:
    """Name, MIME type and size of an attachment, falling back per kind.

    Photos carry no name or MIME type upstream, so both are always synthetic.
    """
    ts = int((time.time() if now is None else now) * 1000)
    name_pattern, default_mime = _KIND_DEFAULTS[kind]
    default_name = name_pattern.format(ts=ts)

    if kind == MediaKind.PHOTO:
        file_name, mime_type = default_name, default_mime
    else:
        file_name = media.file_name or default_name
        mime_type = media.mime_type or default_mime

    return FileDetails(file_name=file_name, mime_type=mime_type, file_size=media.size or 0)


class IngestionPipeline:
    """Turns inbound attachments into registered, linkable files.

    Args:
        client:       Messaging collaborator used to relay and reply.
        registry:     Registry shared with the retrieval pipeline.
        links:        Link composer for the summary reply.
        storage_chat: Conversation used as durable storage for relayed files.
    """

    def __init__(
        self,
        client: MessagingClient,
        registry: FileRegistry,
        links: LinkBuilder,
        storage_chat: ChatId,
    ) -> None:
        self.client = client
        self.registry = registry
        self.links = links
        self.storage_chat = storage_chat

    # -----------------------------------------------------------------------
    # Consumer entry points
    # -----------------------------------------------------------------------

    async def on_message(self, message: InboundMessage) -> bool:
        """Dispatch any inbound message.  Returns True if it was handled."""
        if message.media is None:
            if _is_command(message.text, START_COMMAND):
                await self._reply_safely(message.chat_id, welcome_text(self.registry.size()))
                return True
            return False
        return await self.on_file_message(message)

    async def on_file_message(self, message: InboundMessage) -> bool:
        """Ingest a file-bearing message.

        Returns:
            True if the message carried an attachment (ingested or rejected),
            False if there was nothing to ingest.
        """
        if message.media is None:
            return False

        try:
            kind = classify(message.media)
        except UnsupportedMediaKindError as exc:
            logger.info("[ingest] Rejected message %s from chat %s: %s", message.message_id, message.chat_id, exc)
            await self._reply_safely(message.chat_id, UNSUPPORTED_TEXT, reply_to=message.message_id)
            return True

        await self.ingest(message, kind)
        return True

    # -----------------------------------------------------------------------
    # Pipeline
    # -----------------------------------------------------------------------

    async def ingest(self, message: InboundMessage, kind: MediaKind) -> Optional[FileRecord]:
        """Run relay, registration and reply for a classified message.

        Returns:
            The registered FileRecord, or None if any step failed.
        """
        media = message.media
        details = extract_details(kind, media)

        try:
            status_id = await self.client.send_text(
                message.chat_id, PROCESSING_TEXT, reply_to=message.message_id
            )
            key = generate_key(media.file_id)

            # Resent and forwarded files keep their remote file ID.
            record = self.registry.lookup(key)
            if record is not None:
                logger.info("[ingest] %s already registered, reusing %s", record.file_name, key)
            else:
                record = await self._register(message, kind, key, details)

            await self.client.edit_text(message.chat_id, status_id, summary_text(record, self.links))
        except Exception as exc:
            logger.exception(
                "[ingest] Error handling %s from chat %s (message %s): %s",
                kind.value, message.chat_id, message.message_id, exc,
            )
            await self._reply_safely(message.chat_id, error_text(exc), reply_to=message.message_id)
            return None

        logger.info("[ingest] Processed %s: %s (%s)", kind.value, record.file_name, record.key)
        return record

    async def _register(
        self, message: InboundMessage, kind: MediaKind, key: str, details: FileDetails
    ) -> FileRecord:
        relayed_id = await self._relay(message)
        record = FileRecord(
            key=key,
            remote_location_id=relayed_id,
            remote_file_id=str(message.media.file_id),
            file_name=details.file_name,
            mime_type=details.mime_type,
            file_size=details.file_size,
            media_kind=kind,
        )
        try:
            self.registry.insert(key, record)
        except DuplicateKeyError:
            # A concurrent ingestion of the same file registered first.
            existing = self.registry.lookup(key)
            if existing is None:
                raise
            logger.info("[ingest] %s registered concurrently, relayed copy %s unused", key, relayed_id)
            return existing
        return record

    async def _relay(self, message: InboundMessage) -> int:
        try:
            return await self.client.relay(self.storage_chat, message.chat_id, message.message_id)
        except Exception as exc:
            raise RelayFailureError() from exc

    async def _reply_safely(self, chat: ChatId, text: str, reply_to: Optional[int] = None) -> None:
        try:
            await self.client.send_text(chat, text, reply_to=reply_to)
        except Exception:
            logger.exception("[ingest] Failed to send reply to chat %s", chat)


def _is_command(text: str, command: str) -> bool:
    """True for ``/cmd``, ``/cmd@botname`` and ``/cmd payload``."""
    words = text.strip().split()
    if not words:
        return False
    return words[0].split("@", 1)[0] == command
