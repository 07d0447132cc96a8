"""Retrieval pipeline: key -> registry -> storage conversation -> bytes."""
import logging
from dataclasses import dataclass

from filestream.errors import NotFoundError, UpstreamFailureError
from filestream.messaging.base import ChatId, MessagingClient
from filestream.registry.schemas import FileRecord, MediaKind
from filestream.registry.service import FileRegistry

logger = logging.getLogger(__name__)

_SUPPORTED_TYPES = {kind.value for kind in MediaKind}


@dataclass
class RetrievedFile:
    record: FileRecord
    content: bytes


class RetrievalPipeline:
    """Resolves keys to live bytes.

    Args:
        client:       Messaging collaborator used to fetch and download.
        registry:     Registry shared with the ingestion pipeline.
        storage_chat: Conversation holding the relayed files.
    """

    def __init__(self, client: MessagingClient, registry: FileRegistry, storage_chat: ChatId) -> None:
        self.client = client
        self.registry = registry
        self.storage_chat = storage_chat

    def lookup(self, key: str) -> FileRecord:
        """Return the record for ``key``.

        Raises:
            NotFoundError: If the key was never registered.
        """
        record = self.registry.lookup(key)
        if record is None:
            raise NotFoundError("File not found")
        return record

    async def fetch(self, key: str) -> RetrievedFile:
        """Download the current bytes behind ``key``.

        Raises:
            NotFoundError:        Unknown key, or the stored message or its media is gone.
            UpstreamFailureError: Any other error while fetching or downloading.
        """
        record = self.lookup(key)
        try:
            stored = await self.client.fetch(self.storage_chat, record.remote_location_id)
            if stored is None:
                raise NotFoundError("File not found in storage")
            if stored.media is None or stored.media.type not in _SUPPORTED_TYPES:
                raise NotFoundError("No media found")
            content = await self.client.download(stored)
        except NotFoundError:
            raise
        except Exception as exc:
            raise UpstreamFailureError() from exc

        logger.debug("[retrieval] Downloaded %s (%d bytes)", key, len(content))
        return RetrievedFile(record=record, content=content)
