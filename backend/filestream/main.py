"""FileStream Application.

This is the main entry point for the FileStream service.  Users send media
to a Telegram bot; the bot relays every file into a storage channel and
replies with links that stream the file back over HTTP.

Modules:
    - registry: key codec and the in-memory key -> file registry
    - messaging: messaging collaborators (Telethon, in-memory)
    - ingest: relay + registration of inbound files
    - retrieval: /file and /watch endpoints
    - links: link composition and HTML pages
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from filestream import __version__
from filestream.config import AppConfig, get_config
from filestream.ingest.service import IngestionPipeline
from filestream.links.presentation import LinkBuilder, render_status_page
from filestream.messaging.base import MessagingClient
from filestream.messaging.memory import InMemoryMessagingClient
from filestream.messaging.telegram import TelegramMessagingClient
from filestream.registry.service import FileRegistry, get_registry, set_registry
from filestream.retrieval.router import configure as configure_retrieval
from filestream.retrieval.router import router as retrieval_router
from filestream.retrieval.service import RetrievalPipeline

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# Telethon logs every reconnect and update batch; httpx/httpcore log every
# request made by the test client and uvicorn logs every access.
for _noisy in (
    "telethon",
    "httpx",
    "httpcore",
    "uvicorn.access",
):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

MEMORY_STORAGE_CHAT = "storage"


def build_messaging_client(config: AppConfig) -> MessagingClient:
    """Create the messaging collaborator selected by ``messaging.provider``.

    Raises:
        RuntimeError: If Telegram is selected but credentials are missing.
    """
    messaging = config.messaging
    if messaging.provider == "memory":
        return InMemoryMessagingClient()

    telegram = config.secrets.telegram
    missing = [
        name for name, value in (
            ("api_id", telegram.api_id),
            ("api_hash", telegram.api_hash),
            ("bot_token", telegram.bot_token),
        )
        if not value
    ]
    if missing:
        raise RuntimeError(f"Missing Telegram secrets: {', '.join(missing)}")
    if config.storage.chat is None:
        raise RuntimeError("storage.chat must be configured for the Telegram provider")

    return TelegramMessagingClient(
        api_id=telegram.api_id,
        api_hash=telegram.api_hash,
        bot_token=telegram.bot_token,
        session_file=messaging.session_file,
        connection_retries=messaging.connection_retries,
        retry_delay=messaging.retry_delay,
        ignored_chats=[config.storage.chat],
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    config = get_config()

    configured_level = getattr(logging, config.logging.level.upper(), None)
    if configured_level is not None:
        logging.getLogger().setLevel(configured_level)
        logger.info("Root logger level set to %s", config.logging.level.upper())

    registry = FileRegistry()
    links = LinkBuilder(config.base_url)
    client = build_messaging_client(config)
    storage_chat = config.storage.chat if config.storage.chat is not None else MEMORY_STORAGE_CHAT

    ingestion = IngestionPipeline(client, registry, links, storage_chat)
    client.subscribe(ingestion.on_message)

    try:
        await client.start()
    except Exception:
        logger.exception("Failed to connect to the messaging service")
        raise

    set_registry(registry)
    configure_retrieval(RetrievalPipeline(client, registry, storage_chat), links)

    logger.info("Storage channel: %s", storage_chat)
    logger.info("Base URL: %s", config.base_url)
    logger.info("Bot is ready and listening for files")

    yield  # Application runs here

    # Shutdown
    await client.stop()
    configure_retrieval(None, None)
    set_registry(None)
    logger.info("Application shutdown complete")


# Create FastAPI application with metadata
app = FastAPI(
    title="FileStream API",
    description="Direct links for files sent to a Telegram bot",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(retrieval_router)


@app.get("/", response_class=HTMLResponse)
async def index() -> str:
    """Informational status page with the number of stored files."""
    registry = get_registry()
    return render_status_page(registry.size() if registry is not None else 0)


@app.get("/health")
async def health() -> dict:
    """Health check endpoint.

    Returns:
        dict: Status object indicating the server is running.
    """
    return {"status": "ok"}


def run() -> None:
    """Serve the application with uvicorn using the configured host and port."""
    config = get_config()
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    run()
