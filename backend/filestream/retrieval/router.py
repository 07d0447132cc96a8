"""HTTP endpoints for file retrieval.

Endpoints:
    GET /file/{key}   — Raw bytes of a registered file
    GET /watch/{key}  — Player page wrapping the direct link
"""
import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from filestream.errors import NotFoundError, UpstreamFailureError
from filestream.links.presentation import LinkBuilder, render_watch_page
from filestream.registry.schemas import DEFAULT_MIME_TYPE

from .service import RetrievalPipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])

# ---------------------------------------------------------------------------
# Singleton pipeline management
# ---------------------------------------------------------------------------

_pipeline: Optional[RetrievalPipeline] = None
_links: Optional[LinkBuilder] = None


def get_pipeline() -> Optional[RetrievalPipeline]:
    """Return the global RetrievalPipeline, or None if not configured."""
    return _pipeline


def configure(pipeline: Optional[RetrievalPipeline], links: Optional[LinkBuilder]) -> None:
    """Set (or clear) the global RetrievalPipeline and LinkBuilder."""
    global _pipeline, _links
    _pipeline = pipeline
    _links = links


def content_disposition(file_name: str) -> str:
    """``attachment`` header value.

    Non-ASCII names get an ASCII ``filename`` fallback (other characters
    replaced by ``_``) followed by the RFC 5987 ``filename*`` parameter.
    """
    fallback = "".join(ch if ch.isascii() else "_" for ch in file_name)
    escaped = fallback.replace("\\", "\\\\").replace('"', '\\"').replace("\r", " ").replace("\n", " ")
    value = f'attachment; filename="{escaped}"'
    if not file_name.isascii():
        value += f"; filename*=utf-8''{quote(file_name)}"
    return value


def _not_configured() -> PlainTextResponse:
    logger.warning("[retrieval] Pipeline not configured — returning 503")
    return PlainTextResponse("Service not ready", status_code=503)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/file/{key}")
async def download_file(key: str) -> Response:
    """Stream the bytes of a registered file as an attachment.

    Returns 404 when the key is unknown or the stored copy is gone, and a
    generic 500 for any other upstream error.
    """
    pipeline = get_pipeline()
    if pipeline is None:
        return _not_configured()

    try:
        retrieved = await pipeline.fetch(key)
    except NotFoundError as exc:
        logger.info("[retrieval] %s: %s", key, exc.message)
        return PlainTextResponse(exc.message, status_code=404)
    except UpstreamFailureError as exc:
        logger.error("[retrieval] Error serving %s: %r", key, exc.__cause__, exc_info=exc)
        return PlainTextResponse(exc.message, status_code=500)

    record = retrieved.record
    return Response(
        content=retrieved.content,
        media_type=record.mime_type or DEFAULT_MIME_TYPE,
        headers={"Content-Disposition": content_disposition(record.file_name)},
    )


@router.get("/watch/{key}", response_class=HTMLResponse)
async def watch_file(key: str) -> Response:
    """Render the player page for a registered file."""
    pipeline = get_pipeline()
    if pipeline is None or _links is None:
        return _not_configured()

    try:
        record = pipeline.lookup(key)
        page = render_watch_page(record, _links)
    except NotFoundError as exc:
        return PlainTextResponse(exc.message, status_code=404)
    except ValueError:
        logger.exception("[retrieval] Cannot render watch page for %s", key)
        return PlainTextResponse("Error loading file", status_code=500)

    return HTMLResponse(page)
