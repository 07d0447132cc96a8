"""Chat replies sent by the bot (Telegram HTML parse mode)."""
import html

from filestream.errors import FileStreamError
from filestream.links.presentation import LinkBuilder, format_bytes
from filestream.registry.schemas import FileRecord, MediaKind

PROCESSING_TEXT = "⏳ Processing file..."
UNSUPPORTED_TEXT = "❌ Unsupported file type"
GENERIC_ERROR_TEXT = "❌ Error: Something went wrong while processing your file"

_KIND_EMOJI = {
    MediaKind.VIDEO: "🎬",
    MediaKind.AUDIO: "🎵",
    MediaKind.PHOTO: "🖼️",
    MediaKind.DOCUMENT: "📁",
}


def welcome_text(file_count: int) -> str:
    return (
        "🚀 <b>FileStream Bot</b>\n\n"
        "Send me any file and get a direct download link!\n\n"
        "<b>✨ Supported:</b>\n"
        "📁 Documents\n"
        "🎬 Videos\n"
        "🎵 Audio\n"
        "🖼️ Photos\n\n"
        "<b>📊 Stats:</b>\n"
        f"Files stored: {file_count}\n\n"
        "Just send a file to get started! 🎯"
    )


def summary_text(record: FileRecord, links: LinkBuilder) -> str:
    """Summary of a processed file: name, size, key and links."""
    lines = [
        "✅ <b>File Processed!</b>",
        "",
        f"{_KIND_EMOJI[record.media_kind]} <b>Name:</b> <code>{html.escape(record.file_name)}</code>",
        f"📊 <b>Size:</b> {format_bytes(record.file_size or 0)}",
        f"🔑 <b>Key:</b> <code>{record.key}</code>",
        "",
        "<b>🔗 Direct Download Link:</b>",
        f"<code>{links.direct_link(record.key)}</code>",
        "",
    ]
    if record.media_kind.playable:
        lines += [
            "<b>📺 Watch/Listen Online:</b>",
            f"<code>{links.watch_link(record.key)}</code>",
            "",
        ]
    lines.append("📝 <i>Link will work as long as file exists in storage channel</i>")
    return "\n".join(lines)


def error_text(exc: Exception) -> str:
    """User-facing error; internal details stay in the logs."""
    if isinstance(exc, FileStreamError):
        return f"❌ Error: {html.escape(exc.message)}"
    return GENERIC_ERROR_TEXT
