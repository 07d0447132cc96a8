"""Tests for link composition, pages and chat replies."""
import pytest

from filestream.errors import RelayFailureError
from filestream.ingest.replies import GENERIC_ERROR_TEXT, error_text, summary_text, welcome_text
from filestream.links.presentation import LinkBuilder, format_bytes, render_status_page, render_watch_page
from filestream.registry.codec import generate_key
from filestream.registry.schemas import FileRecord, MediaKind


def _record(kind=MediaKind.VIDEO, name="clip.mp4", size=1536) -> FileRecord:
    return FileRecord(
        key=generate_key(5374720841938813007),
        remote_location_id=12,
        remote_file_id="5374720841938813007",
        file_name=name,
        file_size=size,
        media_kind=kind,
    )


class TestLinkBuilder:
    def test_links_embed_key(self):
        links = LinkBuilder("https://files.example.com")
        assert links.direct_link("abc") == "https://files.example.com/file/abc"
        assert links.watch_link("abc") == "https://files.example.com/watch/abc"

    def test_trailing_slash_ignored(self):
        links = LinkBuilder("https://files.example.com//")
        assert links.direct_link("abc") == "https://files.example.com/file/abc"


class TestFormatBytes:
    @pytest.mark.parametrize("size, expected", [
        (0, "0 B"),
        (None, "0 B"),
        (1, "1 B"),
        (1023, "1023 B"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1234567, "1.18 MB"),
        (5 * 1024 ** 3, "5 GB"),
    ])
    def test_sizes(self, size, expected):
        assert format_bytes(size) == expected


class TestPages:
    def test_watch_page_escapes_file_name(self):
        page = render_watch_page(_record(name="<script>x</script>.mp4"), LinkBuilder("http://h"))
        assert "<script>x</script>" not in page
        assert "&lt;script&gt;" in page

    def test_watch_page_rejects_forged_key(self):
        forged = _record().model_copy(update={"key": "0000001234567"})
        with pytest.raises(ValueError):
            render_watch_page(forged, LinkBuilder("http://h"))

    def test_photo_has_no_player(self):
        page = render_watch_page(_record(kind=MediaKind.PHOTO, name="p.jpg"), LinkBuilder("http://h"))
        assert "<video" not in page
        assert "<audio" not in page
        assert "Preview not available" in page

    def test_status_page_shows_count(self):
        assert "<strong>Total Files:</strong> 7" in render_status_page(7)


class TestReplies:
    def test_summary_for_video(self):
        record = _record()
        text = summary_text(record, LinkBuilder("http://h"))

        assert "🎬" in text
        assert "<code>clip.mp4</code>" in text
        assert "1.5 KB" in text
        assert f"<code>{record.key}</code>" in text
        assert f"http://h/file/{record.key}" in text
        assert f"http://h/watch/{record.key}" in text

    def test_summary_for_photo_has_no_watch_link(self):
        record = _record(kind=MediaKind.PHOTO, name="photo_1.jpg")
        text = summary_text(record, LinkBuilder("http://h"))

        assert "🖼️" in text
        assert "/watch/" not in text

    def test_summary_escapes_name(self):
        text = summary_text(_record(name="a<b>.mp4"), LinkBuilder("http://h"))
        assert "a&lt;b&gt;.mp4" in text

    def test_welcome_mentions_count(self):
        assert "Files stored: 3" in welcome_text(3)

    def test_error_text(self):
        assert error_text(RelayFailureError()) == "❌ Error: Could not store the file"
        assert error_text(KeyError("secret")) == GENERIC_ERROR_TEXT
