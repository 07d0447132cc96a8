"""Link composition and the HTML pages served alongside downloads."""
from .presentation import LinkBuilder, format_bytes, render_status_page, render_watch_page

__all__ = ["LinkBuilder", "format_bytes", "render_status_page", "render_watch_page"]
