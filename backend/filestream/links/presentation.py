"""Direct/watch links and the HTML pages for FileStream.

Links embed the key as a single path segment under the configured base URL:

    {base}/file/{key}    streams the raw bytes
    {base}/watch/{key}   player page wrapping the direct link
"""
import html

from filestream.registry.codec import generate_key, split_key
from filestream.registry.schemas import FileRecord, MediaKind

_SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def format_bytes(size: int) -> str:
    """Human-readable size using 1024-based units, e.g. ``1.5 MB``."""
    if not size:
        return "0 B"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[unit]}"


class LinkBuilder:
    """Composes public links for registered keys.

    Args:
        base_url: Public base URL of the HTTP service; trailing slashes are ignored.
    """

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")

    def direct_link(self, key: str) -> str:
        return f"{self.base_url}/file/{key}"

    def watch_link(self, key: str) -> str:
        return f"{self.base_url}/watch/{key}"


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------

_WATCH_STYLE = """
    body { margin: 0; background: #000; display: flex; align-items: center;
           justify-content: center; min-height: 100vh; font-family: Arial, sans-serif; }
    video, audio { max-width: 100%; max-height: 100vh; }
    .container { text-align: center; color: white; }
    a { color: #60a5fa; text-decoration: none; margin-top: 20px; display: inline-block; }
"""

_STATUS_STYLE = """
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body { font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
           background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
           min-height: 100vh; display: flex; align-items: center;
           justify-content: center; color: white; }
    .container { background: rgba(255, 255, 255, 0.1); padding: 50px; border-radius: 20px;
                 text-align: center; max-width: 600px; }
    .status { background: #10b981; padding: 12px 25px; border-radius: 50px;
              display: inline-block; margin: 20px 0; font-weight: bold; }
    h1 { font-size: 2.5em; margin-bottom: 20px; }
    p { font-size: 1.2em; margin: 10px 0; opacity: 0.9; }
    .info { margin-top: 30px; padding: 20px; background: rgba(0,0,0,0.2); border-radius: 10px; }
"""


def render_watch_page(record: FileRecord, links: LinkBuilder) -> str:
    """Render the player page for ``record``.

    The direct link is rebuilt from the key through the codec round trip,
    which also rejects keys the codec could not have produced.
    """
    _, remote_file_id = split_key(record.key)
    direct_link = html.escape(links.direct_link(generate_key(remote_file_id)), quote=True)
    name = html.escape(record.file_name)

    if record.media_kind == MediaKind.VIDEO:
        player = f'<video controls src="{direct_link}"></video>'
    elif record.media_kind == MediaKind.AUDIO:
        player = f'<audio controls src="{direct_link}"></audio>'
    else:
        player = "<p>Preview not available</p>"

    return f"""<!DOCTYPE html>
<html>
<head>
  <title>{name}</title>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <style>{_WATCH_STYLE}</style>
</head>
<body>
  <div class="container">
    {player}
    <br>
    <a href="{direct_link}" download>⬇️ Download {name}</a>
  </div>
</body>
</html>
"""


def render_status_page(file_count: int) -> str:
    """Render the informational landing page."""
    return f"""<!DOCTYPE html>
<html>
<head>
  <title>FileStream Bot</title>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <style>{_STATUS_STYLE}</style>
</head>
<body>
  <div class="container">
    <h1>🚀 FileStream Bot</h1>
    <div class="status">✅ Server Online</div>
    <p>Telegram File Streaming Service</p>
    <div class="info">
      <p><strong>Total Files:</strong> {file_count}</p>
      <p><small>Send files to the bot to get direct links</small></p>
    </div>
  </div>
</body>
</html>
"""
