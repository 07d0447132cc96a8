"""FileStream: relay media sent to a Telegram bot and serve it over HTTP."""

__version__ = "0.1.0"
