"""Ingestion of files sent to the bot.

Each inbound attachment is classified, relayed into the storage
conversation, registered under its key and answered with links.
"""
