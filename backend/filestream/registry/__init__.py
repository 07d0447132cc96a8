"""In-memory file registry for FileStream.

Maps the public key of every ingested file to a ``FileRecord`` describing
where the relayed copy lives in the storage conversation.

The registry is volatile: it starts empty when the process starts and is
discarded on shutdown. Links issued before a restart stop resolving.
"""
