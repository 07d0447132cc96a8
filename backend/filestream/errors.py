"""Error taxonomy shared by the ingestion and retrieval pipelines.

Every error carries a human-readable ``message`` and the HTTP ``status_code``
it maps to.  Pipelines catch these at their boundary: ingestion turns them
into chat replies, retrieval into HTTP responses.
"""


class FileStreamError(Exception):
    """Base exception for FileStream errors."""
    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class UnsupportedMediaKindError(FileStreamError):
    """Raised when an attachment is not a document, video, audio or photo."""
    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unsupported file type: {kind}", status_code=415)


class RelayFailureError(FileStreamError):
    """Raised when relaying a message into the storage conversation fails."""
    def __init__(self, message: str = "Could not store the file"):
        super().__init__(message, status_code=502)


class NotFoundError(FileStreamError):
    """Raised when a key, a stored message or its media cannot be found."""
    def __init__(self, message: str = "File not found"):
        super().__init__(message, status_code=404)


class UpstreamFailureError(FileStreamError):
    """Raised for any other error while talking to the storage conversation."""
    def __init__(self, message: str = "Error serving file"):
        super().__init__(message, status_code=500)


class DuplicateKeyError(FileStreamError):
    """Raised when a key is inserted into the registry twice."""
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Key already registered: {key}", status_code=409)
