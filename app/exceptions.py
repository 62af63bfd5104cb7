"""
Errors raised by the record store, the ownership guard and the conversation service.
Routers map them to HTTP status codes (see app.main).
"""


class ChatCoreError(Exception):
    """Base class for chat persistence errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ChatCoreError):
    """Malformed input (empty id, title out of bounds, empty content). Store untouched."""


class NotAuthorized(ChatCoreError):
    """Conversation missing or not owned by the requester. Both cases look the same."""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class StoreUnavailable(ChatCoreError):
    """Backing store unreachable on a write path that needs the created row."""

    def __init__(self, message: str = "Database not available"):
        super().__init__(message)
