"""Exceptions raised by loanbot."""


class LoanbotError(Exception):
    """Base exception for loanbot."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.message = message
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
        }


class DataFileError(LoanbotError):
    """A static table file is missing or malformed."""

    def __init__(self, message: str, path: str | None = None, cause: Exception | None = None):
        super().__init__(message, cause)
        self.path = path

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["path"] = self.path
        return result


class SessionNotFoundError(LoanbotError):
    """No chat session with that id belongs to the user."""

    def __init__(self, session_id: str, user_id=None):
        super().__init__(f"Chat session not found: {session_id}")
        self.session_id = session_id
        self.user_id = user_id

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["sessionId"] = self.session_id
        return result
