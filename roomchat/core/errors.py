from typing import Any, Dict

from fastapi import status


class ChatError(Exception):
    """Base error for the message endpoints, rendered as a JSON body."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    body_key = "error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def to_body(self) -> Dict[str, Any]:
        return {self.body_key: self.detail}


class InvalidRequest(ChatError):
    """Missing or malformed request fields."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(ChatError):
    """A chat room, or a sender's messages inside it, does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, detail: str, body_key: str = "error") -> None:
        super().__init__(detail)
        self.body_key = body_key


class OperationFailed(ChatError):
    """A storage call failed for the given chat room."""

    def __init__(self, chat_id: str, action: str, cause: Exception) -> None:
        super().__init__(f'Failed to {action} chat room "{chat_id}": {cause}')
        self.chat_id = chat_id

    def to_body(self) -> Dict[str, Any]:
        return {"message": "Error encountered", "error": self.detail}
