import re
from typing import Optional

from roomchat.core.errors import InvalidRequest
from roomchat.schemas.message import (
    ReadMessage,
    ReadMessageBody,
    SendMessage,
    SendMessageBody,
)

# ASCII only; re.IGNORECASE would also admit e.g. the Kelvin sign.
ALPHANUMERIC_MATCHER = re.compile(r"[0-9a-zA-Z][0-9a-zA-Z]+")


def is_alphanumeric(value: str) -> bool:
    return ALPHANUMERIC_MATCHER.fullmatch(value) is not None


def validate_send(body: Optional[SendMessageBody]) -> SendMessage:
    """
    Check a send body and return the typed request.
    Raises InvalidRequest before anything touches storage.
    """
    if body is None or not body.chat_id or not body.sender:
        raise InvalidRequest("Either chat_id or sender was not provided in the request body.")

    if body.message is None:
        raise InvalidRequest("A message was not provided in the request body.")

    if not is_alphanumeric(body.chat_id) or not is_alphanumeric(body.sender):
        raise InvalidRequest("chat_id or sender must be an alphanumeric string.")

    return SendMessage(chat_id=body.chat_id, sender=body.sender, message=body.message)


def validate_read(body: Optional[ReadMessageBody]) -> ReadMessage:
    """
    Check a read body and return the typed request.
    An empty sender is the same as no sender.
    """
    if body is None or not body.chat_id:
        raise InvalidRequest("A chat_id was not provided in the request body.")

    sender = body.sender or None
    if not is_alphanumeric(body.chat_id) or (sender and not is_alphanumeric(sender)):
        raise InvalidRequest("chat_id or sender field must be an alphanumeric string.")

    return ReadMessage(chat_id=body.chat_id, sender=sender)
