from typing import Optional, Union

from fastapi import APIRouter, Body, Depends, Query

from roomchat.api.deps import get_store
from roomchat.schemas.message import (
    ChatLog,
    ReadMessageBody,
    SenderMessages,
    SendMessageBody,
    SendResult,
)
from roomchat.services.chat_service import ChatService
from roomchat.services.message_store import MessageStore
from roomchat.services.validator import validate_read, validate_send


class MessageRouter:
    """
    APIRouter for sending and reading chat room messages.
    """

    def __init__(self, service: Optional[ChatService] = None) -> None:
        self.router = APIRouter(
            prefix="/message",
            tags=["message"],
        )
        self.service = service or ChatService()
        self._register_routes()

    def _register_routes(self) -> None:
        self.router.post("/send", response_model=SendResult)(self.send_message)
        self.router.get(
            "/read",
            response_model=Union[SenderMessages, ChatLog],
        )(self.read_message)

    async def send_message(
        self,
        body: Optional[SendMessageBody] = Body(default=None),
        store: MessageStore = Depends(get_store),
    ):
        """
        Append a message from `sender` to the chat room `chat_id`.
        """
        request = validate_send(body)
        text = await self.service.send_message(store, request)
        return SendResult(message=text)

    async def read_message(
        self,
        body: Optional[ReadMessageBody] = Body(default=None),
        chat_id: Optional[str] = Query(default=None),
        sender: Optional[str] = Query(default=None),
        store: MessageStore = Depends(get_store),
    ):
        """
        Read one sender's messages, or the full chat log of the room.
        The JSON body is preferred; query parameters are accepted for
        clients that cannot send a body with GET.
        """
        if body is None and chat_id is not None:
            body = ReadMessageBody(chat_id=chat_id, sender=sender)

        request = validate_read(body)
        return await self.service.read_messages(store, request)
