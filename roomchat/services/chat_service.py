from datetime import datetime
from typing import Callable, Union

from sqlalchemy.exc import SQLAlchemyError

from roomchat.core.errors import NotFound, OperationFailed
from roomchat.core.logger import get_logger
from roomchat.schemas.message import (
    ChatLog,
    Message,
    ReadMessage,
    SenderLog,
    SenderMessages,
    SendMessage,
)
from roomchat.services.message_store import MessageStore

logger = get_logger(__name__)


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_timestamp(moment: datetime) -> str:
    """
    Human readable message timestamp, e.g. "September 14th 2021, 7:27:31 am".
    """
    hour = moment.hour % 12 or 12
    meridiem = "am" if moment.hour < 12 else "pm"
    return (
        f"{moment.strftime('%B')} {_ordinal(moment.day)} {moment.year}, "
        f"{hour}:{moment.minute:02d}:{moment.second:02d} {meridiem}"
    )


class ChatService:
    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self.clock = clock

    async def send_message(self, store: MessageStore, request: SendMessage) -> str:
        """
        Append a timestamped message to the sender's list in the room,
        creating the room first if needed.
        Returns the confirmation text for the client.
        """
        chat_id = request.chat_id
        try:
            await store.ensure_room(chat_id)

            new_message = Message(
                message=request.message,
                timestamp=format_timestamp(self.clock()),
            )
            await store.append_message(chat_id, request.sender, new_message)
        except SQLAlchemyError as e:
            raise OperationFailed(chat_id, "send a message to", e) from e

        logger.info("Successfully sent chat message to room %s: %s", chat_id, request.message)
        return f"Chat message from {request.sender} sent successfully to room {chat_id}."

    async def read_messages(
        self,
        store: MessageStore,
        request: ReadMessage,
    ) -> Union[SenderMessages, ChatLog]:
        """
        Fetch one sender's messages, or the whole room grouped by sender.

        - Missing room -> NotFound (error)
        - Sender with no messages -> NotFound (message)
        """
        chat_id = request.chat_id
        sender = request.sender
        try:
            if not await store.room_exists(chat_id):
                raise NotFound("You specified an invalid chat_id. This chat room does not exist.")

            if sender:
                sender_list = await store.sender_messages(chat_id, sender)
                if sender_list is None:
                    raise NotFound(
                        f"There are no messages from {sender} in chat room {chat_id}.",
                        body_key="message",
                    )
                logger.info(
                    "Successfully found %s chat messages from %s to room %s.",
                    len(sender_list), sender, chat_id,
                )
                return SenderMessages(sender=sender, messages=[sender_list])

            grouped = await store.room_messages(chat_id)
        except SQLAlchemyError as e:
            raise OperationFailed(chat_id, "read messages from", e) from e

        chat_log = [
            SenderLog(sender=name, messages=messages)
            for name, messages in grouped.items()
        ]
        logger.info(
            "Successfully found %s total chat messages to room %s.",
            sum(len(entry.messages) for entry in chat_log), chat_id,
        )
        return ChatLog(chat_log=chat_log)
