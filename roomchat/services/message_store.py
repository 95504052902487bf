from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from roomchat.models.chat import ChatRoom, ChatMessage
from roomchat.schemas.message import Message
from roomchat.core.logger import get_logger

logger = get_logger(__name__)


class MessageStore:
    """
    Room / sender / message-list addressing on top of one AsyncSession.

    A room is a row in `chat_rooms`. A sender's message list is the set of
    `messages` rows for (chat_id, sender), in id order.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def room_exists(self, chat_id: str) -> bool:
        res = await self.db.execute(
            select(ChatRoom.chat_id).where(ChatRoom.chat_id == chat_id)
        )
        return res.scalars().first() is not None

    async def ensure_room(self, chat_id: str) -> bool:
        """
        Create the room if it is absent.
        Returns True only when this call created it; losing a concurrent
        insert on the primary key counts as already existing.
        """
        if await self.room_exists(chat_id):
            return False

        self.db.add(ChatRoom(chat_id=chat_id))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info("Chat room %s was created concurrently", chat_id)
            return False

        logger.info("Created chat room %s", chat_id)
        return True

    async def append_message(self, chat_id: str, sender: str, message: Message) -> Message:
        """
        Append to the sender's list. Earlier entries are never rewritten.
        An entry identical to one already in the list (same text and
        timestamp) is merged into it instead of being stored twice.
        """
        row = ChatMessage(
            chat_id=chat_id,
            sender=sender,
            message=message.message,
            timestamp=message.timestamp,
        )
        self.db.add(row)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.debug("Message from %s in room %s already stored, merged", sender, chat_id)
            return message

        logger.debug("Persisted message id=%s room=%s sender=%s", row.id, chat_id, sender)
        return message

    async def sender_messages(self, chat_id: str, sender: str) -> Optional[List[Message]]:
        """
        Return the sender's list in this room, or None when they never sent one.
        """
        stmt = (
            select(ChatMessage)
            .where(ChatMessage.chat_id == chat_id, ChatMessage.sender == sender)
            .order_by(ChatMessage.id)
        )
        res = await self.db.execute(stmt)
        rows = res.scalars().all()
        if not rows:
            return None
        return [Message.model_validate(row) for row in rows]

    async def room_messages(self, chat_id: str) -> Dict[str, List[Message]]:
        """
        Return every sender's list in the room, keyed by sender in sender order.
        """
        stmt = (
            select(ChatMessage)
            .where(ChatMessage.chat_id == chat_id)
            .order_by(ChatMessage.sender, ChatMessage.id)
        )
        res = await self.db.execute(stmt)

        grouped: Dict[str, List[Message]] = {}
        for row in res.scalars():
            grouped.setdefault(row.sender, []).append(Message.model_validate(row))
        return grouped
