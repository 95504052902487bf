from datetime import datetime
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    Text,
    Index,
)

from roomchat.core.db import Base


class ChatRoom(Base):
    __tablename__ = "chat_rooms"

    chat_id = Column(String(255), primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class ChatMessage(Base):
    """
    One entry of a sender's message list inside a room.
    The list order is the insertion (id) order.
    """

    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    chat_id = Column(
        String(255),
        ForeignKey("chat_rooms.chat_id", ondelete="CASCADE"),
        nullable=False,
    )
    sender = Column(String(255), nullable=False)

    message = Column(Text, nullable=False)
    timestamp = Column(String(64), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


Index("idx_messages_chat_sender_id", ChatMessage.chat_id, ChatMessage.sender, ChatMessage.id)
# Exact (message, timestamp) repeats from one sender collapse into one entry
Index(
    "uq_messages_chat_sender_entry",
    ChatMessage.chat_id,
    ChatMessage.sender,
    ChatMessage.message,
    ChatMessage.timestamp,
    unique=True,
)
