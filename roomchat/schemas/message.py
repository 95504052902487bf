from typing import List, Optional

from pydantic import BaseModel, Field


class SendMessageBody(BaseModel):
    """Raw body of POST /message/send, before validation."""
    chat_id: Optional[str] = None
    sender: Optional[str] = None
    message: Optional[str] = None

    class Config:
        extra = "forbid"


class ReadMessageBody(BaseModel):
    """Raw body of GET /message/read, before validation."""
    chat_id: Optional[str] = None
    sender: Optional[str] = None

    class Config:
        extra = "forbid"


class SendMessage(BaseModel):
    """A validated send request."""
    chat_id: str
    sender: str
    message: str


class ReadMessage(BaseModel):
    """A validated read request; no sender means the whole room."""
    chat_id: str
    sender: Optional[str] = None


class Message(BaseModel):
    """A single chat message as stored and returned."""
    message: str
    timestamp: str

    class Config:
        from_attributes = True


class SendResult(BaseModel):
    message: str


class SenderMessages(BaseModel):
    """One sender's list, nested once inside `messages`."""
    sender: str
    messages: List[List[Message]]


class SenderLog(BaseModel):
    sender: str
    messages: List[Message]


class ChatLog(BaseModel):
    chat_log: List[SenderLog] = Field(alias="chatLog")

    class Config:
        populate_by_name = True
