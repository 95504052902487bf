from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from roomchat.core.db import get_db
from roomchat.services.message_store import MessageStore


async def get_store(db: AsyncSession = Depends(get_db)) -> MessageStore:
    """
    Message store bound to the request's DB session.
    """
    return MessageStore(db)
