from typing import Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from roomchat.core.db import Base
from roomchat.models import chat  # noqa: F401  registers the tables on Base
from roomchat.schemas.message import Message

pytest_plugins = ('pytest_asyncio',)


@pytest.fixture(autouse=True)
def suppress_logging(monkeypatch):
    """Lower logging during tests to reduce noise."""
    import logging
    logging.getLogger().setLevel(logging.WARNING)
    yield


@pytest_asyncio.fixture
async def db_session():
    """In-memory SQLite session with the chat tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def file_session_factory(tmp_path):
    """Session factory on a SQLite file, so each session gets its own connection."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'chat.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


class FakeStore:
    """In-memory stand-in for MessageStore, used by the HTTP tests."""

    def __init__(self):
        self.rooms: Dict[str, Dict[str, List[Message]]] = {}
        self.calls: List[Tuple[str, str]] = []

    async def room_exists(self, chat_id: str) -> bool:
        self.calls.append(("room_exists", chat_id))
        return chat_id in self.rooms

    async def ensure_room(self, chat_id: str) -> bool:
        self.calls.append(("ensure_room", chat_id))
        if chat_id in self.rooms:
            return False
        self.rooms[chat_id] = {}
        return True

    async def append_message(self, chat_id: str, sender: str, message: Message) -> Message:
        self.calls.append(("append_message", chat_id))
        entries = self.rooms[chat_id].setdefault(sender, [])
        if message not in entries:
            entries.append(message)
        return message

    async def sender_messages(self, chat_id: str, sender: str) -> Optional[List[Message]]:
        self.calls.append(("sender_messages", chat_id))
        messages = self.rooms[chat_id].get(sender)
        return list(messages) if messages else None

    async def room_messages(self, chat_id: str) -> Dict[str, List[Message]]:
        self.calls.append(("room_messages", chat_id))
        return {name: list(self.rooms[chat_id][name]) for name in sorted(self.rooms[chat_id])}


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def client(fake_store):
    from roomchat.main import app
    from roomchat.api.deps import get_store

    app.dependency_overrides[get_store] = lambda: fake_store
    yield TestClient(app)
    app.dependency_overrides.clear()
