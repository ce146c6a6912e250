"""Shared fixtures: temp-file database, controllable clock, Discord fakes."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from core.config import BotConfig
from core.local.database_manager import DatabaseManager

START_MS = 1_700_000_000_000
LOG_CHANNEL_ID = 555


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)


class FakeUser:
    def __init__(self, user_id: int, name: str, *, bot: bool = False):
        self.id = user_id
        self.name = name
        self.bot = bot

    def __str__(self) -> str:
        return self.name


class FakeMember(FakeUser):
    def __init__(self, user_id: int, name: str, status, guild=None, voice_channel=None, **kwargs):
        super().__init__(user_id, name, **kwargs)
        self.status = status
        self.guild = guild
        self.voice = SimpleNamespace(channel=voice_channel) if voice_channel else None


def make_guild(channels: dict | None = None, members: list | None = None, chunked: bool = True):
    channels = channels or {}
    guild = MagicMock()
    guild.get_channel.side_effect = channels.get
    guild.members = members or []
    guild.chunked = chunked
    guild.chunk = AsyncMock()
    return guild


def make_log_channel():
    channel = MagicMock()
    channel.send = AsyncMock()
    return channel


def make_interaction(user: FakeUser):
    interaction = MagicMock()
    interaction.user = user
    interaction.response.is_done.return_value = False
    interaction.response.send_message = AsyncMock()
    interaction.followup.send = AsyncMock()
    return interaction


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest_asyncio.fixture
async def db(tmp_path):
    manager = await DatabaseManager.create(str(tmp_path / "data" / "status.db"))
    yield manager
    await manager.close()


@pytest.fixture
def store(db):
    return db.status


@pytest.fixture
def config() -> BotConfig:
    return BotConfig(token="test-token", log_channel_id=LOG_CHANNEL_ID, client_id=1234)


@pytest.fixture
def fake_bot(db, config):
    return SimpleNamespace(
        db=db,
        config=config,
        guilds=[],
        tree=MagicMock(),
        dispatch=MagicMock(),
        get_channel=MagicMock(return_value=None),
    )
