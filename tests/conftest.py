"""Shared test fixtures.

All Discord objects are mocked; no real Discord connection is required.
"""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from venari.categories import CategoryRegistry, CategoryResolver
from venari.config import Settings

GUILD_ID = 987654321


def _http_error(status: int = 500, message: str = "boom") -> discord.HTTPException:
    response = MagicMock(status=status, reason="Error")
    return discord.HTTPException(response, message)


def _make_category(name: str, category_id: int) -> MagicMock:
    category = MagicMock(spec=discord.CategoryChannel)
    category.name = name
    category.id = category_id
    category.overwrites = {MagicMock(spec=discord.Role): discord.PermissionOverwrite()}
    return category


def _make_channel(
    kind: type[discord.abc.GuildChannel],
    name: str,
    category_id: int | None,
    channel_id: int = 0,
) -> MagicMock:
    channel = MagicMock(spec=kind)
    channel.name = name
    channel.id = channel_id
    channel.category_id = category_id
    channel.delete = AsyncMock()
    channel.edit = AsyncMock()
    return channel


def _make_role(name: str, role_id: int = 0) -> MagicMock:
    role = MagicMock(spec=discord.Role)
    role.name = name
    role.id = role_id
    role.delete = AsyncMock()
    return role


@pytest.fixture
def http_error() -> Callable[..., discord.HTTPException]:
    """Factory for discord.HTTPException without a real aiohttp response."""
    return _http_error


@pytest.fixture
def make_category() -> Callable[..., MagicMock]:
    return _make_category


@pytest.fixture
def make_channel() -> Callable[..., MagicMock]:
    return _make_channel


@pytest.fixture
def make_role() -> Callable[..., MagicMock]:
    return _make_role


@pytest.fixture
def settings() -> Settings:
    """Test settings with defaults."""
    return Settings(discord_token="test-token-not-real")


@pytest.fixture
def active() -> MagicMock:
    return _make_category("Active hunts", 100)


@pytest.fixture
def archive() -> MagicMock:
    return _make_category("Archived hunts", 200)


@pytest.fixture
def guild(active: MagicMock, archive: MagicMock) -> MagicMock:
    """A guild that already has both hunt categories."""
    guild = MagicMock(spec=discord.Guild)
    guild.id = GUILD_ID
    guild.categories = [active, archive]
    guild.default_role = _make_role("@everyone", GUILD_ID)
    guild.create_category = AsyncMock()
    guild.create_role = AsyncMock(side_effect=lambda name: _make_role(name, 500))
    guild.create_text_channel = AsyncMock()
    guild.create_voice_channel = AsyncMock()
    guild.fetch_channels = AsyncMock(return_value=[])
    guild.fetch_roles = AsyncMock(return_value=[])
    return guild


@pytest.fixture
def resolver(guild: MagicMock) -> CategoryResolver:
    return CategoryResolver(guild, CategoryRegistry())
