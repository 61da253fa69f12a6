"""Find-or-create for the Active and Archive hunt categories."""

from __future__ import annotations

import asyncio
import logging

import discord

logger = logging.getLogger(__name__)


class CategoryRegistry:
    """Process-wide bookkeeping shared by every resolver.

    Holds one lock per (guild, category name) so concurrent interactions
    cannot both decide a category is missing and create it twice, and
    remembers categories created here until the gateway cache catches up.
    """

    def __init__(self) -> None:
        self._locks: dict[tuple[int, str], asyncio.Lock] = {}
        self._created: dict[tuple[int, str], discord.CategoryChannel] = {}

    def lock(self, guild_id: int, name: str) -> asyncio.Lock:
        return self._locks.setdefault((guild_id, name), asyncio.Lock())

    def created(self, guild_id: int, name: str) -> discord.CategoryChannel | None:
        return self._created.get((guild_id, name))

    def remember(self, guild_id: int, name: str, category: discord.CategoryChannel) -> None:
        self._created[(guild_id, name)] = category

    def discard(self, guild_id: int, name: str) -> None:
        self._created.pop((guild_id, name), None)

    def forget(self, channel: discord.abc.GuildChannel) -> None:
        """Drop a category that was deleted or renamed on the Discord side."""
        stale = [key for key, category in self._created.items() if category.id == channel.id]
        for key in stale:
            del self._created[key]


class CategoryResolver:
    """Resolves category names within one guild for the span of one interaction.

    Lookups read the guild's cached channel list; a miss creates the category
    at the top level. Each name is resolved at most once per resolver.
    HTTP errors propagate to the caller.
    """

    def __init__(self, guild: discord.Guild, registry: CategoryRegistry) -> None:
        self.guild = guild
        self.registry = registry
        self._resolved: dict[str, discord.CategoryChannel] = {}

    async def resolve(self, name: str) -> discord.CategoryChannel:
        if name in self._resolved:
            return self._resolved[name]

        async with self.registry.lock(self.guild.id, name):
            category = discord.utils.get(self.guild.categories, name=name)
            if category is not None:
                # The gateway cache has caught up.
                self.registry.discard(self.guild.id, name)
            else:
                category = self.registry.created(self.guild.id, name)
            if category is None:
                category = await self.guild.create_category(name)
                self.registry.remember(self.guild.id, name, category)
                logger.info(
                    "category_created name=%s id=%d guild=%d", name, category.id, self.guild.id
                )

        self._resolved[name] = category
        return category
