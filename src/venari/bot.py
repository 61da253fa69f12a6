"""Discord client for Venari.

Syncs the slash command catalog on login, then hands every interaction to
the dispatcher. Guild structure (channels, roles) is read from the client's
gateway cache, which the default intents keep populated.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from venari.categories import CategoryRegistry
from venari.commands import CATALOG, CommandDescriptor, RemoteCommands, sync_commands
from venari.dispatch import Dispatcher

if TYPE_CHECKING:
    from venari.config import Settings

logger = logging.getLogger(__name__)

# How long close() waits for in-flight interactions before disconnecting.
SHUTDOWN_DRAIN_SECONDS = 10.0


class VenariBot(discord.Client):
    """The hunt management bot."""

    def __init__(
        self,
        settings: Settings,
        catalog: tuple[CommandDescriptor, ...] = CATALOG,
    ) -> None:
        super().__init__(intents=discord.Intents.default())
        self.settings = settings
        self.catalog = catalog
        self.categories = CategoryRegistry()
        self.dispatcher = Dispatcher(settings, self.categories)

    def remote_commands(self) -> RemoteCommands:
        if self.application_id is None:
            raise RuntimeError("application_id is unknown; setup_hook runs after login")
        return RemoteCommands(self.http, self.application_id, self.settings.test_guild_id)

    async def setup_hook(self) -> None:
        """Called after login, before the gateway connects. Syncs slash commands.

        A failure here propagates out of ``start()`` and stops the process.
        """
        remote = self.remote_commands()
        updated = await sync_commands(remote, self.catalog)
        logger.info("discord_commands_synced scope=%s updated=%s", remote.scope, updated)

    async def on_ready(self) -> None:
        """Fires on every (re)connect."""
        user = self.user
        logger.info(
            "discord_bot_ready user=%s guilds=%d",
            user.name if user else "unknown",
            len(self.guilds),
        )

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        await self.dispatcher.handle(interaction)

    async def on_guild_channel_delete(self, channel: discord.abc.GuildChannel) -> None:
        if isinstance(channel, discord.CategoryChannel):
            self.categories.forget(channel)

    async def on_guild_channel_update(
        self, before: discord.abc.GuildChannel, after: discord.abc.GuildChannel
    ) -> None:
        if isinstance(after, discord.CategoryChannel) and before.name != after.name:
            logger.info("category_renamed before=%s after=%s", before.name, after.name)
            self.categories.forget(after)

    async def close(self) -> None:
        """Let in-flight interactions answer, then disconnect."""
        if self.dispatcher.pending:
            logger.info("discord_bot_draining pending=%d", self.dispatcher.pending)
            await self.dispatcher.drain(timeout=SHUTDOWN_DRAIN_SECONDS)
        await super().close()
