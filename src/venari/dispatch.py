"""Routing of inbound interactions to the hunt lifecycle.

Each slash command goes through the same steps: parse the payload,
acknowledge it straight away (Discord allows three seconds), then do the
real work on a separate task and answer with exactly one follow-up message.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, assert_never

import discord

from venari.categories import CategoryRegistry, CategoryResolver
from venari.hunts import archive_hunt, create_hunt

if TYPE_CHECKING:
    from venari.config import Settings

logger = logging.getLogger(__name__)

GUILD_ONLY_MESSAGE = "This command can only be used inside a server."
FAILURE_MESSAGE = "Something went wrong while handling that command."


@dataclass(frozen=True)
class HuntInvocation:
    """``/hunt name:<text>``."""

    name: str


@dataclass(frozen=True)
class ArchiveInvocation:
    """``/archive channel:<channel>``."""

    channel_id: int


@dataclass(frozen=True)
class UnknownCommand:
    """An application command this bot does not implement."""

    name: str


@dataclass(frozen=True)
class Ignored:
    """Any interaction that is not an application command."""


Invocation = HuntInvocation | ArchiveInvocation | UnknownCommand | Ignored


def parse_invocation(interaction: discord.Interaction) -> Invocation:
    """Map a raw interaction onto one of the invocation kinds."""
    if interaction.type != discord.InteractionType.application_command:
        return Ignored()

    data = interaction.data or {}
    name = str(data.get("name", ""))
    options = {option["name"]: option.get("value") for option in data.get("options", [])}

    if name == "hunt" and options.get("name") is not None:
        return HuntInvocation(name=str(options["name"]))
    if name == "archive" and options.get("channel") is not None:
        return ArchiveInvocation(channel_id=int(options["channel"]))
    return UnknownCommand(name=name)


async def resolve_channel(guild: discord.Guild, channel_id: int) -> discord.abc.GuildChannel:
    """Look a channel up in the cache, falling back to the API."""
    channel = guild.get_channel(channel_id)
    if channel is None:
        channel = await guild.fetch_channel(channel_id)
    return channel


class Dispatcher:
    """Acknowledges command interactions and runs them as background tasks."""

    def __init__(self, settings: Settings, categories: CategoryRegistry | None = None) -> None:
        self.settings = settings
        self.categories = categories or CategoryRegistry()
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def handle(self, interaction: discord.Interaction) -> asyncio.Task[None] | None:
        """Acknowledge ``interaction`` and start processing it.

        Returns the processing task, or None when the interaction is ignored.
        """
        invocation = parse_invocation(interaction)
        if isinstance(invocation, Ignored):
            return None

        try:
            await interaction.response.defer()
        except discord.HTTPException:
            logger.exception("interaction_ack_failed interaction=%s", interaction.id)

        task = asyncio.create_task(
            self._process(interaction, invocation), name=f"interaction-{interaction.id}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for in-flight interactions to finish, giving up after ``timeout`` seconds."""
        if not self._tasks:
            return
        _, still_running = await asyncio.wait(set(self._tasks), timeout=timeout)
        if still_running:
            logger.warning("interaction_drain_timeout pending=%d", len(still_running))

    async def _process(self, interaction: discord.Interaction, invocation: Invocation) -> None:
        try:
            message = await self.run(interaction.guild, invocation)
        except discord.DiscordException:
            logger.exception(
                "interaction_failed interaction=%s invocation=%r", interaction.id, invocation
            )
            message = FAILURE_MESSAGE

        try:
            await interaction.followup.send(message)
        except discord.HTTPException:
            logger.exception("interaction_followup_failed interaction=%s", interaction.id)

    async def run(self, guild: discord.Guild | None, invocation: Invocation) -> str:
        """Execute one invocation and return the text to show the user."""
        if isinstance(invocation, Ignored):
            return ""
        if isinstance(invocation, UnknownCommand):
            return f"Unknown command: {invocation.name}"
        if guild is None:
            return GUILD_ONLY_MESSAGE

        categories = CategoryResolver(guild, self.categories)
        if isinstance(invocation, HuntInvocation):
            return await create_hunt(
                guild,
                invocation.name,
                categories,
                self.settings.discord_active_category,
            )
        if isinstance(invocation, ArchiveInvocation):
            target = await resolve_channel(guild, invocation.channel_id)
            return await archive_hunt(
                guild,
                target,
                categories,
                self.settings.discord_active_category,
                self.settings.discord_archive_category,
            )
        assert_never(invocation)
