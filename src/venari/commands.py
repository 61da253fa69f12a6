"""Slash command catalog and registration.

The catalog is plain data. At startup it is diffed against what Discord
already has registered and only new or changed commands are upserted, so a
restart with an unchanged catalog makes no registration calls at all.

Commands that exist remotely but not in the catalog are left alone: other
deployments sharing a guild may own them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from discord import AppCommandOptionType, AppCommandType
from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from collections.abc import Iterable

    from discord.http import HTTPClient

logger = logging.getLogger(__name__)


class CommandOption(BaseModel):
    """One typed parameter of a slash command."""

    type: int
    name: str
    description: str
    required: bool = False

    model_config = ConfigDict(frozen=True, extra="ignore")


class CommandDescriptor(BaseModel):
    """A slash command definition, local or as reported by Discord.

    Discord returns extra fields (ids, versions, localizations); they are
    dropped on validation so two descriptors compare on definition only.
    """

    name: str
    description: str
    options: tuple[CommandOption, ...] = ()

    model_config = ConfigDict(frozen=True, extra="ignore")

    def matches(self, other: CommandDescriptor) -> bool:
        """True if registering ``self`` over ``other`` would change nothing."""
        return self.description == other.description and self.options == other.options

    def to_payload(self) -> dict[str, Any]:
        payload = self.model_dump(mode="json")
        payload["type"] = AppCommandType.chat_input.value
        return payload


CATALOG: tuple[CommandDescriptor, ...] = (
    CommandDescriptor(
        name="hunt",
        description="Create a new hunt with the given name",
        options=(
            CommandOption(
                type=AppCommandOptionType.string.value,
                name="name",
                description="Name of the puzzle hunt",
                required=True,
            ),
        ),
    ),
    CommandDescriptor(
        name="archive",
        description="Archives a hunt",
        options=(
            CommandOption(
                type=AppCommandOptionType.channel.value,
                name="channel",
                description="Channel to be archived",
                required=True,
            ),
        ),
    ),
)


class RemoteCommands:
    """Registered commands for one scope: a single guild, or global when ``guild_id`` is None."""

    def __init__(self, http: HTTPClient, application_id: int, guild_id: int | None = None) -> None:
        self.http = http
        self.application_id = application_id
        self.guild_id = guild_id

    @property
    def scope(self) -> str:
        return str(self.guild_id) if self.guild_id is not None else "global"

    async def fetch(self) -> list[CommandDescriptor]:
        if self.guild_id is None:
            raw = await self.http.get_global_commands(self.application_id)
        else:
            raw = await self.http.get_guild_commands(self.application_id, self.guild_id)
        return [CommandDescriptor.model_validate(command) for command in raw]

    async def upsert(self, descriptor: CommandDescriptor) -> None:
        """Create or overwrite a command; Discord keys the upsert by name."""
        payload = descriptor.to_payload()
        if self.guild_id is None:
            await self.http.upsert_global_command(self.application_id, payload)
        else:
            await self.http.upsert_guild_command(self.application_id, self.guild_id, payload)


async def sync_commands(
    remote: RemoteCommands,
    catalog: Iterable[CommandDescriptor] = CATALOG,
) -> list[str]:
    """Register every catalog command that is missing or differs remotely.

    Returns the names that were registered. Errors propagate: a bot whose
    commands failed to register should not come up.
    """
    existing = {command.name: command for command in await remote.fetch()}
    updated: list[str] = []
    unchanged = 0

    for descriptor in catalog:
        current = existing.get(descriptor.name)
        if current is not None and descriptor.matches(current):
            unchanged += 1
            continue
        logger.info("command_sync_update name=%s scope=%s", descriptor.name, remote.scope)
        await remote.upsert(descriptor)
        updated.append(descriptor.name)

    logger.info(
        "command_sync_complete scope=%s updated=%d unchanged=%d",
        remote.scope,
        len(updated),
        unchanged,
    )
    return updated
