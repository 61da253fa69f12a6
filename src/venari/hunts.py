"""Hunt lifecycle: creating a hunt's channels and role, and archiving them.

A hunt is three Discord objects tied together only by name: a text channel
and a voice channel called ``<slug>`` and a role called ``hunt-<slug>``.
While active they sit in the Active category and only the role can see the
channels. Archiving moves the text channel into the Archive category and
removes the voice channel and the role.

Neither operation rolls back. An HTTP error part way through leaves
whatever was already done in place and propagates to the caller.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import discord

from venari.naming import archived_name, normalize, role_name_for

if TYPE_CHECKING:
    from venari.categories import CategoryResolver

logger = logging.getLogger(__name__)

# Hunt role grants on its channels; @everyone is denied everything.
TEXT_PERMISSIONS = discord.Permissions.text() | discord.Permissions(view_channel=True)
VOICE_PERMISSIONS = discord.Permissions.voice() | discord.Permissions(view_channel=True)

NOT_ACTIVE_MESSAGE = "That channel doesn't seem to be an active hunt channel. Do better."
ARCHIVED_MESSAGE = "Hunt archived"


def hunt_overwrites(
    guild: discord.Guild,
    role: discord.Role,
    allow: discord.Permissions,
) -> dict[discord.Role, discord.PermissionOverwrite]:
    """Channel overwrites: ``allow`` for the hunt role, deny-all for @everyone."""
    return {
        role: discord.PermissionOverwrite.from_pair(allow, discord.Permissions.none()),
        guild.default_role: discord.PermissionOverwrite.from_pair(
            discord.Permissions.none(), discord.Permissions.all()
        ),
    }


async def create_hunt(
    guild: discord.Guild,
    raw_name: str,
    categories: CategoryResolver,
    active_category: str,
) -> str:
    """Create the role, text channel and voice channel for a new hunt.

    No check is made for an existing hunt with the same slug; running it
    twice produces a second role and a second pair of channels.
    """
    slug = normalize(raw_name)
    role_name = role_name_for(slug)

    active = await categories.resolve(active_category)

    role = await guild.create_role(name=role_name)
    logger.info("hunt_role_created role=%s guild=%d", role_name, guild.id)

    await guild.create_text_channel(
        slug,
        category=active,
        overwrites=hunt_overwrites(guild, role, TEXT_PERMISSIONS),
    )
    await guild.create_voice_channel(
        slug,
        category=active,
        overwrites=hunt_overwrites(guild, role, VOICE_PERMISSIONS),
    )
    logger.info("hunt_created slug=%s guild=%d", slug, guild.id)

    return f"Hunt created: {slug}"


async def archive_hunt(
    guild: discord.Guild,
    target: discord.abc.GuildChannel,
    categories: CategoryResolver,
    active_category: str,
    archive_category: str,
    now: datetime | None = None,
) -> str:
    """Archive the hunt that ``target`` belongs to.

    Refuses, without touching anything, unless ``target`` is in the Active
    category. Channels sharing the target's name that sit in the Archive
    category are then cleaned up: voice channels are deleted, text channels
    get a ``YYYY-MM-`` prefix and take on the Archive category's permissions.
    Finally every role named ``hunt-<target name>`` is deleted.
    """
    logger.info("archive_requested channel=%s guild=%d", target.name, guild.id)
    now = now or datetime.now(UTC)

    active = await categories.resolve(active_category)
    archive = await categories.resolve(archive_category)

    if target.category_id != active.id:
        logger.info("archive_rejected channel=%s category_id=%s", target.name, target.category_id)
        return NOT_ACTIVE_MESSAGE

    for channel in await guild.fetch_channels():
        if channel.name != target.name or channel.category_id != archive.id:
            continue
        if isinstance(channel, discord.VoiceChannel):
            logger.info("archive_deleting_voice_channel channel=%s", channel.name)
            await channel.delete()
        elif isinstance(channel, discord.TextChannel):
            logger.info("archive_moving_text_channel channel=%s", channel.name)
            await channel.edit(
                name=archived_name(channel.name, now),
                category=archive,
                overwrites=archive.overwrites,
            )

    role_name = role_name_for(target.name)
    for role in await guild.fetch_roles():
        if role.name == role_name:
            logger.info("archive_deleting_role role=%s", role.name)
            await role.delete()

    return ARCHIVED_MESSAGE
