"""Reusable guard functions for Discord slash commands.

These are free functions that accept explicit dependencies rather than relying
on a specific cog instance, making them usable from any cog.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import discord

from discord_jukebox.domain.shared.messages import DiscordUIMessages

if TYPE_CHECKING:
    from ....config.settings import DiscordSettings


async def send_ephemeral(interaction: discord.Interaction, message: str) -> None:
    """Send an ephemeral message, handling both fresh and already-responded interactions."""
    if interaction.response.is_done():
        await interaction.followup.send(message, ephemeral=True)
    else:
        await interaction.response.send_message(message, ephemeral=True)


async def get_member(interaction: discord.Interaction) -> discord.Member | None:
    """Validate that the interaction comes from a guild member. Returns None with error on failure."""
    if not interaction.guild:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
        return None

    user = interaction.user
    if not isinstance(user, discord.Member):
        await send_ephemeral(interaction, DiscordUIMessages.STATE_VERIFY_VOICE_FAILED)
        return None

    return user


async def get_voice_channel(
    interaction: discord.Interaction,
) -> tuple[discord.Member, discord.abc.Connectable] | None:
    """Return the member and their voice channel, or None with an error sent."""
    member = await get_member(interaction)
    if member is None:
        return None

    if not member.voice or not member.voice.channel:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_MUST_JOIN_VOICE)
        return None

    return member, member.voice.channel


def is_dj(member: discord.Member, settings: DiscordSettings) -> bool:
    """Admins, bot owners and holders of the configured DJ role may control playback directly."""
    if member.guild_permissions.administrator or settings.is_owner(member.id):
        return True
    if settings.dj_role_id is None:
        return False
    return any(role.id == settings.dj_role_id for role in member.roles)
