"""Utility functions for formatting Discord messages."""

from __future__ import annotations

from functools import cache
from typing import TYPE_CHECKING

import discord

from discord_jukebox.domain.shared.messages import DiscordUIMessages

if TYPE_CHECKING:
    from ..application.queries.get_queue import QueuePage


@cache
def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"


def build_queue_embed(page: QueuePage) -> discord.Embed:
    """Render one queue page as an embed with a page footer."""
    embed = discord.Embed(
        title=DiscordUIMessages.EMBED_QUEUE_TITLE,
        description=page.render_lines(),
        color=discord.Color.blurple(),
    )
    embed.set_footer(text=page.footer)
    return embed
