"""Discord UI views and components."""

from __future__ import annotations

from discord_jukebox.infrastructure.discord.views.base_view import BaseInteractiveView
from discord_jukebox.infrastructure.discord.views.queue_view import QueueView
from discord_jukebox.infrastructure.discord.views.search_view import SearchView

__all__ = [
    "BaseInteractiveView",
    "QueueView",
    "SearchView",
]
