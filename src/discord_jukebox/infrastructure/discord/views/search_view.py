"""Select menu letting the requester pick one of several search results."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

import discord

from discord_jukebox.domain.music.entities import Track
from discord_jukebox.domain.shared.constants import LimitConstants, TimeConstants
from discord_jukebox.domain.shared.messages import DiscordUIMessages
from discord_jukebox.infrastructure.discord.views.base_view import BaseInteractiveView
from discord_jukebox.utils.reply import truncate

logger = logging.getLogger(__name__)

SelectionCallback = Callable[[discord.Interaction, Track], Awaitable[None]]


class SearchResultSelect(discord.ui.Select["SearchView"]):
    def __init__(self, results: list[Track]) -> None:
        options = [
            discord.SelectOption(
                label=truncate(track.title, LimitConstants.SELECT_LABEL_MAX),
                description=track.duration_formatted,
                value=str(index),
            )
            for index, track in enumerate(results)
        ]
        super().__init__(
            placeholder=DiscordUIMessages.SEARCH_PLACEHOLDER,
            min_values=1,
            max_values=1,
            options=options,
        )

    async def callback(self, interaction: discord.Interaction) -> None:
        assert self.view is not None
        await self.view.select(interaction, int(self.values[0]))


class SearchView(BaseInteractiveView):
    """Lists up to five results; the first selection by the requester is queued."""

    def __init__(
        self,
        *,
        requester_id: int,
        results: list[Track],
        on_select: SelectionCallback,
        timeout: float = TimeConstants.SEARCH_SELECT_TIMEOUT,
    ) -> None:
        super().__init__(
            owner_id=requester_id,
            not_yours_message=DiscordUIMessages.SEARCH_NOT_YOURS,
            timeout=timeout,
        )
        self._results = results
        self._on_select = on_select
        self.add_item(SearchResultSelect(results))

    async def select(self, interaction: discord.Interaction, index: int) -> None:
        if self.finished:
            return
        track = self._results[index]
        await interaction.response.defer()
        await self._finish(content=DiscordUIMessages.SEARCH_PROMPT)
        await self._on_select(interaction, track)

    async def on_timeout(self) -> None:
        await self._finish(content=DiscordUIMessages.SEARCH_TIMEOUT)
