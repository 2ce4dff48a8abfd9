"""Paginated queue display with Previous / Next buttons."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import discord

from discord_jukebox.application.queries.get_queue import QueuePage
from discord_jukebox.domain.shared.constants import TimeConstants
from discord_jukebox.domain.shared.messages import DiscordUIMessages
from discord_jukebox.infrastructure.discord.views.base_view import BaseInteractiveView
from discord_jukebox.utils.reply import build_queue_embed

PageLoader = Callable[[int], Awaitable[QueuePage]]


class QueueView(BaseInteractiveView):
    """Pages are reloaded on every click so the listing reflects the live queue."""

    def __init__(
        self,
        *,
        requester_id: int,
        page: QueuePage,
        load_page: PageLoader,
        timeout: float = TimeConstants.QUEUE_PAGINATION_TIMEOUT,
    ) -> None:
        super().__init__(
            owner_id=requester_id,
            not_yours_message=DiscordUIMessages.QUEUE_NOT_YOURS,
            timeout=timeout,
        )
        self._page = page
        self._load_page = load_page
        self._sync_buttons()

    @property
    def page(self) -> QueuePage:
        return self._page

    def _sync_buttons(self) -> None:
        self.previous_button.disabled = not self._page.has_previous
        self.next_button.disabled = not self._page.has_next

    async def _show(self, interaction: discord.Interaction, page_number: int) -> None:
        self._page = await self._load_page(page_number)
        self._sync_buttons()
        await interaction.response.edit_message(embed=build_queue_embed(self._page), view=self)

    @discord.ui.button(label=DiscordUIMessages.BUTTON_PREVIOUS, style=discord.ButtonStyle.secondary)
    async def previous_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[QueueView]
    ) -> None:
        await self._show(interaction, max(1, self._page.page - 1))

    @discord.ui.button(label=DiscordUIMessages.BUTTON_NEXT, style=discord.ButtonStyle.secondary)
    async def next_button(
        self, interaction: discord.Interaction, button: discord.ui.Button[QueueView]
    ) -> None:
        await self._show(interaction, self._page.page + 1)

    async def on_timeout(self) -> None:
        await self._finish()
