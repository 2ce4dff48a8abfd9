"""Base class for interactive Discord views with common patterns."""

from __future__ import annotations

import logging

import discord

from discord_jukebox.domain.shared.exceptions import DomainError
from discord_jukebox.domain.shared.messages import DiscordUIMessages, LogTemplates

logger = logging.getLogger(__name__)


class BaseInteractiveView(discord.ui.View):
    """Base view restricted to one user, with message tracking and a one-shot finish.

    ``_finish`` disables every component and edits the message once; later
    calls (a timeout racing a click, say) are no-ops.
    """

    def __init__(self, *, owner_id: int, not_yours_message: str, timeout: float | None = 180.0) -> None:
        super().__init__(timeout=timeout)
        self._owner_id = owner_id
        self._not_yours_message = not_yours_message
        self._message: discord.Message | None = None
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    def set_message(self, message: discord.Message) -> None:
        self._message = message

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id != self._owner_id:
            await interaction.response.send_message(self._not_yours_message, ephemeral=True)
            return False
        return True

    async def on_error(
        self, interaction: discord.Interaction, error: Exception, item: discord.ui.Item
    ) -> None:
        """Report a failed component callback to the user who triggered it."""
        if isinstance(error, DomainError):
            logger.info(LogTemplates.VIEW_ACTION_REJECTED, type(self).__name__, error.message)
            error_msg = error.message
        else:
            logger.exception(
                LogTemplates.VIEW_ACTION_ERROR, type(self).__name__, error, exc_info=error
            )
            error_msg = DiscordUIMessages.ERROR_GENERIC.format(error=error)

        try:
            if interaction.response.is_done():
                await interaction.followup.send(error_msg, ephemeral=True)
            else:
                await interaction.response.send_message(error_msg, ephemeral=True)
        except discord.HTTPException:
            logger.warning(LogTemplates.BOT_ERROR_MESSAGE_SEND_FAILED)

    def _disable_items(self) -> None:
        for item in self.children:
            if isinstance(item, discord.ui.Button | discord.ui.Select):
                item.disabled = True

    async def _finish(self, *, content: str | None = None, **kwargs) -> bool:
        """Close the view and edit its message. Returns False if already finished."""
        if self._finished:
            return False
        self._finished = True
        self.stop()
        self._disable_items()
        if self._message is not None:
            try:
                await self._message.edit(content=content, view=self, **kwargs)
            except discord.HTTPException:
                logger.debug("Failed to edit view message on finish")
        return True
