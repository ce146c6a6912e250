import traceback

import discord
from discord.ext import commands

from core import StatusBot

GENERIC_ERROR_MESSAGE = "⚠️ Something went wrong while running this command."
NO_PERMISSION_MESSAGE = "❌ You don't have permission to use this command."


class ErrorHandlerCog(commands.Cog):
    def __init__(self, bot: StatusBot):
        self.bot = bot
        bot.tree.error(coro=self.__dispatch_to_app_command_handler)

    async def __dispatch_to_app_command_handler(self, interaction: discord.Interaction,
                                                error: discord.app_commands.AppCommandError):
        self.bot.dispatch("app_command_error", interaction, error)

    @commands.Cog.listener()
    async def on_app_command_error(self, interaction: discord.Interaction, error: discord.app_commands.AppCommandError):
        if isinstance(error, discord.app_commands.CheckFailure):
            message = NO_PERMISSION_MESSAGE
        else:
            traceback.print_exception(type(error), error, error.__traceback__)
            print(f"[ERROR] Unhandled app command error: {error}")
            message = GENERIC_ERROR_MESSAGE

        if interaction.response.is_done():
            await interaction.followup.send(message, ephemeral=True)
        else:
            await interaction.response.send_message(message, ephemeral=True)


async def setup(bot: StatusBot):
    await bot.add_cog(ErrorHandlerCog(bot))
