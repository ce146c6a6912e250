from typing import Optional, Union

import aiosqlite
import discord
from discord import app_commands
from discord.ext import commands

from core import StatusBot
from view.status_embeds import build_status_stats_embed, no_activity_message


class StatusStatsCog(commands.Cog):
    def __init__(self, bot: StatusBot):
        self.bot = bot

    @app_commands.command(name="statusstats", description="Shows total status stats for a user")
    @app_commands.describe(target="User to check")
    async def statusstats(self, interaction: discord.Interaction,
                          target: Optional[Union[discord.Member, discord.User]] = None):
        user = target or interaction.user

        # 열린 구간은 정산하지 않고 저장된 누적값만 보여줍니다.
        try:
            record = await self.bot.db.status.get(user.id)
            if record is None:
                await self.bot.db.status.ensure(user.id)
        except aiosqlite.Error as e:
            print(f"[StatusTracker] Failed to read stats for {user.id}: {e}")
            record = None

        if record is None:
            await interaction.response.send_message(no_activity_message(str(user)))
            return

        await interaction.response.send_message(embed=build_status_stats_embed(str(user), record))


async def setup(bot: StatusBot):
    await bot.add_cog(StatusStatsCog(bot))
