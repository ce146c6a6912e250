import discord
from discord.ext import commands

from core import StatusBot
from core.accounting import StatusAccounting, VoiceAccounting, MessageCounter, reconcile
from core.model import PresenceStatus
from view.status_embeds import build_status_change_embed


class StatusTrackerCog(commands.Cog):
    def __init__(self, bot: StatusBot):
        self.bot = bot
        self.status = StatusAccounting(bot.db.status)
        self.voice = VoiceAccounting(bot.db.status)
        self.messages = MessageCounter(bot.db.status)
        self._reconciled = False

    @commands.Cog.listener()
    async def on_ready(self):
        # 재접속 때마다 on_ready가 다시 오므로 프로세스 시작 시 한 번만 실행합니다.
        if self._reconciled:
            return
        self._reconciled = True
        count = await self.reconcile_members()
        print(f"[StatusTracker] Reconciled {count} members.")

    async def reconcile_members(self) -> int:
        """
        모든 서버의 멤버에 대해 현재 상태로 새 구간을 엽니다.
        이전 실행에서 열려 있던 구간은 정산하지 않고 버립니다.
        """
        members = {}
        for guild in self.bot.guilds:
            if not guild.chunked:
                await guild.chunk()
            for member in guild.members:
                if member.id in members:
                    continue
                members[member.id] = (
                    member.id,
                    PresenceStatus.from_discord(member.status),
                    bool(member.voice and member.voice.channel),
                )
        return await reconcile(self.bot.db.status, members.values(), clock=self.status.clock)

    @commands.Cog.listener()
    async def on_presence_update(self, before: discord.Member, after: discord.Member):
        if after.guild is None:
            return

        old_status = PresenceStatus.from_discord(before.status)
        new_status = PresenceStatus.from_discord(after.status)
        if old_status == new_status:
            return

        change = await self.status.transition(after.id, old_status, new_status)
        if change is None or change.previous_status == new_status:
            return
        await self._notify(after, change, new_status)

    async def _notify(self, member: discord.Member, change, new_status: PresenceStatus):
        channel_id = self.bot.config.log_channel_id
        if not channel_id:
            return
        channel = self.bot.get_channel(channel_id)
        if channel is None:
            return

        embed = build_status_change_embed(str(member), change, new_status)
        try:
            await channel.send(embed=embed)
        except discord.HTTPException as e:
            print(f"[StatusTracker] Failed to send status notification: {e}")

    @commands.Cog.listener()
    async def on_voice_state_update(self, member: discord.Member, before: discord.VoiceState,
                                    after: discord.VoiceState):
        await self.voice.on_voice_state(
            member.id,
            was_connected=before.channel is not None,
            is_connected=after.channel is not None,
        )

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        if message.author.bot or message.is_system():
            return
        await self.messages.record(message.author.id)


async def setup(bot: StatusBot):
    await bot.add_cog(StatusTrackerCog(bot))
