import discord

from core.model import PresenceStatus, StatusChange, UserStatusRecord


def build_status_change_embed(user_name: str, change: StatusChange, new_status: PresenceStatus) -> discord.Embed:
    embed = discord.Embed(
        title="Status Changed",
        description=f"{user_name} changed from **{change.previous_status}** to **{new_status}**",
        color=discord.Color.blue(),
        timestamp=discord.utils.utcnow(),
    )
    embed.add_field(name="Time in previous status", value=f"{change.elapsed_seconds} seconds", inline=True)
    return embed


def build_status_stats_embed(user_name: str, record: UserStatusRecord) -> discord.Embed:
    embed = discord.Embed(
        title=f"Status Stats for {user_name}",
        color=discord.Color.green(),
        timestamp=discord.utils.utcnow(),
    )
    embed.add_field(name="Online Time", value=f"{record.online_seconds}s", inline=True)
    embed.add_field(name="Idle Time", value=f"{record.idle_seconds}s", inline=True)
    embed.add_field(name="DND Time", value=f"{record.dnd_seconds}s", inline=True)
    embed.add_field(name="Offline Time", value=f"{record.offline_seconds}s", inline=True)
    embed.add_field(name="Messages Sent", value=f"{record.messages}", inline=True)
    embed.add_field(name="Voice Time", value=f"{record.voice_seconds}s", inline=True)
    return embed


def no_activity_message(user_name: str) -> str:
    return f"{user_name} has no recorded activity."
