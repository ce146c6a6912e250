import discord
from discord.ext import commands
from dotenv import load_dotenv

from core import StatusBot
from core.config import BotConfig

load_dotenv()

intents = discord.Intents.default()
intents.members = True
intents.presences = True
intents.message_content = True


def create_bot(config: BotConfig) -> StatusBot:
    return StatusBot(config, command_prefix=commands.when_mentioned, intents=intents, help_command=None)


if __name__ == '__main__':
    config = BotConfig.from_env()
    bot = create_bot(config)
    bot.run(config.token)
