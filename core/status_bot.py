import os

import discord
from discord.ext import commands

from core.config import BotConfig
from core.local.database_manager import DatabaseManager

COGS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "cogs")


class StatusBot(commands.Bot):

    def __init__(self, config: BotConfig, *args, **kwargs):
        kwargs.setdefault("application_id", config.client_id)
        super().__init__(*args, **kwargs)
        self.config = config
        self.db: DatabaseManager | None = None

    async def setup_hook(self) -> None:
        """
        로그인 전에 실행되는 초기화 함수입니다.
        DB 연결/스키마 확인, Cog 로딩, 슬래시 커맨드 등록을 순서대로 처리합니다.
        """
        print("[DB] Connecting to the database...")
        self.db = await DatabaseManager.create(self.config.db_path)
        print(f"[DB] Connected. {await self.db.status.count()} tracked users.")

        print("Loading cogs...")
        for filename in sorted(os.listdir(COGS_DIR)):
            if filename.endswith(".py") and not filename.startswith("__"):
                try:
                    await self.load_extension(f'cogs.{filename[:-3]}')
                    print(f'✅ Successfully loaded cog: {filename}')
                except commands.ExtensionError as e:
                    print(f'❌ Failed to load cog {filename}: {e}')

        # 전역 커맨드 등록 (upsert). 실패해도 봇은 계속 실행됩니다.
        print("Syncing command tree...")
        try:
            synced = await self.tree.sync()
            print(f"Command tree synced. ({len(synced)} commands)")
        except discord.HTTPException as e:
            print(f"[ERROR] Failed to sync command tree: {e}")

    async def on_ready(self):
        print('------')
        print(f'Logged in as {self.user} (ID: {self.user.id})')
        print(f'Discord.py Version: {discord.__version__}')
        print('------')

    async def close(self):
        if self.db:
            await self.db.close()
            print("[DB] Database connection closed.")
        await super().close()
