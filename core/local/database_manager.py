import os

import aiosqlite

from core.local.repository import StatusRepository

DB_PATH = './data/status.db'
LOCAL_DIR = os.path.dirname(os.path.abspath(__file__))
SCHEMA_PATH = os.path.join(LOCAL_DIR, 'schema.sql')


class DatabaseVersionError(Exception):
    pass


class DatabaseManager:
    DB_VERSION = 1

    def __init__(self, connection: aiosqlite.Connection):
        self._db = connection
        self.status = StatusRepository(self._db)

    @classmethod
    async def create(cls, db_path: str = DB_PATH):
        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
        connection = await aiosqlite.connect(db_path)
        connection.row_factory = aiosqlite.Row

        try:
            with open(SCHEMA_PATH, 'r', encoding='utf-8') as f:
                await connection.executescript(f.read())
            await connection.commit()

            # 현재 버전 확인
            current_version = await cls._get_db_version(connection)

            if current_version > cls.DB_VERSION:
                raise DatabaseVersionError(
                    f"DB version ({current_version}) is newer than supported version ({cls.DB_VERSION})"
                )
        except BaseException:
            await connection.close()
            raise

        return cls(connection)

    @staticmethod
    async def _get_db_version(connection: aiosqlite.Connection) -> int:
        async with connection.execute("SELECT value FROM db_meta WHERE key = 'version'") as cursor:
            row = await cursor.fetchone()
            return int(row['value']) if row else 0

    async def close(self):
        await self._db.close()
