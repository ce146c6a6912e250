import os
from dataclasses import dataclass
from typing import Mapping, Optional

from core.local.database_manager import DB_PATH


def _optional_id(environ: Mapping[str, str], key: str) -> Optional[int]:
    value = (environ.get(key) or "").strip()
    if not value:
        return None
    if not value.isdigit():
        raise ValueError(f"{key} 환경변수는 숫자 ID여야 합니다: {value!r}")
    return int(value)


@dataclass(frozen=True)
class BotConfig:
    token: str
    log_channel_id: Optional[int] = None
    client_id: Optional[int] = None
    db_path: str = DB_PATH

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BotConfig":
        environ = os.environ if environ is None else environ
        token = (environ.get('DISCORD_BOT_TOKEN') or "").strip()
        if not token:
            raise ValueError('DISCORD_BOT_TOKEN 환경변수가 설정되어 있지 않습니다.')
        return cls(
            token=token,
            log_channel_id=_optional_id(environ, 'LOG_CHANNEL_ID'),
            client_id=_optional_id(environ, 'CLIENT_ID'),
            db_path=(environ.get('DATABASE_PATH') or "").strip() or DB_PATH,
        )
