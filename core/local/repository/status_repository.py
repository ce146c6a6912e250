import aiosqlite
from typing import Iterable, Mapping, Optional, Tuple

from core.model import (
    OpenStatusInterval,
    OpenVoiceInterval,
    StatusInterval,
    VoiceInterval,
    UserStatusRecord,
)
from core.model.status_models import status_interval_from_columns, voice_interval_from_column

COUNTER_COLUMNS = frozenset({
    "online_seconds",
    "idle_seconds",
    "dnd_seconds",
    "offline_seconds",
    "messages",
    "voice_seconds",
})


def _status_columns(interval: StatusInterval) -> Tuple[Optional[int], Optional[str]]:
    if isinstance(interval, OpenStatusInterval):
        return interval.started_at, interval.status.value
    return None, None


def _voice_column(interval: VoiceInterval) -> Optional[int]:
    if isinstance(interval, OpenVoiceInterval):
        return interval.started_at
    return None


class StatusRepository:
    def __init__(self, db: aiosqlite.Connection):
        self.db = db

    async def ensure(self, user_id: int) -> None:
        await self.db.execute("INSERT OR IGNORE INTO status_tracker (user_id) VALUES (?)", (user_id,))
        await self.db.commit()

    async def get(self, user_id: int) -> Optional[UserStatusRecord]:
        cursor = await self.db.execute("SELECT * FROM status_tracker WHERE user_id = ?", (user_id,))
        row = await cursor.fetchone()
        if not row:
            return None
        return UserStatusRecord(
            user_id=row['user_id'],
            online_seconds=row['online_seconds'],
            idle_seconds=row['idle_seconds'],
            dnd_seconds=row['dnd_seconds'],
            offline_seconds=row['offline_seconds'],
            messages=row['messages'],
            voice_seconds=row['voice_seconds'],
            status_interval=status_interval_from_columns(row['status_start'], row['last_status']),
            voice_interval=voice_interval_from_column(row['voice_start']),
        )

    async def update(self, user_id: int, increments: Optional[Mapping[str, int]] = None,
                     status_interval: Optional[StatusInterval] = None,
                     voice_interval: Optional[VoiceInterval] = None) -> None:
        """
        한 번의 UPDATE 문으로 부분 변경을 적용합니다.

        increments 의 카운터 컬럼은 `col = col + ?` 형태로 더해지고,
        구간(interval) 값은 nullable 컬럼 쌍으로 변환되어 저장됩니다.
        None 으로 넘긴 항목은 건드리지 않습니다.
        """
        assignments = []
        params = []

        for column, delta in (increments or {}).items():
            if column not in COUNTER_COLUMNS:
                raise ValueError(f"Unknown counter column: {column}")
            if delta < 0:
                raise ValueError(f"Counters never decrease ({column} += {delta})")
            assignments.append(f"{column} = {column} + ?")
            params.append(delta)

        if status_interval is not None:
            params.extend(_status_columns(status_interval))
            assignments.extend(("status_start = ?", "last_status = ?"))

        if voice_interval is not None:
            params.append(_voice_column(voice_interval))
            assignments.append("voice_start = ?")

        if not assignments:
            return

        await self.db.execute(
            f"UPDATE status_tracker SET {', '.join(assignments)} WHERE user_id = ?",
            (*params, user_id)
        )
        await self.db.commit()

    async def reset_intervals(self, entries: Iterable[Tuple[int, StatusInterval, VoiceInterval]]) -> int:
        """
        여러 유저의 상태/음성 구간을 한 번에 덮어씁니다. 없는 행은 새로 만듭니다.
        열려 있던 구간은 정산하지 않습니다. 커밋은 마지막에 한 번만 합니다.
        """
        rows = [
            (*_status_columns(status_interval), _voice_column(voice_interval), user_id)
            for user_id, status_interval, voice_interval in entries
        ]
        if not rows:
            return 0

        await self.db.executemany(
            "INSERT OR IGNORE INTO status_tracker (user_id) VALUES (?)",
            [(row[-1],) for row in rows]
        )
        await self.db.executemany(
            "UPDATE status_tracker SET status_start = ?, last_status = ?, voice_start = ? WHERE user_id = ?",
            rows
        )
        await self.db.commit()
        return len(rows)

    async def count(self) -> int:
        cursor = await self.db.execute("SELECT COUNT(*) FROM status_tracker")
        row = await cursor.fetchone()
        return row[0] if row else 0
