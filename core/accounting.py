import datetime
from typing import Callable, Iterable, Optional, Tuple

import aiosqlite

from core.local.repository import StatusRepository
from core.model import (
    NoInterval,
    OpenStatusInterval,
    OpenVoiceInterval,
    PresenceStatus,
    StatusChange,
)

Clock = Callable[[], int]


def now_ms() -> int:
    return int(datetime.datetime.now(datetime.timezone.utc).timestamp() * 1000)


def elapsed_seconds(started_at: int, now: int) -> int:
    """시작 시각부터 경과한 초. 1초 미만은 버리고, 시계가 뒤로 간 경우 0."""
    return max(0, (now - started_at) // 1000)


class StatusAccounting:
    """
    유저의 현재 상태 구간을 열고 닫으며, 경과 시간을 해당 상태의 누적 칸에 더합니다.

    저장소 오류는 로그만 남기고 무시합니다 (해당 호출은 아무 일도 하지 않은 것으로 처리).
    """

    def __init__(self, store: StatusRepository, clock: Clock = now_ms):
        self.store = store
        self.clock = clock

    async def start_status(self, user_id: int, status: PresenceStatus) -> None:
        # 열린 구간이 있어도 정산하지 않고 덮어씁니다. 상태 변경은 transition 을 거쳐야 시간이 정산됩니다.
        try:
            await self.store.ensure(user_id)
            await self.store.update(user_id, status_interval=OpenStatusInterval(status, self.clock()))
        except aiosqlite.Error as e:
            print(f"[StatusTracker] start_status failed for {user_id}: {e}")

    async def end_status(self, user_id: int) -> Optional[StatusChange]:
        try:
            record = await self.store.get(user_id)
            if record is None or not isinstance(record.status_interval, OpenStatusInterval):
                return None

            interval = record.status_interval
            now = self.clock()
            elapsed = elapsed_seconds(interval.started_at, now)
            # 구간을 닫지 않고 같은 상태로 now 부터 다시 엽니다.
            await self.store.update(
                user_id,
                increments={interval.status.column: elapsed},
                status_interval=OpenStatusInterval(interval.status, now),
            )
        except aiosqlite.Error as e:
            print(f"[StatusTracker] end_status failed for {user_id}: {e}")
            return None
        return StatusChange(previous_status=interval.status, elapsed_seconds=elapsed)

    async def transition(self, user_id: int, old: PresenceStatus, new: PresenceStatus) -> Optional[StatusChange]:
        if old == new:
            return None
        try:
            record = await self.store.get(user_id)
        except aiosqlite.Error as e:
            print(f"[StatusTracker] transition failed for {user_id}: {e}")
            return None
        # 같은 변경이 공유 서버 수만큼 들어옵니다. 이미 new 구간이 열려 있으면 중복 이벤트입니다.
        if record is not None and isinstance(record.status_interval, OpenStatusInterval) \
                and record.status_interval.status == new:
            return None
        change = await self.end_status(user_id)
        await self.start_status(user_id, new)
        return change


class VoiceAccounting:
    def __init__(self, store: StatusRepository, clock: Clock = now_ms):
        self.store = store
        self.clock = clock

    async def join(self, user_id: int) -> None:
        try:
            await self.store.ensure(user_id)
            await self.store.update(user_id, voice_interval=OpenVoiceInterval(self.clock()))
        except aiosqlite.Error as e:
            print(f"[StatusTracker] voice join failed for {user_id}: {e}")

    async def leave(self, user_id: int) -> Optional[int]:
        try:
            record = await self.store.get(user_id)
            if record is None or not isinstance(record.voice_interval, OpenVoiceInterval):
                return None

            elapsed = elapsed_seconds(record.voice_interval.started_at, self.clock())
            await self.store.update(
                user_id,
                increments={"voice_seconds": elapsed},
                voice_interval=NoInterval(),
            )
        except aiosqlite.Error as e:
            print(f"[StatusTracker] voice leave failed for {user_id}: {e}")
            return None
        return elapsed

    async def on_voice_state(self, user_id: int, was_connected: bool, is_connected: bool) -> Optional[int]:
        """채널 간 이동은 하나의 연속된 구간으로 취급하므로 아무것도 하지 않습니다."""
        if not was_connected and is_connected:
            await self.join(user_id)
        elif was_connected and not is_connected:
            return await self.leave(user_id)
        return None


class MessageCounter:
    def __init__(self, store: StatusRepository):
        self.store = store

    async def record(self, user_id: int) -> None:
        try:
            await self.store.ensure(user_id)
            await self.store.update(user_id, increments={"messages": 1})
        except aiosqlite.Error as e:
            print(f"[StatusTracker] message count failed for {user_id}: {e}")


async def reconcile(store: StatusRepository, members: Iterable[Tuple[int, PresenceStatus, bool]],
                    clock: Clock = now_ms) -> int:
    """
    시작 시 (user_id, 현재 상태, 음성 접속 여부) 목록으로 모든 구간을 지금부터 다시 엽니다.
    이전 실행에서 열려 있던 구간은 정산하지 않고 버립니다.
    """
    now = clock()
    entries = [
        (user_id, OpenStatusInterval(status, now), OpenVoiceInterval(now) if connected else NoInterval())
        for user_id, status, connected in members
    ]
    try:
        return await store.reset_intervals(entries)
    except aiosqlite.Error as e:
        print(f"[StatusTracker] reconcile failed: {e}")
        return 0
