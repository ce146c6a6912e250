from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class PresenceStatus(str, Enum):
    ONLINE = "online"
    IDLE = "idle"
    DND = "dnd"
    OFFLINE = "offline"

    @classmethod
    def from_discord(cls, status) -> "PresenceStatus":
        """discord.Status 또는 문자열을 추적용 상태로 변환합니다. invisible/알 수 없는 값은 offline."""
        value = getattr(status, "value", status)
        try:
            return cls(str(value))
        except ValueError:
            return cls.OFFLINE

    @property
    def column(self) -> str:
        return f"{self.value}_seconds"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class NoInterval:
    pass


@dataclass(frozen=True)
class OpenStatusInterval:
    status: PresenceStatus
    started_at: int  # epoch ms


@dataclass(frozen=True)
class OpenVoiceInterval:
    started_at: int  # epoch ms


StatusInterval = Union[NoInterval, OpenStatusInterval]
VoiceInterval = Union[NoInterval, OpenVoiceInterval]


@dataclass
class UserStatusRecord:
    user_id: int
    online_seconds: int = 0
    idle_seconds: int = 0
    dnd_seconds: int = 0
    offline_seconds: int = 0
    messages: int = 0
    voice_seconds: int = 0
    status_interval: StatusInterval = field(default_factory=NoInterval)
    voice_interval: VoiceInterval = field(default_factory=NoInterval)

    @property
    def total_status_seconds(self) -> int:
        return self.online_seconds + self.idle_seconds + self.dnd_seconds + self.offline_seconds


@dataclass(frozen=True)
class StatusChange:
    previous_status: PresenceStatus
    elapsed_seconds: int


def status_interval_from_columns(status_start: Optional[int], last_status: Optional[str]) -> StatusInterval:
    if status_start is None or last_status is None:
        return NoInterval()
    try:
        return OpenStatusInterval(status=PresenceStatus(last_status), started_at=int(status_start))
    except ValueError:
        return NoInterval()


def voice_interval_from_column(voice_start: Optional[int]) -> VoiceInterval:
    if voice_start is None:
        return NoInterval()
    return OpenVoiceInterval(started_at=int(voice_start))
