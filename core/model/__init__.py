from core.model.status_models import (
    PresenceStatus,
    NoInterval,
    OpenStatusInterval,
    OpenVoiceInterval,
    StatusInterval,
    VoiceInterval,
    UserStatusRecord,
    StatusChange,
)
