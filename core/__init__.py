from core.status_bot import StatusBot
