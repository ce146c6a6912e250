from core.local.repository.status_repository import StatusRepository
