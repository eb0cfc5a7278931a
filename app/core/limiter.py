from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

# Shared limiter; routes opt in with @limiter.limit(...)
limiter = Limiter(key_func=get_remote_address, enabled=settings.enable_rate_limit)
