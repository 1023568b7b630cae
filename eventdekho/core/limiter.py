from slowapi import Limiter
from slowapi.util import get_remote_address
from eventdekho.core.config import settings

# Shared by app.state and the route decorators so limits and the 429 handler agree
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
