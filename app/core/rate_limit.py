from slowapi import Limiter
from slowapi.util import get_remote_address
from app.config import settings

# Limits are callables so they are read from settings on every request
limiter = Limiter(key_func=get_remote_address, default_limits=[lambda: settings.rate_limit])
