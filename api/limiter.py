"""
api/limiter.py -- Shared slowapi rate limiter instance.

Imported by api/main.py (mounted as middleware and attached to app.state) and
by api/routes/v1/auth.py (per-route limits via @limiter.limit()). Every route
must share this one instance, otherwise each module counts on its own and the
limits never trigger.

Counters live in RATE_LIMIT_STORAGE_URI. The default memory:// is per-process;
point it at redis:// when running more than one worker.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from core.config import get_settings

_settings = get_settings()

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=_settings.rate_limit_storage_uri,
    enabled=_settings.rate_limit_enabled,
)
