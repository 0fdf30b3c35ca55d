"""
api/limiter.py -- Rate limiting for the credential endpoints.

api/main.py mounts `limiter` through SlowAPIMiddleware; api/routes/auth.py
decorates /signup and /signin with `credential_limit`. Both routes draw on
the one in-memory counter store owned by `limiter`, keyed on client IP.

LOGIN_RATE_LIMIT (default 10/minute) sets the budget. Each decorated route
gets its own counter, so a client may sign up and sign in independently.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from core.config import get_settings

limiter = Limiter(key_func=get_remote_address, storage_uri="memory://")

# Apply ABOVE @router.post so FastAPI still sees the undecorated signature.
credential_limit = limiter.limit(get_settings().login_rate_limit)
