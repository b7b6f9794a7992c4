import os

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Shared by the app factory and the search/cache blueprints, which add their
# own per-IP limits on top of the default one
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=os.getenv("RATELIMIT_STORAGE_URL", "memory://"),
    strategy="fixed-window",
    default_limits=[os.getenv("RATELIMIT_DEFAULT", "600 per hour")],
    headers_enabled=True,
)
