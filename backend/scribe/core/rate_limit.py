"""Rate limiting for the write-capable public routes (login, comment submission)."""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from scribe.core.config import settings

# Checked in order; the first one present wins
FORWARDING_HEADERS = ("X-Forwarded-For", "X-Real-IP")


def get_real_client_ip(request: Request) -> str:
    """Rate-limit key for a request.

    Forwarding headers are only read when ``BEHIND_PROXY`` is set; otherwise a
    client could pick its own bucket by sending them.
    """
    if settings.BEHIND_PROXY:
        for header in FORWARDING_HEADERS:
            value = request.headers.get(header, "").split(",")[0].strip()
            if value:
                return value
    return get_remote_address(request)


limiter = Limiter(key_func=get_real_client_ip)
