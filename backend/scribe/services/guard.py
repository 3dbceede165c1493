"""Guard/redirect orchestration for gated reader routes.

Each request walks ``unresolved -> evaluating -> <terminal>`` exactly once:

  - ``allowed``: the route renders the content
  - ``denied_anonymous``: ``LoginRequired`` carrying a login URL whose
    callback points back at the requested path
  - ``denied_authenticated``: ``InvalidResource``, answered with the same
    404 a missing resource gets

``StoreUnavailable`` propagates untouched and leaves the guard in
``evaluating``; the app turns it into a 503.

Routes must not perform side effects (view counting, comment fetches)
before ``authorize`` returns.
"""

import logging
from enum import Enum
from typing import Any
from urllib.parse import urlencode

from scribe.core.config import settings
from scribe.core.exceptions import InvalidResource, LoginRequired
from scribe.services.access import evaluate_access
from scribe.services.visibility import AccessDecision, AccessVerdict, GrantLookup, Principal

logger = logging.getLogger(__name__)


class GuardState(str, Enum):
    unresolved = "unresolved"
    evaluating = "evaluating"
    allowed = "allowed"
    denied_anonymous = "denied_anonymous"
    denied_authenticated = "denied_authenticated"


TERMINAL_STATES = frozenset(
    {GuardState.allowed, GuardState.denied_anonymous, GuardState.denied_authenticated}
)


def login_redirect_location(requested_path: str) -> str:
    query = urlencode({settings.LOGIN_CALLBACK_PARAM: requested_path})
    return f"{settings.LOGIN_PATH}?{query}"


class AccessGuard:
    """Single-use gate for one request."""

    def __init__(self, principal: Principal, grants: GrantLookup, *, requested_path: str) -> None:
        self.principal = principal
        self.grants = grants
        self.requested_path = requested_path
        self.state = GuardState.unresolved

    async def authorize(self, *, blog: Any | None, post: Any | None = None) -> AccessDecision:
        if self.state != GuardState.unresolved:
            raise RuntimeError(f"AccessGuard already used (state={self.state.value})")
        self.state = GuardState.evaluating

        resource = "post" if post is not None else "blog"
        identifier = getattr(post if post is not None else blog, "slug", None)

        try:
            decision = await evaluate_access(self.principal, blog, post, grants=self.grants)
        except InvalidResource:
            self.state = GuardState.denied_authenticated
            raise InvalidResource(resource, identifier) from None

        self.state = GuardState(decision.verdict.value)
        if decision.verdict == AccessVerdict.denied_anonymous:
            logger.debug("Redirecting anonymous reader of %s to login", self.requested_path)
            raise LoginRequired(login_redirect_location(self.requested_path))
        if decision.verdict == AccessVerdict.denied_authenticated:
            logger.debug(
                "Hiding %s %r from principal %s", resource, identifier, self.principal.id
            )
            raise InvalidResource(resource, identifier)
        return decision
