from types import SimpleNamespace
from urllib.parse import parse_qs, urlsplit

import pytest

from scribe.core.exceptions import InvalidResource, LoginRequired, StoreUnavailable
from scribe.models.post import PostVisibility
from scribe.models.user import UserRole
from scribe.services.guard import AccessGuard, GuardState, TERMINAL_STATES, login_redirect_location
from scribe.services.visibility import ANONYMOUS, AccessVerdict, Principal


class StubGrants:
    def __init__(self, *, blog: bool = False, post: bool = False, fail: bool = False) -> None:
        self.blog = blog
        self.post = post
        self.fail = fail

    async def has_blog_grant(self, blog_id: int, user_id: int) -> bool:
        if self.fail:
            raise StoreUnavailable("has_blog_grant")
        return self.blog

    async def has_post_grant(self, post_id: int, user_id: int) -> bool:
        if self.fail:
            raise StoreUnavailable("has_post_grant")
        return self.post


def _blog(is_private: bool = True) -> SimpleNamespace:
    return SimpleNamespace(id=1, owner_id=100, is_private=is_private, slug="field-notes")


def _post(visibility: PostVisibility = PostVisibility.public) -> SimpleNamespace:
    return SimpleNamespace(id=5, blog_id=1, author_id=100, visibility=visibility, slug="first-entry")


READER = Principal(id=7, role=UserRole.user)


@pytest.mark.unit
def test_login_redirect_location_encodes_callback():
    location = login_redirect_location("/api/v1/posts/first-entry?ref=feed")
    parts = urlsplit(location)

    assert parts.path == "/login"
    assert parse_qs(parts.query) == {"callbackUrl": ["/api/v1/posts/first-entry?ref=feed"]}


@pytest.mark.unit
async def test_guard_allows_and_reaches_terminal_state():
    guard = AccessGuard(READER, StubGrants(blog=True), requested_path="/api/v1/blogs/field-notes")
    assert guard.state == GuardState.unresolved

    decision = await guard.authorize(blog=_blog())

    assert decision.verdict == AccessVerdict.allowed
    assert guard.state == GuardState.allowed
    assert guard.state in TERMINAL_STATES


@pytest.mark.unit
async def test_guard_redirects_anonymous_to_login_with_callback():
    guard = AccessGuard(ANONYMOUS, StubGrants(), requested_path="/api/v1/blogs/field-notes")

    with pytest.raises(LoginRequired) as exc_info:
        await guard.authorize(blog=_blog())

    assert guard.state == GuardState.denied_anonymous
    query = parse_qs(urlsplit(exc_info.value.location).query)
    assert query["callbackUrl"] == ["/api/v1/blogs/field-notes"]


@pytest.mark.unit
async def test_guard_hides_denied_post_as_missing():
    guard = AccessGuard(READER, StubGrants(blog=True), requested_path="/api/v1/posts/first-entry")

    with pytest.raises(InvalidResource) as exc_info:
        await guard.authorize(blog=_blog(), post=_post(PostVisibility.restricted))

    assert guard.state == GuardState.denied_authenticated
    assert exc_info.value.resource == "post"
    assert exc_info.value.identifier == "first-entry"


@pytest.mark.unit
async def test_guard_hides_denied_blog_as_missing():
    guard = AccessGuard(READER, StubGrants(), requested_path="/api/v1/blogs/field-notes")

    with pytest.raises(InvalidResource) as exc_info:
        await guard.authorize(blog=_blog())

    assert exc_info.value.resource == "blog"
    assert exc_info.value.identifier == "field-notes"


@pytest.mark.unit
async def test_guard_reports_mismatched_blog_under_requested_resource():
    guard = AccessGuard(READER, StubGrants(), requested_path="/api/v1/posts/first-entry")
    post = SimpleNamespace(id=5, blog_id=2, author_id=100, visibility=PostVisibility.public, slug="first-entry")

    with pytest.raises(InvalidResource) as exc_info:
        await guard.authorize(blog=_blog(is_private=False), post=post)

    assert exc_info.value.resource == "post"
    assert guard.state == GuardState.denied_authenticated


@pytest.mark.unit
async def test_guard_store_failure_propagates_and_stays_evaluating():
    guard = AccessGuard(READER, StubGrants(fail=True), requested_path="/api/v1/blogs/field-notes")

    with pytest.raises(StoreUnavailable):
        await guard.authorize(blog=_blog())

    assert guard.state == GuardState.evaluating
    assert guard.state not in TERMINAL_STATES


@pytest.mark.unit
async def test_guard_is_single_use():
    guard = AccessGuard(READER, StubGrants(), requested_path="/api/v1/blogs/field-notes")
    await guard.authorize(blog=_blog(is_private=False))

    with pytest.raises(RuntimeError):
        await guard.authorize(blog=_blog(is_private=False))
