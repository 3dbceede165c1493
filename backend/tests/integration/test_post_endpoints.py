"""
Integration tests for post endpoints.

Tests the post API endpoint at /api/v1/posts/{slug} including:
- The three visibility tiers combined with blog privacy
- Login redirect for anonymous readers
- Identical 404s for hidden and missing posts
- View counting and comment loading only after access is granted
"""

from urllib.parse import parse_qs, urlsplit

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from scribe.api.deps import get_grant_store
from scribe.core.exceptions import StoreUnavailable
from scribe.main import app
from scribe.models.post import PostVisibility
from scribe.models.user import UserRole
from scribe.testing.factories import (
    create_blog,
    create_comment,
    create_post,
    create_user,
    get_auth_headers,
    grant_blog_access,
    grant_post_access,
)


class UnavailableGrantStore:
    async def has_blog_grant(self, blog_id: int, user_id: int) -> bool:
        raise StoreUnavailable("has_blog_grant")

    async def has_post_grant(self, post_id: int, user_id: int) -> bool:
        raise StoreUnavailable("has_post_grant")


@pytest.mark.integration
async def test_public_post_in_public_blog_anonymous(client: AsyncClient, session: AsyncSession):
    post = await create_post(session, await create_blog(session))

    response = await client.get(f"/api/v1/posts/{post.slug}")

    assert response.status_code == 200
    data = response.json()
    assert data["slug"] == post.slug
    assert data["view_count"] == 1


@pytest.mark.integration
async def test_post_without_blog(client: AsyncClient, session: AsyncSession):
    post = await create_post(session)

    response = await client.get(f"/api/v1/posts/{post.slug}")

    assert response.status_code == 200
    assert response.json()["blog_id"] is None


@pytest.mark.integration
async def test_public_post_in_private_blog_denied_to_non_grantee(client: AsyncClient, session: AsyncSession):
    blog = await create_blog(session, is_private=True)
    post = await create_post(session, blog, visibility=PostVisibility.public)
    stranger = await create_user(session)

    response = await client.get(f"/api/v1/posts/{post.slug}", headers=get_auth_headers(stranger))

    assert response.status_code == 404


@pytest.mark.integration
async def test_restricted_post_anonymous_redirects_with_callback(client: AsyncClient, session: AsyncSession):
    post = await create_post(session, await create_blog(session), visibility=PostVisibility.restricted)

    response = await client.get(f"/api/v1/posts/{post.slug}?ref=feed")

    assert response.status_code == 302
    location = urlsplit(response.headers["location"])
    assert location.path == "/login"
    assert parse_qs(location.query)["callbackUrl"] == [f"/api/v1/posts/{post.slug}?ref=feed"]


@pytest.mark.integration
async def test_restricted_post_grantee_allowed(client: AsyncClient, session: AsyncSession):
    post = await create_post(session, await create_blog(session), visibility=PostVisibility.restricted)
    reader = await create_user(session)
    await grant_post_access(session, post, [reader])

    response = await client.get(f"/api/v1/posts/{post.slug}", headers=get_auth_headers(reader))

    assert response.status_code == 200


@pytest.mark.integration
async def test_restricted_post_in_private_blog_needs_both_grants(client: AsyncClient, session: AsyncSession):
    blog = await create_blog(session, is_private=True)
    post = await create_post(session, blog, visibility=PostVisibility.restricted)
    reader = await create_user(session)
    await grant_post_access(session, post, [reader])

    denied = await client.get(f"/api/v1/posts/{post.slug}", headers=get_auth_headers(reader))
    assert denied.status_code == 404

    await grant_blog_access(session, blog, [reader])
    allowed = await client.get(f"/api/v1/posts/{post.slug}", headers=get_auth_headers(reader))
    assert allowed.status_code == 200


@pytest.mark.integration
async def test_private_post_only_author_and_admin(client: AsyncClient, session: AsyncSession):
    author = await create_user(session)
    admin = await create_user(session, role=UserRole.admin)
    reader = await create_user(session)
    blog = await create_blog(session, owner=author)
    post = await create_post(session, blog, visibility=PostVisibility.private)
    await grant_post_access(session, post, [reader])

    as_author = await client.get(f"/api/v1/posts/{post.slug}", headers=get_auth_headers(author))
    as_admin = await client.get(f"/api/v1/posts/{post.slug}", headers=get_auth_headers(admin))
    as_reader = await client.get(f"/api/v1/posts/{post.slug}", headers=get_auth_headers(reader))

    assert as_author.status_code == 200
    assert as_admin.status_code == 200
    assert as_reader.status_code == 404


@pytest.mark.integration
async def test_hidden_and_missing_posts_are_indistinguishable(client: AsyncClient, session: AsyncSession):
    post = await create_post(session, await create_blog(session), visibility=PostVisibility.private)
    stranger = await create_user(session)
    headers = get_auth_headers(stranger)

    hidden = await client.get(f"/api/v1/posts/{post.slug}", headers=headers)
    missing = await client.get("/api/v1/posts/no-such-post", headers=headers)

    assert hidden.status_code == missing.status_code == 404
    assert hidden.json() == missing.json() == {"detail": "Post not found"}


@pytest.mark.integration
async def test_denied_request_does_not_count_view(client: AsyncClient, session: AsyncSession):
    post = await create_post(session, await create_blog(session), visibility=PostVisibility.restricted)
    stranger = await create_user(session)

    anonymous = await client.get(f"/api/v1/posts/{post.slug}")
    forbidden = await client.get(f"/api/v1/posts/{post.slug}", headers=get_auth_headers(stranger))

    assert anonymous.status_code == 302
    assert forbidden.status_code == 404
    await session.refresh(post)
    assert post.view_count == 0


@pytest.mark.integration
async def test_allowed_request_returns_approved_comments_only(client: AsyncClient, session: AsyncSession):
    post = await create_post(session, await create_blog(session))
    approved = await create_comment(session, post, approved=True)
    await create_comment(session, post, approved=False)

    response = await client.get(f"/api/v1/posts/{post.slug}")

    assert response.status_code == 200
    assert [comment["id"] for comment in response.json()["comments"]] == [approved.id]


@pytest.mark.integration
async def test_store_outage_returns_service_unavailable(client: AsyncClient, session: AsyncSession):
    post = await create_post(session, await create_blog(session), visibility=PostVisibility.restricted)
    reader = await create_user(session)
    app.dependency_overrides[get_grant_store] = UnavailableGrantStore

    response = await client.get(f"/api/v1/posts/{post.slug}", headers=get_auth_headers(reader))

    assert response.status_code == 503
    await session.refresh(post)
    assert post.view_count == 0
